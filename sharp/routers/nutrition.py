"""
FastAPI router for the FeelSharper food diary.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from common.utils import success_response
from sharp.dependencies import get_food_log_service, require_auth
from sharp.pipelines import fitness as pipelines
from sharp.schemas.fitness import DATE_PATTERN, FoodLogCreateRequest
from sharp.services.fitness.food_log_service import FoodLogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nutrition", tags=["nutrition"])


@router.get("/diary")
async def get_diary(
    user: Annotated[dict, Depends(require_auth)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
    date: Optional[str] = Query(None, pattern=DATE_PATTERN, description="YYYY-MM-DD, default today"),
):
    """Get one day's entries grouped by meal with day totals."""
    diary = await pipelines.get_diary_pipeline(food_log_service, str(user["_id"]), date)
    return success_response(diary)


@router.post("/diary", status_code=201)
async def add_diary_entry(
    body: FoodLogCreateRequest,
    user: Annotated[dict, Depends(require_auth)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
):
    entry = await pipelines.add_diary_entry_pipeline(
        food_log_service=food_log_service,
        user_id=str(user["_id"]),
        data=body.model_dump(),
    )
    return success_response(entry, "Food logged")


@router.delete("/diary/{entry_id}")
async def delete_diary_entry(
    entry_id: str,
    user: Annotated[dict, Depends(require_auth)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
):
    await pipelines.delete_diary_entry_pipeline(food_log_service, str(user["_id"]), entry_id)
    return success_response(message="Entry deleted")
