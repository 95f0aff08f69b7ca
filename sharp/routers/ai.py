"""
FastAPI router for AI features.

Every endpoint counts against the user's monthly tier limit; a used-up
allowance is reported as 429 with the usage summary.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response
from sharp.dependencies import (
    get_ai_orchestrator,
    get_food_log_service,
    get_usage_service,
    get_workout_service,
    require_auth,
)
from sharp.pipelines import ai as pipelines
from sharp.schemas.usage import AIParseRequest, CoachRequest
from sharp.services.ai.orchestrator import AIOrchestrator
from sharp.services.fitness.food_log_service import FoodLogService
from sharp.services.fitness.workout_service import WorkoutService
from sharp.services.usage.usage_service import UsageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/parse-workout")
async def parse_workout(
    body: AIParseRequest,
    user: Annotated[dict, Depends(require_auth)],
    orchestrator: Annotated[AIOrchestrator, Depends(get_ai_orchestrator)],
    usage_service: Annotated[UsageService, Depends(get_usage_service)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
):
    """Parse a workout description with AI and save it unless save=false."""
    result = await pipelines.ai_parse_workout_pipeline(
        orchestrator=orchestrator,
        usage_service=usage_service,
        workout_service=workout_service,
        user=user,
        text=body.input,
        save=body.save,
        date=body.date,
    )
    return success_response(result)


@router.post("/parse-food")
async def parse_food(
    body: AIParseRequest,
    user: Annotated[dict, Depends(require_auth)],
    orchestrator: Annotated[AIOrchestrator, Depends(get_ai_orchestrator)],
    usage_service: Annotated[UsageService, Depends(get_usage_service)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
):
    """Parse a food description with AI and log it unless save=false."""
    result = await pipelines.ai_parse_food_pipeline(
        orchestrator=orchestrator,
        usage_service=usage_service,
        food_log_service=food_log_service,
        user=user,
        text=body.input,
        save=body.save,
        date=body.date,
    )
    return success_response(result)


@router.post("/coach")
async def coach(
    body: CoachRequest,
    user: Annotated[dict, Depends(require_auth)],
    orchestrator: Annotated[AIOrchestrator, Depends(get_ai_orchestrator)],
    usage_service: Annotated[UsageService, Depends(get_usage_service)],
):
    result = await pipelines.ai_coach_pipeline(
        orchestrator=orchestrator,
        usage_service=usage_service,
        user=user,
        message=body.message,
    )
    return success_response(result)
