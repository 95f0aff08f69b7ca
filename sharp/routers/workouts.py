"""
FastAPI router for FeelSharper workouts.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from common.utils import paginated_response, success_response
from sharp.dependencies import get_workout_service, require_auth
from sharp.pipelines import fitness as pipelines
from sharp.schemas.fitness import DATE_PATTERN, WorkoutCreateRequest, WorkoutParseRequest
from sharp.services.fitness.workout_service import WorkoutService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("")
async def list_workouts(
    user: Annotated[dict, Depends(require_auth)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
    startDate: Optional[str] = Query(None, pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    endDate: Optional[str] = Query(None, pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    limit: int = Query(20, ge=1, le=WorkoutService.MAX_LIMIT),
    offset: int = Query(0, ge=0),
):
    """Get workout history, newest first."""
    workouts, total = await pipelines.list_workouts_pipeline(
        workout_service=workout_service,
        user_id=str(user["_id"]),
        start_date=startDate,
        end_date=endDate,
        limit=limit,
        offset=offset,
    )
    return paginated_response(workouts, total, limit=limit, offset=offset)


@router.post("", status_code=201)
async def create_workout(
    body: WorkoutCreateRequest,
    user: Annotated[dict, Depends(require_auth)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
):
    workout = await pipelines.create_workout_pipeline(
        workout_service=workout_service,
        user_id=str(user["_id"]),
        data=body.model_dump(),
    )
    return success_response(workout, "Workout saved")


@router.post("/parse")
async def parse_workout(
    body: WorkoutParseRequest,
    user: Annotated[dict, Depends(require_auth)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
):
    """
    Parse free-text workout input locally.

    Does not call an AI provider and does not count toward usage limits.
    """
    result = await pipelines.parse_workout_pipeline(
        workout_service=workout_service,
        user_id=str(user["_id"]),
        text=body.text,
        save=body.save,
        date=body.date,
    )
    return success_response(result)


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: str,
    user: Annotated[dict, Depends(require_auth)],
    workout_service: Annotated[WorkoutService, Depends(get_workout_service)],
):
    await pipelines.delete_workout_pipeline(workout_service, str(user["_id"]), workout_id)
    return success_response(message="Workout deleted")
