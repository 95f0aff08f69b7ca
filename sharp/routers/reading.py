"""
FastAPI router for reading sessions and stats.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response
from sharp.dependencies import get_book_service, get_reading_session_service, require_auth
from sharp.pipelines import reading as pipelines
from sharp.schemas.reading import ReadingSessionRequest
from sharp.services.reading.book_service import BookService
from sharp.services.reading.reading_session_service import ReadingSessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reading", tags=["reading"])


@router.post("/sessions", status_code=201)
async def log_reading_session(
    body: ReadingSessionRequest,
    user: Annotated[dict, Depends(require_auth)],
    book_service: Annotated[BookService, Depends(get_book_service)],
    reading_session_service: Annotated[ReadingSessionService, Depends(get_reading_session_service)],
):
    """
    Log a reading session.

    Advances the book and the daily reading streak.
    """
    result = await pipelines.log_reading_session_pipeline(
        book_service=book_service,
        reading_session_service=reading_session_service,
        user_id=str(user["_id"]),
        data=body.model_dump(),
    )
    return success_response(result, "Reading session logged")


@router.get("/stats")
async def get_reading_stats(
    user: Annotated[dict, Depends(require_auth)],
    book_service: Annotated[BookService, Depends(get_book_service)],
    reading_session_service: Annotated[ReadingSessionService, Depends(get_reading_session_service)],
):
    """Streak, weekly and monthly totals, and book counts by status."""
    stats = await pipelines.reading_stats_pipeline(
        book_service, reading_session_service, str(user["_id"])
    )
    return success_response(stats)
