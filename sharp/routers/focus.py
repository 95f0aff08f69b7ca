"""
FastAPI router for StudySharper focus sessions and the weekly leaderboard.
"""

import logging
from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from common.utils import success_response
from sharp.dependencies import (
    get_focus_service,
    get_leaderboard_service,
    get_league_service,
    require_auth,
)
from sharp.pipelines import focus as pipelines
from sharp.schemas.focus import FocusSessionRequest
from sharp.services.focus.focus_service import FocusService
from sharp.services.focus.leaderboard_service import LeaderboardService
from sharp.services.focus.league_service import LeagueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/focus", tags=["focus"])


@router.post("/sessions")
async def save_focus_session(
    body: FocusSessionRequest,
    user: Annotated[dict, Depends(require_auth)],
    focus_service: Annotated[FocusService, Depends(get_focus_service)],
    league_service: Annotated[LeagueService, Depends(get_league_service)],
):
    """
    Save a focus session heartbeat.

    Repeated calls with the same startTime update the open session. The
    final call (final=true with endTime) updates the weekly score.
    """
    result = await pipelines.save_focus_session_pipeline(
        focus_service=focus_service,
        league_service=league_service,
        user=user,
        data=body.model_dump(),
    )
    return success_response(result)


@router.get("/sessions")
async def list_focus_sessions(
    user: Annotated[dict, Depends(require_auth)],
    focus_service: Annotated[FocusService, Depends(get_focus_service)],
    startDate: Optional[datetime] = Query(None),
    endDate: Optional[datetime] = Query(None),
):
    sessions = await pipelines.list_focus_sessions_pipeline(
        focus_service, str(user["_id"]), startDate, endDate
    )
    return success_response(sessions)


@router.get("/leaderboard")
async def get_leaderboard(
    user: Annotated[dict, Depends(require_auth)],
    leaderboard_service: Annotated[LeaderboardService, Depends(get_leaderboard_service)],
    groupId: Optional[str] = Query(None, description="Restrict to one group (team)"),
):
    """This week's leaderboard ranked by points, minutes, then streak."""
    result = await pipelines.leaderboard_pipeline(
        leaderboard_service=leaderboard_service,
        user=user,
        group_id=groupId,
    )
    return success_response(result)


@router.get("/export")
async def export_focus_sessions(
    user: Annotated[dict, Depends(require_auth)],
    focus_service: Annotated[FocusService, Depends(get_focus_service)],
):
    """Download the user's focus sessions as CSV."""
    content = await pipelines.export_focus_sessions_pipeline(focus_service, str(user["_id"]))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="focus-sessions.csv"'},
    )
