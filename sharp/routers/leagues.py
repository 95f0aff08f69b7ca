"""
FastAPI router for weekly study leagues.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response
from sharp.dependencies import get_league_service, require_auth
from sharp.pipelines import focus as pipelines
from sharp.services.focus.league_service import LeagueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leagues", tags=["leagues"])


@router.get("/current")
async def get_current_league(
    user: Annotated[dict, Depends(require_auth)],
    league_service: Annotated[LeagueService, Depends(get_league_service)],
):
    """
    Get this week's league standings.

    Users without a league this week are placed in one with a free slot,
    or a new league is opened.
    """
    result = await pipelines.current_league_pipeline(league_service, str(user["_id"]))
    return success_response(result)
