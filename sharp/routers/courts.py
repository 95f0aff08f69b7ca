"""
FastAPI router for CourtSync courts.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from common.utils import success_response
from sharp.dependencies import get_court_service, require_auth, require_roles
from sharp.pipelines import courts as pipelines
from sharp.schemas.courts import CourtCreateRequest, CourtUpdateRequest
from sharp.services.courts.court_service import CourtService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courts", tags=["courts"])

require_court_manager = require_roles("coach", "assistant_coach")
require_coach = require_roles("coach")


@router.get("")
async def list_courts(
    user: Annotated[dict, Depends(require_auth)],
    court_service: Annotated[CourtService, Depends(get_court_service)],
    facilityId: Optional[str] = Query(None),
    includeInactive: bool = Query(False),
):
    """List the team's courts."""
    courts = await pipelines.list_courts_pipeline(
        court_service=court_service,
        user=user,
        facility_id=facilityId,
        include_inactive=includeInactive,
    )
    return success_response(courts)


@router.post("", status_code=201)
async def create_court(
    body: CourtCreateRequest,
    user: Annotated[dict, Depends(require_court_manager)],
    court_service: Annotated[CourtService, Depends(get_court_service)],
):
    """Create a court. Coaches and assistant coaches only."""
    court = await pipelines.create_court_pipeline(
        court_service=court_service,
        user=user,
        data=body.model_dump(),
    )
    return success_response(court, "Court created")


@router.get("/{court_id}")
async def get_court(
    court_id: str,
    user: Annotated[dict, Depends(require_auth)],
    court_service: Annotated[CourtService, Depends(get_court_service)],
):
    court = await pipelines.get_court_pipeline(court_service, user, court_id)
    return success_response(court)


@router.put("/{court_id}")
async def update_court(
    court_id: str,
    body: CourtUpdateRequest,
    user: Annotated[dict, Depends(require_court_manager)],
    court_service: Annotated[CourtService, Depends(get_court_service)],
):
    """Partially update a court. Coaches and assistant coaches only."""
    court = await pipelines.update_court_pipeline(
        court_service=court_service,
        user=user,
        court_id=court_id,
        updates=body.model_dump(exclude_none=True),
    )
    return success_response(court, "Court updated")


@router.delete("/{court_id}")
async def delete_court(
    court_id: str,
    user: Annotated[dict, Depends(require_coach)],
    court_service: Annotated[CourtService, Depends(get_court_service)],
):
    """Delete a court. Coaches only."""
    await pipelines.delete_court_pipeline(court_service, user, court_id)
    return success_response(message="Court deleted")
