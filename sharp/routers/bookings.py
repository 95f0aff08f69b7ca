"""
FastAPI router for CourtSync court bookings.
"""

import logging
from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from common.utils import success_response
from sharp.dependencies import get_booking_service, get_court_service, require_auth
from sharp.pipelines import courts as pipelines
from sharp.schemas.courts import BookingCreateRequest, ConflictCheckRequest, Purpose
from sharp.services.courts.booking_service import BookingService
from sharp.services.courts.court_service import CourtService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("")
async def list_bookings(
    user: Annotated[dict, Depends(require_auth)],
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
    courtId: Optional[str] = Query(None),
    startDate: Optional[datetime] = Query(None),
    endDate: Optional[datetime] = Query(None),
    purpose: Optional[Purpose] = Query(None),
):
    """List the team's bookings, optionally within a date window."""
    bookings = await pipelines.list_bookings_pipeline(
        booking_service=booking_service,
        user=user,
        court_id=courtId,
        start_date=startDate,
        end_date=endDate,
        purpose=purpose,
    )
    return success_response(bookings)


@router.post("", status_code=201)
async def create_booking(
    body: BookingCreateRequest,
    user: Annotated[dict, Depends(require_auth)],
    court_service: Annotated[CourtService, Depends(get_court_service)],
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
):
    """
    Book a court.

    Overlapping bookings are rejected with 409 unless the user is a coach
    or assistant coach.
    """
    result = await pipelines.create_booking_pipeline(
        court_service=court_service,
        booking_service=booking_service,
        user=user,
        data=body.model_dump(),
    )
    message = "Booking created with override" if result["conflicts"] else "Booking created"
    return success_response(result, message)


@router.post("/check-conflicts")
async def check_conflicts(
    body: ConflictCheckRequest,
    user: Annotated[dict, Depends(require_auth)],
    court_service: Annotated[CourtService, Depends(get_court_service)],
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
):
    result = await pipelines.check_conflicts_pipeline(
        court_service=court_service,
        booking_service=booking_service,
        user=user,
        court_id=body.courtId,
        start_time=body.startTime,
        end_time=body.endTime,
        exclude_booking_id=body.excludeBookingId,
    )
    return success_response(result)


@router.delete("/{booking_id}")
async def cancel_booking(
    booking_id: str,
    user: Annotated[dict, Depends(require_auth)],
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
):
    """Cancel a booking. Only the booker or a coach may cancel."""
    booking = await pipelines.cancel_booking_pipeline(booking_service, user, booking_id)
    return success_response(booking, "Booking cancelled")
