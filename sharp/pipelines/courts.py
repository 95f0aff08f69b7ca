"""
CourtSync pipeline functions.

Stateless orchestration logic for courts and bookings.
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

from common.utils.exceptions import ConflictException, ValidationException
from sharp.database.documents import as_utc, serialize_doc, utcnow
from sharp.services.courts.booking_service import BookingService, OVERRIDE_ROLES
from sharp.services.courts.court_service import CourtService

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────
# Courts
# ─────────────────────────────────────────────────────────────────

async def list_courts_pipeline(
    court_service: CourtService,
    user: Dict[str, Any],
    facility_id: Optional[str] = None,
    include_inactive: bool = False,
) -> List[Dict[str, Any]]:
    courts = await court_service.list_courts(
        team_id=user.get("teamId"),
        facility_id=facility_id,
        include_inactive=include_inactive,
    )
    return [serialize_doc(c) for c in courts]


async def get_court_pipeline(
    court_service: CourtService,
    user: Dict[str, Any],
    court_id: str,
) -> Dict[str, Any]:
    court = await court_service.get_team_court(court_id, user.get("teamId"))
    return serialize_doc(court)


async def create_court_pipeline(
    court_service: CourtService,
    user: Dict[str, Any],
    data: Dict[str, Any],
) -> Dict[str, Any]:
    court = await court_service.create_court(
        team_id=user.get("teamId"),
        created_by=str(user["_id"]),
        data=data,
    )
    return serialize_doc(court)


async def update_court_pipeline(
    court_service: CourtService,
    user: Dict[str, Any],
    court_id: str,
    updates: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Update a court of the user's team.

    Raises:
        NotFoundException: Court does not exist
        ForbiddenException: Court belongs to another team
    """
    await court_service.get_team_court(court_id, user.get("teamId"))
    court = await court_service.update_court(court_id, updates)
    return serialize_doc(court)


async def delete_court_pipeline(
    court_service: CourtService,
    user: Dict[str, Any],
    court_id: str,
) -> None:
    await court_service.get_team_court(court_id, user.get("teamId"))
    await court_service.delete_court(court_id)


# ─────────────────────────────────────────────────────────────────
# Bookings
# ─────────────────────────────────────────────────────────────────

def _validate_window(start_time: datetime, end_time: datetime, allow_past: bool = False) -> None:
    if end_time <= start_time:
        raise ValidationException(
            message="End time must be after start time",
            code="INVALID_TIME_RANGE",
            errors=[{"field": "endTime", "message": "End time must be after start time"}],
        )
    if not allow_past and start_time < utcnow():
        raise ValidationException(
            message="Cannot book a court in the past",
            code="START_IN_PAST",
            errors=[{"field": "startTime", "message": "Start time is in the past"}],
        )


async def list_bookings_pipeline(
    booking_service: BookingService,
    user: Dict[str, Any],
    court_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    purpose: Optional[str] = None,
) -> List[Dict[str, Any]]:
    bookings = await booking_service.list_bookings(
        team_id=user.get("teamId"),
        court_id=court_id,
        start_date=as_utc(start_date) if start_date else None,
        end_date=as_utc(end_date) if end_date else None,
        purpose=purpose,
    )
    return [serialize_doc(b) for b in bookings]


async def check_conflicts_pipeline(
    court_service: CourtService,
    booking_service: BookingService,
    user: Dict[str, Any],
    court_id: str,
    start_time: datetime,
    end_time: datetime,
    exclude_booking_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Check a slot on one of the user's team courts.

    Raises:
        ValidationException: End time not after start time
        NotFoundException: Court does not exist
        ForbiddenException: Court belongs to another team
    """
    start_time, end_time = as_utc(start_time), as_utc(end_time)
    _validate_window(start_time, end_time, allow_past=True)

    await court_service.get_team_court(court_id, user.get("teamId"))

    conflicts = await booking_service.check_conflicts(
        court_id, start_time, end_time, exclude_booking_id
    )
    return {
        "hasConflicts": bool(conflicts),
        "conflicts": [serialize_doc(c) for c in conflicts],
    }


async def create_booking_pipeline(
    court_service: CourtService,
    booking_service: BookingService,
    user: Dict[str, Any],
    data: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Book a court.

    Coaches and assistant coaches may book over existing bookings; a coach's
    booking over a conflict is stored with status "override".

    Args:
        court_service: For court lookup
        booking_service: For conflict check and persistence
        user: Booking user
        data: Validated booking fields

    Returns:
        dict with booking and the conflicts it was created over

    Raises:
        ValidationException: Invalid or past time window
        NotFoundException: Court does not exist
        ForbiddenException: Court belongs to another team
        ConflictException: Slot taken and user may not override
    """
    data = {**data, "startTime": as_utc(data["startTime"]), "endTime": as_utc(data["endTime"])}
    _validate_window(data["startTime"], data["endTime"])

    await court_service.get_team_court(data["courtId"], user.get("teamId"))

    conflicts = await booking_service.check_conflicts(
        data["courtId"], data["startTime"], data["endTime"]
    )
    role = user.get("role")

    if conflicts and role not in OVERRIDE_ROLES:
        raise ConflictException(
            message="Court is already booked for this time",
            code="BOOKING_CONFLICT",
            details={"conflicts": [serialize_doc(c) for c in conflicts]},
        )

    status = "override" if conflicts and role == "coach" else "confirmed"
    if conflicts:
        logger.info(
            f"User {user['_id']} ({role}) booked court {data['courtId']} "
            f"over {len(conflicts)} conflicting booking(s)"
        )

    booking = await booking_service.create_booking(user, data, status=status)

    return {
        "booking": serialize_doc(booking),
        "conflicts": [serialize_doc(c) for c in conflicts],
    }


async def cancel_booking_pipeline(
    booking_service: BookingService,
    user: Dict[str, Any],
    booking_id: str,
) -> Dict[str, Any]:
    booking = await booking_service.cancel_booking(booking_id, user)
    return serialize_doc(booking)
