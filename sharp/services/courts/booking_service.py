"""
Court booking service.

Stores reservations and detects overlapping bookings on a court.
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import ForbiddenException, NotFoundException
from sharp.database import collections
from sharp.database.documents import parse_object_id, utcnow

logger = logging.getLogger(__name__)

PURPOSES = ("practice", "match", "training", "maintenance")

# Roles allowed to book over an existing reservation
OVERRIDE_ROLES = ("coach", "assistant_coach")


class BookingService:
    """
    Handles booking persistence and conflict lookups.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize BookingService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._bookings_collection = db[collections.BOOKINGS]

    async def check_conflicts(
        self,
        court_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find live bookings on a court that overlap [start_time, end_time).

        Two bookings overlap when existing.start < end and existing.end > start,
        so back-to-back bookings do not conflict.

        Args:
            court_id: Court to check
            start_time: Proposed start
            end_time: Proposed end
            exclude_booking_id: Booking to ignore (when rescheduling it)

        Returns:
            Conflicting bookings sorted by start time
        """
        query: Dict[str, Any] = {
            "courtId": parse_object_id(court_id, "Court"),
            "status": {"$ne": "cancelled"},
            "startTime": {"$lt": end_time},
            "endTime": {"$gt": start_time},
        }

        if exclude_booking_id:
            query["_id"] = {"$ne": parse_object_id(exclude_booking_id, "Booking")}

        cursor = self._bookings_collection.find(query).sort("startTime", 1)
        return await cursor.to_list(length=None)

    async def list_bookings(
        self,
        team_id: Optional[str],
        court_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        purpose: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get a team's bookings sorted by start time.

        A date window keeps every booking that overlaps it.
        """
        query: Dict[str, Any] = {"teamId": team_id}

        if court_id:
            query["courtId"] = parse_object_id(court_id, "Court")

        if start_date:
            query["endTime"] = {"$gt": start_date}

        if end_date:
            query["startTime"] = {"$lt": end_date}

        if purpose:
            query["purpose"] = purpose

        cursor = self._bookings_collection.find(query).sort("startTime", 1)
        return await cursor.to_list(length=None)

    async def create_booking(
        self,
        user: Dict[str, Any],
        data: Dict[str, Any],
        status: str = "confirmed",
    ) -> Dict[str, Any]:
        """
        Insert a booking.

        Args:
            user: Booking user (provides _id and teamId)
            data: Validated booking fields
            status: confirmed or override
        """
        now = utcnow()
        booking = {
            "courtId": ObjectId(data["courtId"]),
            "teamId": user.get("teamId"),
            "eventId": data.get("eventId"),
            "startTime": data["startTime"],
            "endTime": data["endTime"],
            "purpose": data["purpose"],
            "notes": data.get("notes"),
            "participants": data.get("participants") or [],
            "isRecurring": data.get("isRecurring", False),
            "recurrencePattern": data.get("recurrencePattern"),
            "bookedBy": user["_id"],
            "status": status,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._bookings_collection.insert_one(booking)
        booking["_id"] = result.inserted_id

        logger.info(
            f"Booking {result.inserted_id} created on court {data['courtId']} "
            f"({booking['startTime']} - {booking['endTime']}, {status})"
        )
        return booking

    async def cancel_booking(self, booking_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Cancel a booking.

        Only the user who booked it or a coach may cancel.

        Raises:
            NotFoundException: Booking does not exist
            ForbiddenException: Caller may not cancel it
        """
        oid = parse_object_id(booking_id, "Booking")

        booking = await self._bookings_collection.find_one({"_id": oid})
        if not booking:
            raise NotFoundException(message="Booking not found", code="BOOKING_NOT_FOUND")

        if booking.get("bookedBy") != user["_id"] and user.get("role") != "coach":
            raise ForbiddenException(
                message="Only the booker or a coach can cancel this booking",
                code="BOOKING_CANCEL_DENIED",
            )

        updated = await self._bookings_collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": "cancelled", "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

        logger.info(f"Booking {booking_id} cancelled by {user['_id']}")
        return updated
