"""
Court CRUD service.

Handles CourtSync court storage and team-scoped access checks.
"""

import logging
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import ForbiddenException, NotFoundException
from sharp.database import collections
from sharp.database.documents import parse_object_id, utcnow

logger = logging.getLogger(__name__)

SURFACE_TYPES = ("hard", "clay", "grass", "indoor")


class CourtService:
    """
    Handles court storage and retrieval.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize CourtService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._courts_collection = db[collections.COURTS]

    async def list_courts(
        self,
        team_id: Optional[str],
        facility_id: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Get a team's courts sorted by name.

        Args:
            team_id: Team whose courts to list
            facility_id: Optional facility filter
            include_inactive: Include courts with isActive=False
        """
        query: Dict[str, Any] = {"teamId": team_id}

        if facility_id:
            query["facilityId"] = facility_id

        if not include_inactive:
            query["isActive"] = True

        cursor = self._courts_collection.find(query).sort("name", 1)
        return await cursor.to_list(length=None)

    async def get_court(self, court_id: str) -> Dict[str, Any]:
        """
        Get a court by ID.

        Raises:
            NotFoundException: Court does not exist
        """
        court = await self._courts_collection.find_one(
            {"_id": parse_object_id(court_id, "Court")}
        )
        if not court:
            raise NotFoundException(message="Court not found", code="COURT_NOT_FOUND")
        return court

    async def get_team_court(self, court_id: str, team_id: Optional[str]) -> Dict[str, Any]:
        """
        Get a court the caller's team may access.

        Raises:
            NotFoundException: Court does not exist
            ForbiddenException: Court belongs to another team
        """
        court = await self.get_court(court_id)

        if court.get("teamId") and court["teamId"] != team_id:
            raise ForbiddenException(message="Access denied", code="COURT_ACCESS_DENIED")

        return court

    async def create_court(
        self,
        team_id: Optional[str],
        created_by: str,
        data: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Create a court for a team.

        Args:
            team_id: Owning team
            created_by: User ID of the coach creating it
            data: name, facilityId, surfaceType, isActive, maintenanceNotes
        """
        now = utcnow()
        court = {
            "name": data["name"].strip(),
            "facilityId": data.get("facilityId"),
            "surfaceType": data.get("surfaceType", "hard"),
            "isActive": data.get("isActive", True),
            "maintenanceNotes": data.get("maintenanceNotes"),
            "teamId": team_id,
            "createdBy": ObjectId(created_by),
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._courts_collection.insert_one(court)
        court["_id"] = result.inserted_id

        logger.info(f"Court {result.inserted_id} created for team {team_id}")
        return court

    async def update_court(self, court_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update.

        Raises:
            NotFoundException: Court does not exist
        """
        fields = {k: v for k, v in updates.items() if v is not None}
        fields["updatedAt"] = utcnow()

        court = await self._courts_collection.find_one_and_update(
            {"_id": parse_object_id(court_id, "Court")},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if not court:
            raise NotFoundException(message="Court not found", code="COURT_NOT_FOUND")

        logger.info(f"Court {court_id} updated: {sorted(fields)}")
        return court

    async def delete_court(self, court_id: str) -> None:
        """
        Delete a court.

        Raises:
            NotFoundException: Court does not exist
        """
        result = await self._courts_collection.delete_one(
            {"_id": parse_object_id(court_id, "Court")}
        )
        if result.deleted_count == 0:
            raise NotFoundException(message="Court not found", code="COURT_NOT_FOUND")

        logger.info(f"Court {court_id} deleted")
