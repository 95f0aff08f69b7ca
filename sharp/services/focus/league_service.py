"""
Weekly study leagues.

Every week users are placed in small leagues ("Study Squads") and ranked
against the other members by their weekly focus points.
"""

import logging
from datetime import datetime
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from sharp.database import collections
from sharp.database.documents import utcnow
from sharp.services.focus.weeks import week_start, week_end, week_number

logger = logging.getLogger(__name__)


class LeagueService:
    """
    Handles league assignment and standings.
    """

    def __init__(self, db: AsyncIOMotorDatabase, max_size: int = 8):
        """
        Initialize LeagueService.

        Args:
            db: MongoDB database connection
            max_size: Members per league before a new league is opened
        """
        self._db = db
        self._leagues_collection = db[collections.LEAGUES]
        self._memberships_collection = db[collections.LEAGUE_MEMBERSHIPS]
        self._scores_collection = db[collections.WEEKLY_SCORES]
        self._max_size = max_size

    async def get_current_league(
        self,
        user_id: str,
        moment: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Get the user's league for this week, joining one if needed.

        Returns:
            dict with league, members (ranked by points) and userRank
        """
        number = week_number(moment)
        membership = await self._memberships_collection.find_one({
            "userId": ObjectId(user_id),
            "weekNumber": number,
        })

        if membership:
            league = await self._leagues_collection.find_one({"_id": membership["leagueId"]})
        else:
            league = await self._assign(user_id, number, moment)

        cursor = self._memberships_collection.find({"leagueId": league["_id"]}).sort("points", -1)
        members = await cursor.to_list(length=None)

        ranked = [
            {
                "userId": str(m["userId"]),
                "points": m.get("points", 0),
                "focusMinutes": m.get("focusMinutes", 0),
                "streak": m.get("streak", 0),
                "rank": index + 1,
            }
            for index, m in enumerate(members)
        ]
        user_rank = next((m["rank"] for m in ranked if m["userId"] == user_id), 0)

        return {"league": league, "members": ranked, "userRank": user_rank}

    async def record_focus_minutes(
        self,
        user_id: str,
        number: int,
        score: Dict[str, Any],
    ) -> bool:
        """
        Copy a weekly score onto the user's membership for that week.

        Returns:
            True if the user had a membership to update
        """
        result = await self._memberships_collection.update_one(
            {"userId": ObjectId(user_id), "weekNumber": number},
            {"$set": {
                "points": score.get("points", 0),
                "focusMinutes": score.get("totalMinutes", 0),
                "streak": score.get("streakDays", 0),
                "updatedAt": utcnow(),
            }},
        )
        return result.matched_count > 0

    async def _assign(self, user_id: str, number: int, moment: Optional[datetime]) -> Dict[str, Any]:
        league = await self._find_open_league(number)
        if league is None:
            league = await self._create_league(number, moment)

        # Points earned before joining count from the start
        score = await self._scores_collection.find_one({
            "userId": ObjectId(user_id),
            "weekStart": week_start(moment),
        }) or {}

        try:
            await self._memberships_collection.insert_one({
                "leagueId": league["_id"],
                "userId": ObjectId(user_id),
                "weekNumber": number,
                "points": score.get("points", 0),
                "focusMinutes": score.get("totalMinutes", 0),
                "streak": score.get("streakDays", 0),
                "createdAt": utcnow(),
            })
        except DuplicateKeyError:
            # A concurrent request joined first; use that membership
            existing = await self._memberships_collection.find_one({
                "userId": ObjectId(user_id),
                "weekNumber": number,
            })
            return await self._leagues_collection.find_one({"_id": existing["leagueId"]})

        logger.info(f"User {user_id} joined league {league['_id']} for week {number}")
        return league

    async def _find_open_league(self, number: int) -> Optional[Dict[str, Any]]:
        cursor = self._leagues_collection.find({"weekNumber": number}).sort("createdAt", 1)
        for league in await cursor.to_list(length=None):
            count = await self._memberships_collection.count_documents({"leagueId": league["_id"]})
            if count < league.get("maxSize", self._max_size):
                return league
        return None

    async def _create_league(self, number: int, moment: Optional[datetime]) -> Dict[str, Any]:
        existing = await self._leagues_collection.count_documents({"weekNumber": number})
        start = week_start(moment)

        league = {
            "name": f"Study Squad {existing + 1}",
            "weekNumber": number,
            "startDate": start,
            "endDate": week_end(start),
            "maxSize": self._max_size,
            "createdAt": utcnow(),
        }
        result = await self._leagues_collection.insert_one(league)
        league["_id"] = result.inserted_id

        logger.info(f"League {league['name']} created for week {number}")
        return league
