"""
Weekly focus leaderboard.
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import UpdateOne

from sharp.database import collections
from sharp.services.focus.weeks import week_start

logger = logging.getLogger(__name__)

LEADERBOARD_SORT = [("points", -1), ("totalMinutes", -1), ("streakDays", -1)]


def leaderboard_key(score: Dict[str, Any]):
    """Sort key: points, then minutes, then streak days, all descending."""
    return (
        -(score.get("points") or 0),
        -(score.get("totalMinutes") or 0),
        -(score.get("streakDays") or 0),
    )


def assign_ranks(scores: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Order scores by leaderboard_key and number them from 1."""
    ordered = sorted(scores, key=leaderboard_key)
    for index, score in enumerate(ordered):
        score["rank"] = index + 1
    return ordered


def display_name(user: Optional[Dict[str, Any]]) -> str:
    """User's name, or the local part of their email."""
    if not user:
        return "Student"
    return user.get("name") or user.get("email", "").split("@")[0] or "Student"


class LeaderboardService:
    """
    Builds the current week's leaderboard and persists ranks.
    """

    def __init__(self, db: AsyncIOMotorDatabase, size: int = 50):
        """
        Initialize LeaderboardService.

        Args:
            db: MongoDB database connection
            size: Number of top entries returned and ranked
        """
        self._db = db
        self._scores_collection = db[collections.WEEKLY_SCORES]
        self._users_collection = db[collections.USERS]
        self._size = size

    async def get_leaderboard(
        self,
        group_id: Optional[str] = None,
        moment: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get ranked entries for the week containing moment (default: now).

        Args:
            group_id: Restrict to scores of one group
            moment: Any instant in the wanted week

        Returns:
            Entries with userId, userName, totals, points and rank
        """
        query: Dict[str, Any] = {"weekStart": week_start(moment)}
        if group_id:
            query["groupId"] = group_id

        cursor = self._scores_collection.find(query).sort(LEADERBOARD_SORT).limit(self._size)
        scores = assign_ranks(await cursor.to_list(length=self._size))

        if not scores:
            return []

        # Stored rank is the global one; group boards are ranked on the fly
        if not group_id:
            await self._scores_collection.bulk_write(
                [UpdateOne({"_id": s["_id"]}, {"$set": {"rank": s["rank"]}}) for s in scores],
                ordered=False,
            )

        users_cursor = self._users_collection.find(
            {"_id": {"$in": [s["userId"] for s in scores]}},
            {"name": 1, "email": 1},
        )
        users = {u["_id"]: u for u in await users_cursor.to_list(length=None)}

        return [
            {
                "id": str(s["_id"]),
                "userId": str(s["userId"]),
                "userName": display_name(users.get(s["userId"])),
                "totalMinutes": s.get("totalMinutes", 0),
                "totalSessions": s.get("totalSessions", 0),
                "streakDays": s.get("streakDays", 0),
                "points": s.get("points", 0),
                "rank": s["rank"],
            }
            for s in scores
        ]
