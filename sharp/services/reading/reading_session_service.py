"""
Reading session service.

Records reading sessions, maintains the daily reading streak and builds
weekly/monthly stats.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from sharp.database import collections
from sharp.database.documents import utcnow
from sharp.services.focus.weeks import week_start

logger = logging.getLogger(__name__)


def streak_last_day(streak: Dict[str, Any]) -> date:
    """Last calendar day covered by a streak."""
    start = streak["startDate"]
    if isinstance(start, datetime):
        start = start.date()
    return start + timedelta(days=streak["currentDays"] - 1)


def next_streak_action(streak: Optional[Dict[str, Any]], today: date) -> str:
    """
    Decide how a session read today changes the active streak.

    Returns:
        "start" (no active streak), "extend" (streak ended yesterday),
        "restart" (streak ended before yesterday) or "keep" (already counts today)
    """
    if not streak:
        return "start"

    last_day = streak_last_day(streak)
    yesterday = today - timedelta(days=1)

    if last_day == yesterday:
        return "extend"
    if last_day < yesterday:
        return "restart"
    return "keep"


def _day_start(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


class ReadingSessionService:
    """
    Handles reading sessions, streaks and stats.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize ReadingSessionService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._sessions_collection = db[collections.READING_SESSIONS]
        self._streaks_collection = db[collections.READING_STREAKS]

    async def create_session(
        self,
        user_id: str,
        book_id: ObjectId,
        minutes: int,
        pages_read: int,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Record a finished reading session starting now.
        """
        now = utcnow()
        session = {
            "userId": ObjectId(user_id),
            "bookId": book_id,
            "startTime": now,
            "endTime": now + timedelta(minutes=minutes),
            "minutes": minutes,
            "pagesRead": pages_read,
            "notes": notes,
            "createdAt": now,
        }

        result = await self._sessions_collection.insert_one(session)
        session["_id"] = result.inserted_id
        return session

    async def update_streak(self, user_id: str, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Apply today's reading to the user's active streak.

        Returns:
            The active streak after the update
        """
        today = today or utcnow().date()
        streak = await self._streaks_collection.find_one({
            "userId": ObjectId(user_id),
            "isActive": True,
        })

        action = next_streak_action(streak, today)

        if action == "keep":
            return streak

        if action == "extend":
            days = streak["currentDays"] + 1
            max_days = max(streak.get("maxDays", 0), days)
            await self._streaks_collection.update_one(
                {"_id": streak["_id"]},
                {"$set": {"currentDays": days, "maxDays": max_days, "updatedAt": utcnow()}},
            )
            logger.debug(f"Reading streak for user {user_id} extended to {days} days")
            return {**streak, "currentDays": days, "maxDays": max_days}

        if action == "restart":
            await self._streaks_collection.update_one(
                {"_id": streak["_id"]},
                {"$set": {"isActive": False, "updatedAt": utcnow()}},
            )
            logger.info(f"Reading streak for user {user_id} ended at {streak['currentDays']} days")

        new_streak = {
            "userId": ObjectId(user_id),
            "startDate": _day_start(today),
            "currentDays": 1,
            "maxDays": 1,
            "isActive": True,
            "createdAt": utcnow(),
        }
        result = await self._streaks_collection.insert_one(new_streak)
        new_streak["_id"] = result.inserted_id
        return new_streak

    async def get_stats(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Streak plus weekly (since Sunday) and monthly (since the 1st) totals.
        """
        now = now or utcnow()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        streak = await self._streaks_collection.find_one({
            "userId": ObjectId(user_id),
            "isActive": True,
        })

        weekly = await self._totals_since(user_id, week_start(now))
        monthly = await self._totals_since(user_id, month_start)

        return {
            "streak": {
                "current": streak.get("currentDays", 0) if streak else 0,
                "max": streak.get("maxDays", 0) if streak else 0,
            },
            "weekly": weekly,
            "monthly": monthly,
        }

    async def _totals_since(self, user_id: str, since: datetime) -> Dict[str, int]:
        cursor = self._sessions_collection.aggregate([
            {"$match": {"userId": ObjectId(user_id), "startTime": {"$gte": since}}},
            {"$group": {
                "_id": None,
                "minutes": {"$sum": "$minutes"},
                "pages": {"$sum": "$pagesRead"},
                "sessions": {"$sum": 1},
            }},
        ])
        rows = await cursor.to_list(length=1)
        if not rows:
            return {"minutes": 0, "pages": 0, "sessions": 0}
        row = rows[0]
        return {"minutes": row["minutes"], "pages": row["pages"], "sessions": row["sessions"]}
