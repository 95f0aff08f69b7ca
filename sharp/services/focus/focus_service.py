"""
Focus session service.

Stores study focus sessions and recomputes a user's weekly score when a
session is finalised.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from sharp.database import collections
from sharp.database.documents import utcnow
from sharp.services.focus.weeks import week_start, week_end

logger = logging.getLogger(__name__)

STREAK_DAY_POINTS = 50
SESSION_POINTS = 10


def calculate_points(total_minutes: float, streak_days: int, total_sessions: int) -> int:
    """Weekly points: one per minute, 50 per active day, 10 per session."""
    return math.floor(
        total_minutes + streak_days * STREAK_DAY_POINTS + total_sessions * SESSION_POINTS
    )


def summarize_week(sessions: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Aggregate finished sessions of one week.

    Returns:
        dict with totalMinutes (floored), totalSessions, streakDays, points
    """
    total_minutes = sum(s.get("durationSeconds") or 0 for s in sessions) / 60
    total_sessions = len(sessions)
    streak_days = len({s["startTime"].date() for s in sessions})

    return {
        "totalMinutes": math.floor(total_minutes),
        "totalSessions": total_sessions,
        "streakDays": streak_days,
        "points": calculate_points(total_minutes, streak_days, total_sessions),
    }


class FocusService:
    """
    Handles focus session storage and weekly score aggregation.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize FocusService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._sessions_collection = db[collections.FOCUS_SESSIONS]
        self._scores_collection = db[collections.WEEKLY_SCORES]

    async def save_session(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create or update the in-progress session that started at startTime.

        An open session (no endTime yet) with the same start is updated in
        place; otherwise a new session is inserted.

        Args:
            user_id: Owner
            data: startTime, endTime, durationSeconds, category,
                productiveScore, idleEvents, final
        """
        now = utcnow()
        fields = {
            "durationSeconds": data.get("durationSeconds") or 0,
            "productiveScore": data.get("productiveScore"),
            "idleEvents": data.get("idleEvents") or 0,
            "final": bool(data.get("final")),
            "updatedAt": now,
        }
        if data.get("endTime"):
            fields["endTime"] = data["endTime"]

        session = await self._sessions_collection.find_one_and_update(
            {
                "userId": ObjectId(user_id),
                "startTime": data["startTime"],
                "endTime": None,
            },
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if session:
            return session

        session = {
            "userId": ObjectId(user_id),
            "startTime": data["startTime"],
            "endTime": data.get("endTime"),
            "category": data.get("category"),
            "createdAt": now,
            **fields,
        }
        result = await self._sessions_collection.insert_one(session)
        session["_id"] = result.inserted_id

        logger.debug(f"Focus session {result.inserted_id} started for user {user_id}")
        return session

    async def list_sessions(
        self,
        user_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """Get the user's sessions, newest first, optionally within a window."""
        query: Dict[str, Any] = {"userId": ObjectId(user_id)}
        if start_date or end_date:
            query["startTime"] = {}
            if start_date:
                query["startTime"]["$gte"] = start_date
            if end_date:
                query["startTime"]["$lte"] = end_date

        cursor = self._sessions_collection.find(query).sort("startTime", -1)
        return await cursor.to_list(length=None)

    async def update_weekly_score(
        self,
        user_id: str,
        moment: datetime,
        group_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Recompute and store the score for the week containing moment.

        Args:
            user_id: Owner
            moment: Any instant inside the week (usually the session start)
            group_id: Leaderboard group (the user's team)

        Returns:
            Stored weekly score document
        """
        start = week_start(moment)

        cursor = self._sessions_collection.find({
            "userId": ObjectId(user_id),
            "startTime": {"$gte": start, "$lt": start + timedelta(days=7)},
            "endTime": {"$ne": None},
        })
        sessions = await cursor.to_list(length=None)
        summary = summarize_week(sessions)

        score = await self._scores_collection.find_one_and_update(
            {"userId": ObjectId(user_id), "weekStart": start},
            {
                "$set": {**summary, "groupId": group_id, "updatedAt": utcnow()},
                "$setOnInsert": {"weekEnd": week_end(start), "createdAt": utcnow()},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

        logger.info(
            f"Weekly score for user {user_id} week {start.date()}: "
            f"{summary['points']} points ({summary['totalSessions']} sessions)"
        )
        return score

