"""
Workout log service.

Stores manual and parsed workouts for FeelSharper users.
"""

import logging
from typing import Optional, List, Dict, Any, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.utils.exceptions import NotFoundException
from sharp.database import collections
from sharp.database.documents import parse_object_id, utcnow

logger = logging.getLogger(__name__)

WORKOUT_TYPES = ("strength", "cardio", "mixed")


class WorkoutService:
    """
    Handles workout storage and retrieval.
    """

    MAX_LIMIT = 100

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize WorkoutService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._workouts_collection = db[collections.WORKOUTS]

    async def list_workouts(
        self,
        user_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Get a page of workouts, newest first.

        Args:
            user_id: Owner
            start_date: Optional YYYY-MM-DD lower bound (inclusive)
            end_date: Optional YYYY-MM-DD upper bound (inclusive)
            limit: Page size (capped at MAX_LIMIT)
            offset: Records to skip

        Returns:
            Tuple of (workouts, total matching)
        """
        limit = min(limit, self.MAX_LIMIT)

        query: Dict[str, Any] = {"userId": ObjectId(user_id)}
        if start_date or end_date:
            query["date"] = {}
            if start_date:
                query["date"]["$gte"] = start_date
            if end_date:
                query["date"]["$lte"] = end_date

        total = await self._workouts_collection.count_documents(query)

        cursor = self._workouts_collection.find(query)
        cursor = cursor.sort([("date", -1), ("createdAt", -1)])
        cursor = cursor.skip(offset)
        cursor = cursor.limit(limit)
        workouts = await cursor.to_list(length=limit)

        return workouts, total

    async def create_workout(
        self,
        user_id: str,
        date: str,
        workout_type: str,
        exercises: List[Dict[str, Any]],
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
        ai_parsed: bool = False,
        raw_input: Optional[str] = None,
        confidence: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Save a workout.

        Args:
            user_id: Owner
            date: YYYY-MM-DD
            workout_type: strength, cardio or mixed
            exercises: Exercise records
            duration_minutes: Optional total duration
            notes: Optional notes
            ai_parsed: True when exercises came from a parser
            raw_input: Original free text for parsed workouts
            confidence: Parser confidence (0-1)
        """
        now = utcnow()
        workout = {
            "userId": ObjectId(user_id),
            "date": date,
            "workoutType": workout_type,
            "exercises": exercises,
            "durationMinutes": duration_minutes,
            "notes": notes,
            "aiParsed": ai_parsed,
            "rawInput": raw_input,
            "confidence": confidence,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._workouts_collection.insert_one(workout)
        workout["_id"] = result.inserted_id

        logger.info(
            f"Workout {result.inserted_id} saved for user {user_id} "
            f"({workout_type}, {len(exercises)} exercises, parsed={ai_parsed})"
        )
        return workout

    async def delete_workout(self, user_id: str, workout_id: str) -> None:
        """
        Delete one of the user's workouts.

        Raises:
            NotFoundException: No such workout for this user
        """
        result = await self._workouts_collection.delete_one({
            "_id": parse_object_id(workout_id, "Workout"),
            "userId": ObjectId(user_id),
        })
        if result.deleted_count == 0:
            raise NotFoundException(message="Workout not found", code="WORKOUT_NOT_FOUND")

        logger.info(f"Workout {workout_id} deleted by user {user_id}")
