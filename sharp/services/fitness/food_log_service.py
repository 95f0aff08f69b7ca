"""
Food diary service.

Stores food-log entries with a nutrient snapshot and summarises a day.
"""

import logging
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.utils.exceptions import NotFoundException
from sharp.database import collections
from sharp.database.documents import parse_object_id, utcnow

logger = logging.getLogger(__name__)

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")
NUTRIENT_KEYS = ("kcal", "proteinG", "carbsG", "fatG")


def nutrient_snapshot(per_unit: Dict[str, float], quantity: float) -> Dict[str, float]:
    """Scale per-unit nutrients by quantity, rounded to one decimal."""
    return {
        key: round((per_unit.get(key) or 0) * quantity, 1)
        for key in NUTRIENT_KEYS
    }


class FoodLogService:
    """
    Handles food diary storage and daily summaries.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize FoodLogService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._foodlogs_collection = db[collections.FOOD_LOGS]

    async def get_day(self, user_id: str, date: str) -> Dict[str, Any]:
        """
        Get a day's diary grouped by meal type.

        Args:
            user_id: Owner
            date: YYYY-MM-DD

        Returns:
            dict with date, meals (meal type -> entries in log order) and totals
        """
        cursor = self._foodlogs_collection.find({
            "userId": ObjectId(user_id),
            "date": date,
        }).sort("loggedAt", 1)
        entries = await cursor.to_list(length=None)

        meals: Dict[str, List[Dict[str, Any]]] = {meal: [] for meal in MEAL_TYPES}
        totals = {key: 0.0 for key in NUTRIENT_KEYS}

        for entry in entries:
            meals.setdefault(entry.get("mealType", "snack"), []).append(entry)
            for key in NUTRIENT_KEYS:
                totals[key] += entry.get("nutrients", {}).get(key) or 0

        return {
            "date": date,
            "meals": meals,
            "totals": {key: round(value, 1) for key, value in totals.items()},
        }

    async def add_entry(
        self,
        user_id: str,
        date: str,
        meal_type: str,
        food_name: str,
        quantity: float,
        unit: str,
        nutrients_per_unit: Dict[str, float],
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Log a food entry.

        Args:
            user_id: Owner
            date: YYYY-MM-DD
            meal_type: breakfast, lunch, dinner or snack
            food_name: Food description
            quantity: Number of units eaten
            unit: Serving unit label
            nutrients_per_unit: kcal, proteinG, carbsG, fatG for one unit
            notes: Optional notes
        """
        now = utcnow()
        entry = {
            "userId": ObjectId(user_id),
            "date": date,
            "mealType": meal_type,
            "foodName": food_name.strip(),
            "quantity": quantity,
            "unit": unit,
            "nutrients": nutrient_snapshot(nutrients_per_unit, quantity),
            "notes": notes,
            "loggedAt": now,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._foodlogs_collection.insert_one(entry)
        entry["_id"] = result.inserted_id

        logger.info(f"Food entry {result.inserted_id} logged for user {user_id} ({meal_type})")
        return entry

    async def delete_entry(self, user_id: str, entry_id: str) -> None:
        """
        Delete one of the user's entries.

        Raises:
            NotFoundException: No such entry for this user
        """
        result = await self._foodlogs_collection.delete_one({
            "_id": parse_object_id(entry_id, "Food entry"),
            "userId": ObjectId(user_id),
        })
        if result.deleted_count == 0:
            raise NotFoundException(message="Food entry not found", code="FOOD_ENTRY_NOT_FOUND")
