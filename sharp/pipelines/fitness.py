"""
FeelSharper pipeline functions.

Stateless orchestration logic for workouts, the food diary and recipes.
"""

import logging
from typing import Optional, List, Dict, Any, Tuple

from common.utils.exceptions import ValidationException
from sharp.database.documents import serialize_doc, utcnow
from sharp.services.fitness.food_log_service import FoodLogService
from sharp.services.fitness.recipe_service import RecipeService
from sharp.services.fitness.workout_parser import parse_workout_text, to_exercise_records
from sharp.services.fitness.workout_service import WorkoutService

logger = logging.getLogger(__name__)


def today_string() -> str:
    """Today's date (UTC) as YYYY-MM-DD."""
    return utcnow().date().isoformat()


# ─────────────────────────────────────────────────────────────────
# Workouts
# ─────────────────────────────────────────────────────────────────

async def list_workouts_pipeline(
    workout_service: WorkoutService,
    user_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> Tuple[List[Dict[str, Any]], int]:
    workouts, total = await workout_service.list_workouts(
        user_id, start_date=start_date, end_date=end_date, limit=limit, offset=offset
    )
    return [serialize_doc(w) for w in workouts], total


async def create_workout_pipeline(
    workout_service: WorkoutService,
    user_id: str,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    workout = await workout_service.create_workout(
        user_id=user_id,
        date=data["date"],
        workout_type=data["workoutType"],
        exercises=data["exercises"],
        duration_minutes=data.get("durationMinutes"),
        notes=data.get("notes"),
    )
    return serialize_doc(workout)


async def parse_workout_pipeline(
    workout_service: WorkoutService,
    user_id: str,
    text: str,
    save: bool = False,
    date: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Parse workout text with the local parser and optionally save it.

    No AI call and no usage is counted.

    Returns:
        dict with workoutType, exercises, confidence and the saved workout (or None)

    Raises:
        ValidationException: Nothing recognisable in the text
    """
    parsed = parse_workout_text(text)
    if parsed is None:
        raise ValidationException(
            message="Could not understand the workout description",
            code="PARSE_FAILED",
            errors=[{"field": "text", "message": "No exercise recognised"}],
        )

    exercises = to_exercise_records(parsed.exercises)

    saved = None
    if save:
        saved = await workout_service.create_workout(
            user_id=user_id,
            date=date or today_string(),
            workout_type=parsed.workout_type,
            exercises=exercises,
            ai_parsed=True,
            raw_input=text,
            confidence=parsed.confidence,
        )

    return {
        "workoutType": parsed.workout_type,
        "exercises": exercises,
        "confidence": parsed.confidence,
        "workout": serialize_doc(saved),
    }


async def delete_workout_pipeline(workout_service: WorkoutService, user_id: str, workout_id: str) -> None:
    await workout_service.delete_workout(user_id, workout_id)


# ─────────────────────────────────────────────────────────────────
# Food diary
# ─────────────────────────────────────────────────────────────────

async def get_diary_pipeline(
    food_log_service: FoodLogService,
    user_id: str,
    date: Optional[str] = None,
) -> Dict[str, Any]:
    day = await food_log_service.get_day(user_id, date or today_string())
    return {
        "date": day["date"],
        "meals": {
            meal: [serialize_doc(e) for e in entries]
            for meal, entries in day["meals"].items()
        },
        "totals": day["totals"],
    }


async def add_diary_entry_pipeline(
    food_log_service: FoodLogService,
    user_id: str,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    entry = await food_log_service.add_entry(
        user_id=user_id,
        date=data["date"],
        meal_type=data["mealType"],
        food_name=data["foodName"],
        quantity=data["quantity"],
        unit=data["unit"],
        nutrients_per_unit=data.get("nutrientsPerUnit") or {},
        notes=data.get("notes"),
    )
    return serialize_doc(entry)


async def delete_diary_entry_pipeline(
    food_log_service: FoodLogService,
    user_id: str,
    entry_id: str,
) -> None:
    await food_log_service.delete_entry(user_id, entry_id)


# ─────────────────────────────────────────────────────────────────
# Recipes
# ─────────────────────────────────────────────────────────────────

def _format_recipe(recipe: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    formatted = serialize_doc(recipe)
    formatted["isOwner"] = formatted.get("userId") == user_id
    return formatted


async def list_recipes_pipeline(
    recipe_service: RecipeService,
    user_id: str,
    include_public: bool = True,
    limit: int = 20,
    offset: int = 0,
) -> Tuple[List[Dict[str, Any]], int]:
    recipes, total = await recipe_service.list_recipes(
        user_id, include_public=include_public, limit=limit, offset=offset
    )
    return [_format_recipe(r, user_id) for r in recipes], total


async def create_recipe_pipeline(
    recipe_service: RecipeService,
    user_id: str,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    recipe = await recipe_service.create_recipe(user_id, data)
    return _format_recipe(recipe, user_id)


async def get_recipe_pipeline(recipe_service: RecipeService, user_id: str, recipe_id: str) -> Dict[str, Any]:
    recipe = await recipe_service.get_recipe(recipe_id, user_id)
    return _format_recipe(recipe, user_id)


async def update_recipe_pipeline(
    recipe_service: RecipeService,
    user_id: str,
    recipe_id: str,
    updates: Dict[str, Any],
) -> Dict[str, Any]:
    recipe = await recipe_service.update_recipe(recipe_id, user_id, updates)
    return _format_recipe(recipe, user_id)


async def delete_recipe_pipeline(recipe_service: RecipeService, user_id: str, recipe_id: str) -> None:
    await recipe_service.delete_recipe(recipe_id, user_id)
