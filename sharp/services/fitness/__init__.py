"""FeelSharper fitness and nutrition services."""

from sharp.services.fitness.workout_parser import (
    ParsedWorkout,
    ParsedExercise,
    ParsedSet,
    parse_workout_text,
    extract_intensity,
    to_exercise_records,
)
from sharp.services.fitness.workout_service import WorkoutService, WORKOUT_TYPES
from sharp.services.fitness.food_log_service import FoodLogService, MEAL_TYPES, nutrient_snapshot
from sharp.services.fitness.recipe_service import RecipeService

__all__ = [
    "ParsedWorkout",
    "ParsedExercise",
    "ParsedSet",
    "parse_workout_text",
    "extract_intensity",
    "to_exercise_records",
    "WorkoutService",
    "WORKOUT_TYPES",
    "FoodLogService",
    "MEAL_TYPES",
    "nutrient_snapshot",
    "RecipeService",
]
