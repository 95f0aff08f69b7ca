"""
Pydantic models for FeelSharper workouts, food diary and recipes.
"""

from typing import Optional, List, Literal
from pydantic import BaseModel, Field


DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

WorkoutType = Literal["strength", "cardio", "mixed"]
MealType = Literal["breakfast", "lunch", "dinner", "snack"]


# =============================================================================
# Workouts
# =============================================================================

class ExerciseSet(BaseModel):
    reps: Optional[int] = Field(None, ge=0)
    weightKg: Optional[float] = Field(None, ge=0)
    durationSeconds: Optional[int] = Field(None, ge=0)
    completed: bool = False


class Exercise(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: Literal["reps", "time", "distance"] = "reps"
    sets: List[ExerciseSet] = Field(default_factory=list)
    durationSeconds: Optional[int] = Field(None, ge=0)
    distanceKm: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class WorkoutCreateRequest(BaseModel):
    """Request body for a manually entered workout."""
    date: str = Field(..., pattern=DATE_PATTERN, description="YYYY-MM-DD")
    workoutType: WorkoutType = "strength"
    exercises: List[Exercise] = Field(..., min_length=1)
    durationMinutes: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=2000)


class WorkoutParseRequest(BaseModel):
    """Free-text workout for the local parser."""
    text: str = Field(..., min_length=1, max_length=1000)
    save: bool = False
    date: Optional[str] = Field(None, pattern=DATE_PATTERN)


# =============================================================================
# Food diary
# =============================================================================

class Nutrients(BaseModel):
    """Nutrients for one unit of a food."""
    kcal: float = Field(0, ge=0)
    proteinG: float = Field(0, ge=0)
    carbsG: float = Field(0, ge=0)
    fatG: float = Field(0, ge=0)


class FoodLogCreateRequest(BaseModel):
    """Request body for a diary entry."""
    date: str = Field(..., pattern=DATE_PATTERN)
    mealType: MealType
    foodName: str = Field(..., min_length=1, max_length=200)
    quantity: float = Field(..., gt=0)
    unit: str = Field("serving", min_length=1, max_length=30)
    nutrientsPerUnit: Nutrients = Field(default_factory=Nutrients)
    notes: Optional[str] = Field(None, max_length=500)


# =============================================================================
# Recipes
# =============================================================================

class IngredientInput(BaseModel):
    """
    Recipe ingredient. Quantity and unit are checked by the recipe service
    so every problem is reported in one response.
    """
    name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    notes: Optional[str] = None


class RecipeCreateRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    servings: int = Field(1, ge=1)
    prepTimeMinutes: Optional[int] = Field(None, ge=0)
    cookTimeMinutes: Optional[int] = Field(None, ge=0)
    instructions: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    isPublic: bool = False
    ingredients: List[IngredientInput] = Field(default_factory=list)


class RecipeUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    servings: Optional[int] = Field(None, ge=1)
    prepTimeMinutes: Optional[int] = Field(None, ge=0)
    cookTimeMinutes: Optional[int] = Field(None, ge=0)
    instructions: Optional[str] = None
    tags: Optional[List[str]] = None
    isPublic: Optional[bool] = None
    ingredients: Optional[List[IngredientInput]] = None
