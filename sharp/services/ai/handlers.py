"""
AI request handlers.

Each handler turns one kind of user input into structured data with a single
provider call. The orchestrator owns limits, cost and persistence.
"""

import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Any

from common.ai import AIProvider, AIProviderError
from sharp.services.fitness.workout_parser import parse_workout_text, to_exercise_records

logger = logging.getLogger(__name__)


WORKOUT_SYSTEM_PROMPT = """You are a fitness logging assistant. Parse the user's workout description into JSON.

Return a JSON object:
{
  "workoutType": "strength|cardio|mixed",
  "exercises": [
    {
      "name": "exercise name",
      "type": "reps|time|distance",
      "sets": [{"reps": number|null, "weightKg": number|null, "durationSeconds": number|null}],
      "distanceKm": number|null,
      "durationSeconds": number|null,
      "notes": "string|null"
    }
  ],
  "confidence": 0.0-1.0
}

Convert pounds to kilograms and miles to kilometres. Use lowercase exercise names."""

FOOD_SYSTEM_PROMPT = """You are a nutritionist. Parse the user's food description into JSON.

Return a JSON object:
{
  "mealType": "breakfast|lunch|dinner|snack",
  "foods": [
    {
      "name": "specific food name",
      "quantity": number,
      "unit": "g|oz|cup|tbsp|tsp|ml|serving|piece|slice",
      "kcal": number,
      "proteinG": number,
      "carbsG": number,
      "fatG": number,
      "confidence": 0.0-1.0
    }
  ]
}

Estimate standard portions when the quantity is vague."""

COACH_SYSTEM_PROMPT = """You are an encouraging personal fitness coach.
Give evidence-based, specific and concise advice with one to three concrete next steps.
Never give medical advice and never recommend extreme diets or training."""


@dataclass
class ModelConfig:
    """Sampling settings per request type."""
    temperature: float
    max_tokens: int


@dataclass
class HandlerResult:
    """Structured output of a handler."""
    data: Dict[str, Any]
    confidence: float
    tokens_used: int = 0
    model: Optional[str] = None


def _require(provider: Optional[AIProvider]) -> AIProvider:
    if provider is None:
        raise AIProviderError("AI provider is not configured")
    return provider


def _number(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _clamp_confidence(value: Any, default: float) -> float:
    number = _number(value)
    if number is None:
        return default
    return max(0.0, min(1.0, number))


class WorkoutParseHandler:
    """
    Parses workout text with the AI provider, or the local parser when no
    provider is configured.
    """

    def __init__(self, provider: Optional[AIProvider]):
        self._provider = provider

    async def process(self, text: str, config: ModelConfig) -> HandlerResult:
        if self._provider is None:
            return self._parse_locally(text)

        data, completion = await self._provider.complete_json(
            text,
            system_prompt=WORKOUT_SYSTEM_PROMPT,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

        exercises = self._normalize_exercises(data.get("exercises"))
        if not exercises:
            raise AIProviderError("No exercises found in workout description")

        workout_type = data.get("workoutType")
        if workout_type not in ("strength", "cardio", "mixed"):
            workout_type = "cardio" if any(e["type"] == "distance" for e in exercises) else "strength"

        return HandlerResult(
            data={"workoutType": workout_type, "exercises": exercises},
            confidence=_clamp_confidence(data.get("confidence"), 0.8),
            tokens_used=completion.total_tokens,
            model=completion.model,
        )

    def _parse_locally(self, text: str) -> HandlerResult:
        parsed = parse_workout_text(text)
        if parsed is None:
            raise ValueError("Could not parse workout description")

        return HandlerResult(
            data={
                "workoutType": parsed.workout_type,
                "exercises": to_exercise_records(parsed.exercises),
            },
            confidence=parsed.confidence,
            model="local",
        )

    @staticmethod
    def _normalize_exercises(raw: Any) -> List[Dict[str, Any]]:
        if not isinstance(raw, list):
            return []

        exercises = []
        for item in raw:
            if not isinstance(item, dict) or not item.get("name"):
                continue
            sets = [
                {
                    "reps": int(_number(s.get("reps"))) if _number(s.get("reps")) is not None else None,
                    "weightKg": _number(s.get("weightKg")),
                    "durationSeconds": _number(s.get("durationSeconds")),
                    "completed": False,
                }
                for s in item.get("sets") or []
                if isinstance(s, dict)
            ]
            exercises.append({
                "name": str(item["name"]).lower(),
                "type": item.get("type") if item.get("type") in ("reps", "time", "distance") else "reps",
                "sets": sets,
                "durationSeconds": _number(item.get("durationSeconds")),
                "distanceKm": _number(item.get("distanceKm")),
                "notes": item.get("notes"),
            })
        return exercises


class FoodParseHandler:
    """
    Parses food descriptions into diary entries with estimated nutrients.
    """

    def __init__(self, provider: Optional[AIProvider]):
        self._provider = provider

    async def process(self, text: str, config: ModelConfig) -> HandlerResult:
        provider = _require(self._provider)
        data, completion = await provider.complete_json(
            text,
            system_prompt=FOOD_SYSTEM_PROMPT,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

        foods = []
        for item in data.get("foods") or []:
            if not isinstance(item, dict) or not item.get("name"):
                continue
            foods.append({
                "name": str(item["name"]),
                "quantity": _number(item.get("quantity")) or 1.0,
                "unit": item.get("unit") or "serving",
                "kcal": _number(item.get("kcal")) or 0.0,
                "proteinG": _number(item.get("proteinG")) or 0.0,
                "carbsG": _number(item.get("carbsG")) or 0.0,
                "fatG": _number(item.get("fatG")) or 0.0,
                "confidence": _clamp_confidence(item.get("confidence"), 0.5),
            })

        if not foods:
            raise AIProviderError("No foods found in description")

        meal_type = data.get("mealType")
        if meal_type not in ("breakfast", "lunch", "dinner", "snack"):
            meal_type = "snack"

        confidence = sum(f["confidence"] for f in foods) / len(foods)

        return HandlerResult(
            data={"mealType": meal_type, "foods": foods},
            confidence=round(confidence, 2),
            tokens_used=completion.total_tokens,
            model=completion.model,
        )


class CoachHandler:
    """Single-turn coaching reply."""

    def __init__(self, provider: Optional[AIProvider]):
        self._provider = provider

    async def process(self, message: str, config: ModelConfig) -> HandlerResult:
        provider = _require(self._provider)
        completion = await provider.complete(
            message,
            system_prompt=COACH_SYSTEM_PROMPT,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

        reply = completion.text.strip()
        if not reply:
            raise AIProviderError("Coach returned an empty reply")

        return HandlerResult(
            data={"reply": reply},
            confidence=0.8,
            tokens_used=completion.total_tokens,
            model=completion.model,
        )
