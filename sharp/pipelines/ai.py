"""
AI pipeline functions.

Runs orchestrated AI requests and maps their outcome to API errors or
saved records.
"""

import logging
from typing import Optional, Dict, Any

from common.utils.exceptions import InternalServerException, RateLimitException
from sharp.database.documents import serialize_doc
from sharp.pipelines.fitness import today_string
from sharp.pipelines.usage import user_tier
from sharp.services.ai.orchestrator import AIOrchestrator, AIResponse
from sharp.services.fitness.food_log_service import FoodLogService, NUTRIENT_KEYS
from sharp.services.fitness.workout_service import WorkoutService
from sharp.services.usage.feature_gate import FeatureGate
from sharp.services.usage.usage_service import UsageService

logger = logging.getLogger(__name__)


async def _run(
    orchestrator: AIOrchestrator,
    usage_service: UsageService,
    user: Dict[str, Any],
    request_type: str,
    text: str,
) -> AIResponse:
    """
    Run one AI request.

    Raises:
        RateLimitException: Monthly allowance used up
        InternalServerException: Handler failed
    """
    user_id = str(user["_id"])
    response = await orchestrator.process_request(request_type, text, user_id)

    if response.limit_reached:
        summary = await usage_service.usage_summary(user_id, user_tier(user))
        raise RateLimitException(
            message=response.error,
            code="USAGE_LIMIT_REACHED",
            details={"upgradeRequired": True, "usage": summary},
        )

    if not response.success:
        raise InternalServerException(
            message=response.error or "AI processing failed",
            code="AI_PROCESSING_FAILED",
        )

    return response


async def _prompt_upgrade(usage_service: UsageService, user: Dict[str, Any]) -> bool:
    counts = await usage_service.monthly_counts(str(user["_id"]))
    return FeatureGate.should_prompt_upgrade(user_tier(user), counts)


def _meta(response: AIResponse) -> Dict[str, Any]:
    return {
        "confidence": response.confidence,
        "tokensUsed": response.tokens_used,
        "costCents": response.cost_cents,
        "model": response.model_used,
        "processingTimeMs": response.processing_time_ms,
    }


async def ai_parse_workout_pipeline(
    orchestrator: AIOrchestrator,
    usage_service: UsageService,
    workout_service: WorkoutService,
    user: Dict[str, Any],
    text: str,
    save: bool = True,
    date: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Parse a workout description with AI and optionally save it.

    Returns:
        dict with parsed data, the saved workout, call metadata and promptUpgrade
    """
    response = await _run(orchestrator, usage_service, user, "parse_workout", text)

    workout = None
    if save:
        workout = await workout_service.create_workout(
            user_id=str(user["_id"]),
            date=date or today_string(),
            workout_type=response.data["workoutType"],
            exercises=response.data["exercises"],
            ai_parsed=True,
            raw_input=text,
            confidence=response.confidence,
        )

    return {
        "parsed": response.data,
        "workout": serialize_doc(workout),
        **_meta(response),
        "promptUpgrade": await _prompt_upgrade(usage_service, user),
    }


async def ai_parse_food_pipeline(
    orchestrator: AIOrchestrator,
    usage_service: UsageService,
    food_log_service: FoodLogService,
    user: Dict[str, Any],
    text: str,
    save: bool = True,
    date: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Parse a food description with AI and optionally log each food.

    Parsed nutrients are totals for the parsed quantity; they are stored
    through the per-unit snapshot so totals stay consistent.
    """
    response = await _run(orchestrator, usage_service, user, "parse_food", text)

    entries = []
    if save:
        for food in response.data["foods"]:
            quantity = food["quantity"] or 1.0
            entry = await food_log_service.add_entry(
                user_id=str(user["_id"]),
                date=date or today_string(),
                meal_type=response.data["mealType"],
                food_name=food["name"],
                quantity=quantity,
                unit=food["unit"],
                nutrients_per_unit={key: food[key] / quantity for key in NUTRIENT_KEYS},
                notes="Logged from AI parse",
            )
            entries.append(serialize_doc(entry))

    return {
        "parsed": response.data,
        "entries": entries,
        **_meta(response),
        "promptUpgrade": await _prompt_upgrade(usage_service, user),
    }


async def ai_coach_pipeline(
    orchestrator: AIOrchestrator,
    usage_service: UsageService,
    user: Dict[str, Any],
    message: str,
) -> Dict[str, Any]:
    response = await _run(orchestrator, usage_service, user, "coach_chat", message)

    return {
        "reply": response.data["reply"],
        **_meta(response),
        "promptUpgrade": await _prompt_upgrade(usage_service, user),
    }
