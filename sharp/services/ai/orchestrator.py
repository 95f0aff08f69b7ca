"""
AI orchestrator.

Single entry point for AI features: checks the monthly tier limit, runs the
handler for the request type once, prices the call and records the outcome.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.ai import AIProvider
from common.utils.exceptions import BadRequestException
from sharp.database import collections
from sharp.database.documents import utcnow
from sharp.services.ai.handlers import (
    CoachHandler,
    FoodParseHandler,
    HandlerResult,
    ModelConfig,
    WorkoutParseHandler,
)
from sharp.services.auth.user_service import UserService
from sharp.services.usage.feature_gate import FeatureGate
from sharp.services.usage.usage_service import UsageService

logger = logging.getLogger(__name__)


# Request type -> gated feature
REQUEST_FEATURES = {
    "parse_workout": "workout_parsing",
    "parse_food": "food_parsing",
    "coach_chat": "ai_coaching",
}

MODEL_CONFIGS = {
    "parse_workout": ModelConfig(temperature=0.2, max_tokens=1000),
    "parse_food": ModelConfig(temperature=0.2, max_tokens=1000),
    "coach_chat": ModelConfig(temperature=0.7, max_tokens=2000),
}

# USD per 1K tokens
COST_PER_1K_TOKENS = {
    "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
    "gpt-4o": {"input": 0.0025, "output": 0.01},
    "claude-3-haiku": {"input": 0.00025, "output": 0.00125},
    "claude-3-5-haiku": {"input": 0.0008, "output": 0.004},
}

INPUT_TOKEN_SHARE = 0.7


def calculate_cost(tokens: int, model: Optional[str]) -> float:
    """
    Estimated cost in cents, rounded to 2 decimals.

    Tokens are split 70/30 between input and output. Dated model ids
    ("gpt-4o-mini-2024-07-18") use the longest matching price entry.
    """
    if not model or not tokens:
        return 0.0

    matches = [name for name in COST_PER_1K_TOKENS if model.startswith(name)]
    if not matches:
        return 0.0
    rates = COST_PER_1K_TOKENS[max(matches, key=len)]

    input_tokens = tokens * INPUT_TOKEN_SHARE
    output_tokens = tokens * (1 - INPUT_TOKEN_SHARE)
    dollars = input_tokens * rates["input"] / 1000 + output_tokens * rates["output"] / 1000
    return round(dollars * 100, 2)


@dataclass
class AIResponse:
    """Outcome of one orchestrated AI request."""
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    confidence: Optional[float] = None
    tokens_used: int = 0
    cost_cents: float = 0.0
    model_used: str = ""
    processing_time_ms: int = 0
    limit_reached: bool = False


class AIOrchestrator:
    """
    Runs AI requests against the tier limits and records usage.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        user_service: UserService,
        usage_service: UsageService,
        provider: Optional[AIProvider] = None,
    ):
        """
        Initialize AIOrchestrator.

        Args:
            db: MongoDB database connection
            user_service: For subscription tier lookup
            usage_service: For monthly counts and usage events
            provider: Configured AI provider, or None for local-only parsing
        """
        self._db = db
        self._user_service = user_service
        self._usage_service = usage_service
        self._contexts_collection = db[collections.AI_CONTEXTS]
        self._handlers = {
            "parse_workout": WorkoutParseHandler(provider),
            "parse_food": FoodParseHandler(provider),
            "coach_chat": CoachHandler(provider),
        }

    async def process_request(self, request_type: str, input: str, user_id: str) -> AIResponse:
        """
        Process one AI request.

        Args:
            request_type: parse_workout, parse_food or coach_chat
            input: Raw user text
            user_id: Requesting user's ID

        Returns:
            AIResponse; limit_reached is set when the monthly allowance is used up

        Raises:
            BadRequestException: Unknown request type
        """
        if request_type not in self._handlers:
            raise BadRequestException(
                message=f"Unknown AI request type: {request_type}",
                code="UNKNOWN_REQUEST_TYPE",
            )

        started = time.monotonic()
        feature = REQUEST_FEATURES[request_type]

        tier = await self._user_service.get_subscription_tier(user_id)
        current_usage = await self._usage_service.count_monthly_usage(user_id, feature)
        access = FeatureGate.check_access(feature, tier, current_usage)

        if not access.has_access:
            limit = access.usage_limit.monthly_limit if access.usage_limit else 0
            next_tier = "Pro" if tier == "free" else "Elite"
            logger.info(f"User {user_id} hit {feature} limit ({current_usage}/{limit}) on {tier}")
            return AIResponse(
                success=False,
                error=f"Monthly limit reached ({current_usage}/{limit}). Upgrade to {next_tier} for more.",
                limit_reached=True,
                processing_time_ms=self._elapsed_ms(started),
            )

        try:
            result = await self._handlers[request_type].process(input, MODEL_CONFIGS[request_type])
        except Exception as e:
            logger.exception(f"AI {request_type} failed for user {user_id}: {e}")
            await self._usage_service.track(user_id, feature, tier=tier, success=False)
            return AIResponse(
                success=False,
                error=str(e) or "Processing failed",
                processing_time_ms=self._elapsed_ms(started),
            )

        model = result.model or ""
        cost_cents = calculate_cost(result.tokens_used, model)
        elapsed = self._elapsed_ms(started)

        await asyncio.gather(
            self._store_context(user_id, request_type, input, result, elapsed),
            self._usage_service.track(
                user_id,
                feature,
                tier=tier,
                tokens_used=result.tokens_used,
                cost_cents=cost_cents,
                model=model,
            ),
        )

        return AIResponse(
            success=True,
            data=result.data,
            confidence=result.confidence,
            tokens_used=result.tokens_used,
            cost_cents=cost_cents,
            model_used=model,
            processing_time_ms=elapsed,
        )

    async def _store_context(
        self,
        user_id: str,
        request_type: str,
        raw_input: str,
        result: HandlerResult,
        processing_time_ms: int,
    ) -> None:
        await self._contexts_collection.insert_one({
            "userId": ObjectId(user_id),
            "requestType": request_type,
            "rawInput": raw_input,
            "parsedOutput": result.data,
            "confidence": result.confidence,
            "model": result.model,
            "tokensUsed": result.tokens_used,
            "processingTimeMs": processing_time_ms,
            "createdAt": utcnow(),
        })

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.monotonic() - started) * 1000)
