"""AI orchestration for FeelSharper features."""

from sharp.services.ai.handlers import (
    CoachHandler,
    FoodParseHandler,
    HandlerResult,
    WorkoutParseHandler,
)
from sharp.services.ai.orchestrator import (
    AIOrchestrator,
    AIResponse,
    COST_PER_1K_TOKENS,
    calculate_cost,
)

__all__ = [
    "AIOrchestrator",
    "AIResponse",
    "COST_PER_1K_TOKENS",
    "calculate_cost",
    "CoachHandler",
    "FoodParseHandler",
    "HandlerResult",
    "WorkoutParseHandler",
]
