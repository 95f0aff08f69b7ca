"""
FastAPI dependencies for SharpSuite.

Provides dependency injection for all services.
"""

import logging
from typing import Annotated, Optional, Callable, Awaitable

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.ai import AIProvider, ClaudeProvider, OpenAIProvider
from common.auth import JWTAuth

# Auth
from sharp.middleware.auth import AuthMiddleware
from sharp.services.auth.user_service import UserService

# CourtSync
from sharp.services.courts.court_service import CourtService
from sharp.services.courts.booking_service import BookingService

# FeelSharper
from sharp.services.fitness.workout_service import WorkoutService
from sharp.services.fitness.food_log_service import FoodLogService
from sharp.services.fitness.recipe_service import RecipeService

# StudySharper
from sharp.services.focus.focus_service import FocusService
from sharp.services.focus.leaderboard_service import LeaderboardService
from sharp.services.focus.league_service import LeagueService

# Reading tracker
from sharp.services.reading.book_service import BookService
from sharp.services.reading.reading_session_service import ReadingSessionService

# Usage & AI
from sharp.services.usage.usage_service import UsageService
from sharp.services.ai.orchestrator import AIOrchestrator

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────
# Global service instances
# ─────────────────────────────────────────────────────────────────

# Auth
_jwt_auth: Optional[JWTAuth] = None
_auth_middleware: Optional[AuthMiddleware] = None
_user_service: Optional[UserService] = None

# Courts
_court_service: Optional[CourtService] = None
_booking_service: Optional[BookingService] = None

# Fitness
_workout_service: Optional[WorkoutService] = None
_food_log_service: Optional[FoodLogService] = None
_recipe_service: Optional[RecipeService] = None

# Focus
_focus_service: Optional[FocusService] = None
_leaderboard_service: Optional[LeaderboardService] = None
_league_service: Optional[LeagueService] = None

# Reading
_book_service: Optional[BookService] = None
_reading_session_service: Optional[ReadingSessionService] = None

# Usage & AI
_usage_service: Optional[UsageService] = None
_ai_provider: Optional[AIProvider] = None
_ai_orchestrator: Optional[AIOrchestrator] = None


# ─────────────────────────────────────────────────────────────────
# Initialization functions
# ─────────────────────────────────────────────────────────────────

def build_ai_provider(settings) -> Optional[AIProvider]:
    """
    Create the configured AI provider.

    Returns:
        Provider instance, or None when no API key is set
    """
    api_key = settings.ai_api_key()
    if not api_key:
        logger.warning(f"No API key for AI provider '{settings.AI_PROVIDER}'; AI features limited")
        return None

    if settings.AI_PROVIDER == "claude":
        return ClaudeProvider(
            api_key=api_key,
            model=settings.CLAUDE_MODEL,
            max_retries=settings.AI_MAX_RETRIES,
        )

    return OpenAIProvider(
        api_key=api_key,
        model=settings.OPENAI_MODEL,
        max_retries=settings.AI_MAX_RETRIES,
    )


def init_auth_services(db: AsyncIOMotorDatabase, settings) -> None:
    """Initialize auth services."""
    global _jwt_auth, _auth_middleware, _user_service

    _user_service = UserService(db=db)
    _jwt_auth = JWTAuth(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
        get_user_by_email=_user_service.get_user_by_email,
    )
    _auth_middleware = AuthMiddleware(
        auth_provider=_jwt_auth,
        user_service=_user_service,
        cookie_name=settings.SESSION_COOKIE_NAME,
    )


def init_court_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize CourtSync services."""
    global _court_service, _booking_service

    _court_service = CourtService(db=db)
    _booking_service = BookingService(db=db)


def init_fitness_services(db: AsyncIOMotorDatabase, settings) -> None:
    """Initialize FeelSharper services."""
    global _workout_service, _food_log_service, _recipe_service

    _workout_service = WorkoutService(db=db)
    _food_log_service = FoodLogService(db=db)
    _recipe_service = RecipeService(db=db, max_page_size=settings.RECIPES_MAX_PAGE_SIZE)


def init_focus_services(db: AsyncIOMotorDatabase, settings) -> None:
    """Initialize StudySharper services."""
    global _focus_service, _leaderboard_service, _league_service

    _focus_service = FocusService(db=db)
    _leaderboard_service = LeaderboardService(db=db, size=settings.LEADERBOARD_SIZE)
    _league_service = LeagueService(db=db, max_size=settings.LEAGUE_MAX_SIZE)


def init_reading_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize reading tracker services."""
    global _book_service, _reading_session_service

    _book_service = BookService(db=db)
    _reading_session_service = ReadingSessionService(db=db)


def init_ai_services(db: AsyncIOMotorDatabase, settings) -> None:
    """Initialize usage tracking and AI services. Requires auth services."""
    global _usage_service, _ai_provider, _ai_orchestrator

    _usage_service = UsageService(db=db)
    _ai_provider = build_ai_provider(settings)
    _ai_orchestrator = AIOrchestrator(
        db=db,
        user_service=_user_service,
        usage_service=_usage_service,
        provider=_ai_provider,
    )


def init_all_services(db: AsyncIOMotorDatabase, settings) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: Main MongoDB database connection
        settings: Application settings
    """
    init_auth_services(db, settings)
    init_court_services(db)
    init_fitness_services(db, settings)
    init_focus_services(db, settings)
    init_reading_services(db)
    init_ai_services(db, settings)


# ─────────────────────────────────────────────────────────────────
# Auth getters
# ─────────────────────────────────────────────────────────────────

def get_jwt_auth() -> JWTAuth:
    """Get JWT auth provider."""
    if _jwt_auth is None:
        raise RuntimeError("Auth services not initialized.")
    return _jwt_auth


def get_auth_middleware() -> AuthMiddleware:
    """Get auth middleware instance."""
    if _auth_middleware is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_middleware


def get_user_service() -> UserService:
    if _user_service is None:
        raise RuntimeError("Auth services not initialized.")
    return _user_service


async def require_auth(
    request: Request,
    auth_middleware: Annotated[AuthMiddleware, Depends(get_auth_middleware)]
) -> dict:
    """Dependency that requires authentication."""
    return await auth_middleware.require_auth(request)


def require_roles(*roles: str) -> Callable[..., Awaitable[dict]]:
    """
    Dependency factory that requires one of the given roles.

    Example:
        user: Annotated[dict, Depends(require_roles("coach", "assistant_coach"))]
    """
    async def dependency(user: Annotated[dict, Depends(require_auth)]) -> dict:
        AuthMiddleware.check_role(user, roles)
        return user

    return dependency


# ─────────────────────────────────────────────────────────────────
# Court getters
# ─────────────────────────────────────────────────────────────────

def get_court_service() -> CourtService:
    if _court_service is None:
        raise RuntimeError("Court services not initialized.")
    return _court_service


def get_booking_service() -> BookingService:
    if _booking_service is None:
        raise RuntimeError("Court services not initialized.")
    return _booking_service


# ─────────────────────────────────────────────────────────────────
# Fitness getters
# ─────────────────────────────────────────────────────────────────

def get_workout_service() -> WorkoutService:
    if _workout_service is None:
        raise RuntimeError("Fitness services not initialized.")
    return _workout_service


def get_food_log_service() -> FoodLogService:
    if _food_log_service is None:
        raise RuntimeError("Fitness services not initialized.")
    return _food_log_service


def get_recipe_service() -> RecipeService:
    if _recipe_service is None:
        raise RuntimeError("Fitness services not initialized.")
    return _recipe_service


# ─────────────────────────────────────────────────────────────────
# Focus getters
# ─────────────────────────────────────────────────────────────────

def get_focus_service() -> FocusService:
    if _focus_service is None:
        raise RuntimeError("Focus services not initialized.")
    return _focus_service


def get_leaderboard_service() -> LeaderboardService:
    if _leaderboard_service is None:
        raise RuntimeError("Focus services not initialized.")
    return _leaderboard_service


def get_league_service() -> LeagueService:
    if _league_service is None:
        raise RuntimeError("Focus services not initialized.")
    return _league_service


# ─────────────────────────────────────────────────────────────────
# Reading getters
# ─────────────────────────────────────────────────────────────────

def get_book_service() -> BookService:
    if _book_service is None:
        raise RuntimeError("Reading services not initialized.")
    return _book_service


def get_reading_session_service() -> ReadingSessionService:
    if _reading_session_service is None:
        raise RuntimeError("Reading services not initialized.")
    return _reading_session_service


# ─────────────────────────────────────────────────────────────────
# Usage & AI getters
# ─────────────────────────────────────────────────────────────────

def get_usage_service() -> UsageService:
    if _usage_service is None:
        raise RuntimeError("AI services not initialized.")
    return _usage_service


def get_ai_orchestrator() -> AIOrchestrator:
    """Get AI orchestrator instance."""
    if _ai_orchestrator is None:
        raise RuntimeError("AI services not initialized.")
    return _ai_orchestrator
