"""
SharpSuite API Routers.

Each router handles a specific domain.
"""

from sharp.routers.auth import router as auth_router
from sharp.routers.courts import router as courts_router
from sharp.routers.bookings import router as bookings_router
from sharp.routers.workouts import router as workouts_router
from sharp.routers.nutrition import router as nutrition_router
from sharp.routers.recipes import router as recipes_router
from sharp.routers.focus import router as focus_router
from sharp.routers.leagues import router as leagues_router
from sharp.routers.books import router as books_router
from sharp.routers.reading import router as reading_router
from sharp.routers.usage import router as usage_router
from sharp.routers.ai import router as ai_router

__all__ = [
    "auth_router",
    "courts_router",
    "bookings_router",
    "workouts_router",
    "nutrition_router",
    "recipes_router",
    "focus_router",
    "leagues_router",
    "books_router",
    "reading_router",
    "usage_router",
    "ai_router",
]
