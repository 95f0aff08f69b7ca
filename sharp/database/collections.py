"""
SharpSuite collection names and index setup.

Uniqueness rules live in MongoDB indexes; services rely on
DuplicateKeyError instead of checking in code.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, IndexModel

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────
# Collection names
# ─────────────────────────────────────────────────────────────────

USERS = "users"
COURTS = "courts"
BOOKINGS = "bookings"
WORKOUTS = "workouts"
FOOD_LOGS = "foodlogs"
RECIPES = "recipes"
FOCUS_SESSIONS = "focussessions"
WEEKLY_SCORES = "weeklyscores"
LEAGUES = "leagues"
LEAGUE_MEMBERSHIPS = "leaguememberships"
BOOKS = "books"
READING_SESSIONS = "readingsessions"
READING_STREAKS = "readingstreaks"
USAGE_EVENTS = "usageevents"
AI_CONTEXTS = "aicontexts"


INDEXES = {
    USERS: [
        IndexModel([("email", ASCENDING)], unique=True),
        IndexModel([("teamId", ASCENDING)]),
    ],
    COURTS: [
        IndexModel([("teamId", ASCENDING), ("name", ASCENDING)]),
    ],
    BOOKINGS: [
        IndexModel([("courtId", ASCENDING), ("startTime", ASCENDING), ("endTime", ASCENDING)]),
        IndexModel([("teamId", ASCENDING), ("startTime", ASCENDING)]),
    ],
    WORKOUTS: [
        IndexModel([("userId", ASCENDING), ("date", DESCENDING)]),
    ],
    FOOD_LOGS: [
        IndexModel([("userId", ASCENDING), ("date", ASCENDING)]),
    ],
    RECIPES: [
        IndexModel([("userId", ASCENDING), ("name", ASCENDING)], unique=True),
        IndexModel([("isPublic", ASCENDING), ("createdAt", DESCENDING)]),
    ],
    FOCUS_SESSIONS: [
        IndexModel([("userId", ASCENDING), ("startTime", ASCENDING)]),
    ],
    WEEKLY_SCORES: [
        IndexModel([("userId", ASCENDING), ("weekStart", ASCENDING)], unique=True),
        IndexModel([("weekStart", ASCENDING), ("points", DESCENDING)]),
    ],
    LEAGUES: [
        IndexModel([("weekNumber", ASCENDING)]),
    ],
    LEAGUE_MEMBERSHIPS: [
        IndexModel([("userId", ASCENDING), ("weekNumber", ASCENDING)], unique=True),
        IndexModel([("leagueId", ASCENDING), ("points", DESCENDING)]),
    ],
    BOOKS: [
        IndexModel([("userId", ASCENDING), ("status", ASCENDING), ("dateAdded", DESCENDING)]),
    ],
    READING_SESSIONS: [
        IndexModel([("userId", ASCENDING), ("startTime", DESCENDING)]),
    ],
    READING_STREAKS: [
        IndexModel([("userId", ASCENDING), ("isActive", ASCENDING)]),
    ],
    USAGE_EVENTS: [
        IndexModel([("userId", ASCENDING), ("feature", ASCENDING), ("createdAt", DESCENDING)]),
    ],
    AI_CONTEXTS: [
        IndexModel([("userId", ASCENDING), ("createdAt", DESCENDING)]),
    ],
}


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create every index declared in INDEXES (no-op for existing ones)."""
    for name, indexes in INDEXES.items():
        await db[name].create_indexes(indexes)
        logger.debug(f"Indexes ensured for {name}")
    logger.info(f"Indexes ensured for {len(INDEXES)} collections")
