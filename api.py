"""
SharpSuite FastAPI Application

Main entry point for the SharpSuite API: CourtSharp court booking,
FeelSharper fitness tracking, StudySharper focus and reading.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from common.database import MongoDB
from common.utils import success_response

from sharp.config import settings
from sharp.database.collections import ensure_indexes
from sharp.dependencies import init_all_services
from sharp.errors import register_error_handlers
from sharp.routers import (
    auth_router,
    courts_router,
    bookings_router,
    workouts_router,
    nutrition_router,
    recipes_router,
    focus_router,
    leagues_router,
    books_router,
    reading_router,
    usage_router,
    ai_router,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# =============================================================================
# Database Instance
# =============================================================================
mongodb = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Validates configuration, connects to MongoDB, creates indexes and
    wires services on startup; closes the connection on shutdown.
    """
    logger.info("Starting SharpSuite API...")
    settings.validate_required()

    await mongodb.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
        document_models=[],
    )

    await ensure_indexes(mongodb.db)
    init_all_services(mongodb.db, settings)
    logger.info("SharpSuite API started")

    yield

    logger.info("Shutting down SharpSuite API...")
    await mongodb.disconnect()


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="SharpSuite API",
    description="Court booking, fitness tracking and focus/reading tracking",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# =============================================================================
# Include Routers (all under /api prefix)
# =============================================================================
API_PREFIX = "/api"

app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(courts_router, prefix=API_PREFIX)
app.include_router(bookings_router, prefix=API_PREFIX)
app.include_router(workouts_router, prefix=API_PREFIX)
app.include_router(nutrition_router, prefix=API_PREFIX)
app.include_router(recipes_router, prefix=API_PREFIX)
app.include_router(focus_router, prefix=API_PREFIX)
app.include_router(leagues_router, prefix=API_PREFIX)
app.include_router(books_router, prefix=API_PREFIX)
app.include_router(reading_router, prefix=API_PREFIX)
app.include_router(usage_router, prefix=API_PREFIX)
app.include_router(ai_router, prefix=API_PREFIX)


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """Status of the API and its database connection."""
    database_ok = await mongodb.ping()
    return success_response({
        "status": "ok" if database_ok else "degraded",
        "version": VERSION,
        "database": database_ok,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
