"""
SharpSuite application settings.

Extends the base settings with app-specific configuration.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """SharpSuite-specific settings."""

    # ==========================================================================
    # Focus & Leagues
    # ==========================================================================
    # Members per weekly league before a new one is opened
    LEAGUE_MAX_SIZE: int = 8

    # Rows returned (and ranked) on the weekly focus leaderboard
    LEADERBOARD_SIZE: int = 50

    # ==========================================================================
    # Fitness
    # ==========================================================================
    RECIPES_MAX_PAGE_SIZE: int = 50


settings = Settings()
