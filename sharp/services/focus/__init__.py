"""StudySharper focus, leaderboard and league services."""

from sharp.services.focus.focus_service import FocusService, calculate_points, summarize_week
from sharp.services.focus.leaderboard_service import LeaderboardService, assign_ranks
from sharp.services.focus.league_service import LeagueService
from sharp.services.focus.weeks import week_start, week_end, week_number

__all__ = [
    "FocusService",
    "LeaderboardService",
    "LeagueService",
    "calculate_points",
    "summarize_week",
    "assign_ranks",
    "week_start",
    "week_end",
    "week_number",
]
