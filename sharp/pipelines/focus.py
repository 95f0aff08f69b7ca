"""
StudySharper pipeline functions.

Stateless orchestration logic for focus sessions, the weekly leaderboard
and leagues.
"""

import csv
import io
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

from common.utils.exceptions import ForbiddenException
from sharp.database.documents import as_utc, serialize_doc
from sharp.services.focus.focus_service import FocusService
from sharp.services.focus.leaderboard_service import LeaderboardService
from sharp.services.focus.league_service import LeagueService
from sharp.services.focus.weeks import week_start, week_end, week_number

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = (
    "startTime",
    "endTime",
    "durationSeconds",
    "category",
    "productiveScore",
    "idleEvents",
    "final",
)


async def save_focus_session_pipeline(
    focus_service: FocusService,
    league_service: LeagueService,
    user: Dict[str, Any],
    data: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Store a focus session heartbeat.

    A final heartbeat with an end time recomputes the weekly score and
    copies it onto the user's league membership.

    Args:
        focus_service: For session and score persistence
        league_service: For league standings
        user: Current user
        data: Validated session fields

    Returns:
        dict with session and weeklyScore (None unless finalised)

    Raises:
        ForbiddenException: User turned focus tracking off
    """
    if user.get("focusTrackingEnabled") is False:
        raise ForbiddenException(
            message="Focus tracking is disabled for this account",
            code="FOCUS_TRACKING_DISABLED",
        )

    user_id = str(user["_id"])
    data = {**data, "startTime": as_utc(data["startTime"])}
    if data.get("endTime"):
        data["endTime"] = as_utc(data["endTime"])

    session = await focus_service.save_session(user_id, data)

    score = None
    if data.get("final") and data.get("endTime"):
        score = await focus_service.update_weekly_score(
            user_id,
            data["startTime"],
            group_id=user.get("teamId"),
        )
        await league_service.record_focus_minutes(user_id, week_number(data["startTime"]), score)

    return {
        "session": serialize_doc(session),
        "weeklyScore": serialize_doc(score),
    }


async def list_focus_sessions_pipeline(
    focus_service: FocusService,
    user_id: str,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    sessions = await focus_service.list_sessions(
        user_id,
        start_date=as_utc(start_date) if start_date else None,
        end_date=as_utc(end_date) if end_date else None,
    )
    return [serialize_doc(s) for s in sessions]


async def leaderboard_pipeline(
    leaderboard_service: LeaderboardService,
    user: Dict[str, Any],
    group_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    This week's ranked leaderboard.

    Returns:
        dict with weekStart, weekEnd, entries and the caller's own entry (or None)

    Raises:
        ForbiddenException: group_id is not the user's team
    """
    if group_id and group_id != user.get("teamId"):
        raise ForbiddenException(
            message="You can only view your own team's leaderboard",
            code="GROUP_ACCESS_DENIED",
        )

    user_id = str(user["_id"])
    start = week_start()
    entries = await leaderboard_service.get_leaderboard(group_id=group_id, moment=start)

    return {
        "weekStart": start,
        "weekEnd": week_end(start),
        "entries": entries,
        "currentUser": next((e for e in entries if e["userId"] == user_id), None),
    }


async def export_focus_sessions_pipeline(focus_service: FocusService, user_id: str) -> str:
    """User's focus sessions as CSV text, newest first."""
    sessions = await focus_service.list_sessions(user_id)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, extrasaction="ignore")
    writer.writeheader()
    for session in sessions:
        row = {column: session.get(column) for column in EXPORT_COLUMNS}
        for column in ("startTime", "endTime"):
            if isinstance(row[column], datetime):
                row[column] = row[column].isoformat()
        writer.writerow(row)

    logger.info(f"Exported {len(sessions)} focus sessions for user {user_id}")
    return buffer.getvalue()


async def current_league_pipeline(league_service: LeagueService, user_id: str) -> Dict[str, Any]:
    result = await league_service.get_current_league(user_id)
    return {
        "league": serialize_doc(result["league"]),
        "members": result["members"],
        "userRank": result["userRank"],
    }
