"""
Week boundaries for focus scores and leagues.

Weeks start on Sunday 00:00 UTC.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

# First Sunday of the Unix epoch; week numbers count from here
EPOCH_SUNDAY = date(1970, 1, 4)


def week_start(moment: Optional[datetime] = None) -> datetime:
    """Sunday 00:00 UTC of the week containing moment (default: now)."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)

    # Python weekday(): Monday=0 ... Sunday=6
    days_since_sunday = (moment.weekday() + 1) % 7
    start = moment - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def week_end(start: datetime) -> datetime:
    """Saturday of the week beginning at start (same time of day)."""
    return start + timedelta(days=6)


def week_number(moment: Optional[datetime] = None) -> int:
    """Whole weeks between EPOCH_SUNDAY and the week containing moment."""
    return (week_start(moment).date() - EPOCH_SUNDAY).days // 7
