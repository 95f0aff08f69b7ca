"""Reading tracker services."""

from sharp.services.reading.book_service import BookService, BOOK_STATUSES
from sharp.services.reading.reading_session_service import (
    ReadingSessionService,
    next_streak_action,
)

__all__ = [
    "BookService",
    "BOOK_STATUSES",
    "ReadingSessionService",
    "next_streak_action",
]
