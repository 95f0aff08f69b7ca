"""
Reading tracker pipeline functions.

Stateless orchestration logic for books, reading sessions and stats.
"""

import logging
from typing import Optional, List, Dict, Any

from sharp.database.documents import serialize_doc
from sharp.services.reading.book_service import BookService
from sharp.services.reading.reading_session_service import ReadingSessionService

logger = logging.getLogger(__name__)


async def list_books_pipeline(
    book_service: BookService,
    user_id: str,
    status: Optional[str] = None,
) -> List[Dict[str, Any]]:
    books = await book_service.list_books(user_id, status=status)
    return [serialize_doc(b) for b in books]


async def create_book_pipeline(book_service: BookService, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    book = await book_service.create_book(user_id, data)
    return serialize_doc(book)


async def update_book_pipeline(
    book_service: BookService,
    user_id: str,
    book_id: str,
    updates: Dict[str, Any],
) -> Dict[str, Any]:
    book = await book_service.update_book(user_id, book_id, updates)
    return serialize_doc(book)


async def delete_book_pipeline(book_service: BookService, user_id: str, book_id: str) -> None:
    await book_service.delete_book(user_id, book_id)


async def log_reading_session_pipeline(
    book_service: BookService,
    reading_session_service: ReadingSessionService,
    user_id: str,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Record a reading session.

    Advances the book's current page (completing it at the last page) and
    updates the daily reading streak.

    Args:
        book_service: For book lookup and progress
        reading_session_service: For session and streak persistence
        user_id: Current user's ID
        data: bookId, minutes, pagesRead, notes

    Returns:
        dict with session, book and streak {current, max}

    Raises:
        NotFoundException: Book is not the user's
    """
    book = await book_service.get_book(user_id, data["bookId"])

    session = await reading_session_service.create_session(
        user_id,
        book["_id"],
        minutes=data["minutes"],
        pages_read=data["pagesRead"],
        notes=data.get("notes"),
    )
    book = await book_service.advance_progress(book, data["pagesRead"])
    streak = await reading_session_service.update_streak(user_id)

    return {
        "session": serialize_doc(session),
        "book": serialize_doc(book),
        "streak": {
            "current": streak.get("currentDays", 0),
            "max": streak.get("maxDays", 0),
        },
    }


async def reading_stats_pipeline(
    book_service: BookService,
    reading_session_service: ReadingSessionService,
    user_id: str,
) -> Dict[str, Any]:
    """
    Reading stats.

    Returns:
        dict with streak, weekly and monthly totals and book counts by status
    """
    stats = await reading_session_service.get_stats(user_id)
    stats["books"] = await book_service.count_by_status(user_id)
    return stats
