"""Unit tests for books, reading sessions and the reading streak."""

import pytest
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from common.utils.exceptions import NotFoundException, ValidationException
from sharp.pipelines import reading as pipelines
from sharp.services.reading.book_service import BookService
from sharp.services.reading.reading_session_service import (
    ReadingSessionService,
    next_streak_action,
    streak_last_day,
)


TODAY = date(2026, 3, 11)


def _streak(start, days, max_days=None):
    return {
        "_id": ObjectId(),
        "startDate": datetime(start.year, start.month, start.day, tzinfo=timezone.utc),
        "currentDays": days,
        "maxDays": max_days or days,
        "isActive": True,
    }


# ─────────────────────────────────────────────────────────────────
# Streak rules
# ─────────────────────────────────────────────────────────────────


class TestStreakRules:
    def test_last_day(self):
        assert streak_last_day(_streak(date(2026, 3, 1), 5)) == date(2026, 3, 5)

    def test_no_streak_starts(self):
        assert next_streak_action(None, TODAY) == "start"

    def test_yesterday_extends(self):
        assert next_streak_action(_streak(date(2026, 3, 8), 3), TODAY) == "extend"

    def test_gap_restarts(self):
        assert next_streak_action(_streak(date(2026, 3, 1), 3), TODAY) == "restart"

    def test_already_read_today_keeps(self):
        assert next_streak_action(_streak(date(2026, 3, 9), 3), TODAY) == "keep"


class TestUpdateStreak:
    @pytest.mark.asyncio
    async def test_extend_updates_max(self, mock_db, mock_collection, sample_user_id):
        streak = _streak(date(2026, 3, 8), 3, max_days=3)
        mock_collection.find_one.return_value = streak

        result = await ReadingSessionService(mock_db).update_streak(sample_user_id, today=TODAY)

        assert result["currentDays"] == 4
        assert result["maxDays"] == 4
        update = mock_collection.update_one.call_args[0][1]
        assert update["$set"]["currentDays"] == 4
        mock_collection.insert_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_restart_closes_old_streak(self, mock_db, mock_collection, sample_user_id):
        old = _streak(date(2026, 3, 1), 3)
        mock_collection.find_one.return_value = old

        result = await ReadingSessionService(mock_db).update_streak(sample_user_id, today=TODAY)

        filter_, update = mock_collection.update_one.call_args[0]
        assert filter_ == {"_id": old["_id"]}
        assert update["$set"]["isActive"] is False
        assert result["currentDays"] == 1
        assert result["startDate"] == datetime(2026, 3, 11, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_keep_writes_nothing(self, mock_db, mock_collection, sample_user_id):
        streak = _streak(date(2026, 3, 10), 2)
        mock_collection.find_one.return_value = streak

        result = await ReadingSessionService(mock_db).update_streak(sample_user_id, today=TODAY)

        assert result is streak
        mock_collection.update_one.assert_not_called()
        mock_collection.insert_one.assert_not_called()


# ─────────────────────────────────────────────────────────────────
# Books
# ─────────────────────────────────────────────────────────────────


class TestBooks:
    @pytest.mark.asyncio
    async def test_title_required(self, mock_db, sample_user_id):
        with pytest.raises(ValidationException) as exc_info:
            await BookService(mock_db).create_book(sample_user_id, {"title": "  "})

        assert exc_info.value.errors[0]["field"] == "title"

    @pytest.mark.asyncio
    async def test_defaults_to_reading(self, mock_db, mock_collection, sample_user_id):
        book = await BookService(mock_db).create_book(sample_user_id, {"title": "Dune", "totalPages": 412})

        assert book["status"] == "reading"
        assert book["currentPage"] == 0
        assert book["dateStarted"] is not None

    @pytest.mark.asyncio
    async def test_want_to_read_not_started(self, mock_db, sample_user_id):
        book = await BookService(mock_db).create_book(
            sample_user_id, {"title": "Dune", "status": "want_to_read"}
        )
        assert book["dateStarted"] is None

    @pytest.mark.asyncio
    async def test_progress_completes_book(self, mock_db, mock_collection):
        book = {"_id": ObjectId(), "currentPage": 400, "totalPages": 412, "status": "reading"}

        await BookService(mock_db).advance_progress(book, 20)

        fields = mock_collection.find_one_and_update.call_args[0][1]["$set"]
        assert fields["currentPage"] == 420
        assert fields["status"] == "completed"
        assert "dateFinished" in fields

    @pytest.mark.asyncio
    async def test_progress_without_total_pages(self, mock_db, mock_collection):
        book = {"_id": ObjectId(), "currentPage": 10, "totalPages": None, "status": "reading"}

        await BookService(mock_db).advance_progress(book, 20)

        fields = mock_collection.find_one_and_update.call_args[0][1]["$set"]
        assert fields["currentPage"] == 30
        assert "status" not in fields

    @pytest.mark.asyncio
    async def test_other_users_book_not_found(self, mock_db, mock_collection, sample_user_id):
        mock_collection.find_one.return_value = None

        with pytest.raises(NotFoundException):
            await BookService(mock_db).get_book(sample_user_id, str(ObjectId()))

    @pytest.mark.asyncio
    async def test_delete_missing(self, mock_db, mock_collection, sample_user_id):
        mock_collection.delete_one.return_value.deleted_count = 0

        with pytest.raises(NotFoundException):
            await BookService(mock_db).delete_book(sample_user_id, str(ObjectId()))


# ─────────────────────────────────────────────────────────────────
# Pipelines
# ─────────────────────────────────────────────────────────────────


class TestLogReadingSession:
    @pytest.mark.asyncio
    async def test_session_advances_book_and_streak(self, sample_user_id):
        book = {"_id": ObjectId(), "title": "Dune", "currentPage": 0, "totalPages": 412}
        book_service = MagicMock()
        book_service.get_book = AsyncMock(return_value=book)
        book_service.advance_progress = AsyncMock(return_value={**book, "currentPage": 30})
        session_service = MagicMock()
        session_service.create_session = AsyncMock(return_value={"_id": ObjectId(), "minutes": 25})
        session_service.update_streak = AsyncMock(return_value={"currentDays": 4, "maxDays": 9})

        result = await pipelines.log_reading_session_pipeline(
            book_service,
            session_service,
            sample_user_id,
            {"bookId": str(book["_id"]), "minutes": 25, "pagesRead": 30},
        )

        book_service.advance_progress.assert_called_once_with(book, 30)
        assert result["book"]["currentPage"] == 30
        assert result["streak"] == {"current": 4, "max": 9}

    @pytest.mark.asyncio
    async def test_unknown_book(self, sample_user_id):
        book_service = MagicMock()
        book_service.get_book = AsyncMock(side_effect=NotFoundException(message="Book not found"))
        session_service = MagicMock()
        session_service.create_session = AsyncMock()

        with pytest.raises(NotFoundException):
            await pipelines.log_reading_session_pipeline(
                book_service,
                session_service,
                sample_user_id,
                {"bookId": str(ObjectId()), "minutes": 25, "pagesRead": 30},
            )

        session_service.create_session.assert_not_called()


@pytest.mark.asyncio
async def test_stats_without_sessions(mock_db, mock_collection, sample_user_id, now):
    mock_collection.find_one.return_value = None

    stats = await ReadingSessionService(mock_db).get_stats(sample_user_id, now=now)

    assert stats == {
        "streak": {"current": 0, "max": 0},
        "weekly": {"minutes": 0, "pages": 0, "sessions": 0},
        "monthly": {"minutes": 0, "pages": 0, "sessions": 0},
    }
