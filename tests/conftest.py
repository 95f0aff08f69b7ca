"""Shared test fixtures for SharpSuite backend tests."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId


def _cursor(docs):
    """Motor-style cursor: chainable sort/skip/limit and an async to_list."""
    cursor = MagicMock()
    cursor.sort = MagicMock(return_value=cursor)
    cursor.skip = MagicMock(return_value=cursor)
    cursor.limit = MagicMock(return_value=cursor)
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


@pytest.fixture
def make_cursor():
    return _cursor


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def sample_team_id():
    return "team-hawks"


@pytest.fixture
def make_user(sample_team_id):
    def _make(role="player", tier="free", **extra):
        return {
            "_id": ObjectId(),
            "email": f"{role}@example.com",
            "name": role.replace("_", " ").title(),
            "role": role,
            "teamId": sample_team_id,
            "subscriptionTier": tier,
            "focusTrackingEnabled": True,
            **extra,
        }
    return _make


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() and aggregate() return cursors synchronously (not
    # coroutines), so use MagicMock for them. Async methods like find_one,
    # insert_one, count_documents etc. stay as AsyncMock.
    collection.find = MagicMock(return_value=_cursor([]))
    collection.aggregate = MagicMock(return_value=_cursor([]))
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def now():
    return datetime(2026, 3, 11, 15, 30, tzinfo=timezone.utc)
