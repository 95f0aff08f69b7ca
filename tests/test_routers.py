"""HTTP-level tests: auth, roles, validation and the error envelope.

The app is driven without its lifespan, so services are supplied through
dependency overrides instead of a database.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from api import app
from common.auth import JWTAuth
from common.utils.exceptions import ForbiddenException
from sharp import dependencies as deps
from sharp.middleware.auth import AuthMiddleware
from sharp.services.ai.orchestrator import AIResponse


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    def _login(user):
        app.dependency_overrides[deps.require_auth] = lambda: user
        return user
    return _login


def _override(getter, **methods):
    service = MagicMock()
    for name, value in methods.items():
        setattr(service, name, value)
    app.dependency_overrides[getter] = lambda: service
    return service


def _in_future(hours):
    return (datetime.now(timezone.utc) + timedelta(days=1, hours=hours)).isoformat()


# ─────────────────────────────────────────────────────────────────
# Authentication
# ─────────────────────────────────────────────────────────────────


class TestAuthentication:
    @pytest.fixture
    def stored_user(self, make_user):
        return make_user(passwordHash="$2b$12$stored")

    @pytest.fixture
    def jwt_auth(self, stored_user):
        auth = JWTAuth(secret="router-test-secret")
        user_service = MagicMock()
        user_service.get_user_by_id = AsyncMock(return_value=stored_user)
        app.dependency_overrides[deps.get_auth_middleware] = lambda: AuthMiddleware(auth, user_service)
        return auth

    def test_missing_token(self, client, jwt_auth):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "AUTH_REQUIRED"

    @pytest.mark.asyncio
    async def test_bearer_token(self, client, jwt_auth, stored_user):
        token = await jwt_auth.create_token(str(stored_user["_id"]))

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == str(stored_user["_id"])
        assert "passwordHash" not in data

    def test_garbage_token(self, client, jwt_auth):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"


# ─────────────────────────────────────────────────────────────────
# Roles and the error envelope
# ─────────────────────────────────────────────────────────────────


class TestCourts:
    def test_player_cannot_create_court(self, client, login_as, make_user):
        login_as(make_user(role="player"))
        court_service = _override(deps.get_court_service, create_court=AsyncMock())

        response = client.post("/api/courts", json={"name": "Court 1"})

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_ROLE"
        court_service.create_court.assert_not_called()

    def test_coach_creates_court(self, client, login_as, make_user):
        coach = login_as(make_user(role="coach"))
        court_id = ObjectId()
        court_service = _override(
            deps.get_court_service,
            create_court=AsyncMock(return_value={"_id": court_id, "name": "Court 1", "teamId": coach["teamId"]}),
        )

        response = client.post("/api/courts", json={"name": "Court 1", "surfaceType": "clay"})

        assert response.status_code == 201
        assert response.json()["data"]["id"] == str(court_id)
        kwargs = court_service.create_court.call_args[1]
        assert kwargs["team_id"] == coach["teamId"]
        assert kwargs["data"]["surfaceType"] == "clay"

    def test_unknown_surface_rejected(self, client, login_as, make_user):
        login_as(make_user(role="coach"))
        _override(deps.get_court_service)

        response = client.post("/api/courts", json={"name": "Court 1", "surfaceType": "sand"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["errors"][0]["field"] == "surfaceType"

    def test_duplicate_key(self, client, login_as, make_user):
        login_as(make_user(role="coach"))
        _override(deps.get_court_service, create_court=AsyncMock(side_effect=DuplicateKeyError("dup")))

        response = client.post("/api/courts", json={"name": "Court 1"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE"


class TestBookings:
    def test_conflict_lists_existing_bookings(self, client, login_as, make_user):
        login_as(make_user(role="player"))
        existing = {
            "_id": ObjectId(),
            "startTime": datetime(2030, 1, 1, 10, tzinfo=timezone.utc),
            "endTime": datetime(2030, 1, 1, 11, tzinfo=timezone.utc),
        }
        _override(deps.get_court_service, get_team_court=AsyncMock(return_value={"_id": ObjectId()}))
        booking_service = _override(
            deps.get_booking_service,
            check_conflicts=AsyncMock(return_value=[existing]),
            create_booking=AsyncMock(),
        )

        response = client.post("/api/bookings", json={
            "courtId": str(ObjectId()),
            "startTime": _in_future(0),
            "endTime": _in_future(1),
            "purpose": "practice",
        })

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "BOOKING_CONFLICT"
        assert error["details"]["conflicts"][0]["id"] == str(existing["_id"])
        booking_service.create_booking.assert_not_called()

    def test_check_conflicts_on_other_teams_court(self, client, login_as, make_user):
        login_as(make_user(role="player"))
        _override(deps.get_court_service, get_team_court=AsyncMock(
            side_effect=ForbiddenException(message="Access denied", code="COURT_ACCESS_DENIED"),
        ))
        booking_service = _override(deps.get_booking_service, check_conflicts=AsyncMock(return_value=[]))

        response = client.post("/api/bookings/check-conflicts", json={
            "courtId": str(ObjectId()),
            "startTime": _in_future(0),
            "endTime": _in_future(1),
        })

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "COURT_ACCESS_DENIED"
        booking_service.check_conflicts.assert_not_called()

    def test_end_before_start(self, client, login_as, make_user):
        login_as(make_user(role="coach"))
        _override(deps.get_court_service)
        _override(deps.get_booking_service)

        response = client.post("/api/bookings", json={
            "courtId": str(ObjectId()),
            "startTime": _in_future(2),
            "endTime": _in_future(1),
            "purpose": "match",
        })

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_TIME_RANGE"


# ─────────────────────────────────────────────────────────────────
# Other surfaces
# ─────────────────────────────────────────────────────────────────


def test_reading_session_validation(client, login_as, make_user):
    login_as(make_user())
    _override(deps.get_book_service)
    _override(deps.get_reading_session_service)

    response = client.post("/api/reading/sessions", json={"bookId": "abc", "minutes": 0, "pagesRead": 5})

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["error"]["errors"]] == ["minutes"]


def test_focus_export_is_csv(client, login_as, make_user):
    login_as(make_user())
    _override(deps.get_focus_service, list_sessions=AsyncMock(return_value=[]))

    response = client.get("/api/focus/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "focus-sessions.csv" in response.headers["content-disposition"]
    assert response.text.startswith("startTime,endTime")


def test_leaderboard_of_other_team_forbidden(client, login_as, make_user):
    login_as(make_user())
    leaderboard_service = _override(deps.get_leaderboard_service, get_leaderboard=AsyncMock(return_value=[]))

    response = client.get("/api/focus/leaderboard", params={"groupId": "team-rivals"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "GROUP_ACCESS_DENIED"
    leaderboard_service.get_leaderboard.assert_not_called()


def test_ai_limit_is_429(client, login_as, make_user):
    login_as(make_user(tier="free"))
    _override(deps.get_ai_orchestrator, process_request=AsyncMock(return_value=AIResponse(
        success=False,
        error="Monthly limit reached (10/10). Upgrade to Pro for 100 uses per month.",
        limit_reached=True,
    )))
    _override(deps.get_usage_service, usage_summary=AsyncMock(return_value={"tier": "free"}))
    _override(deps.get_workout_service)

    response = client.post("/api/ai/parse-workout", json={"input": "ran 5k"})

    assert response.status_code == 429
    error = response.json()["error"]
    assert error["code"] == "USAGE_LIMIT_REACHED"
    assert error["details"]["upgradeRequired"] is True


def test_unexpected_error_is_wrapped(login_as, make_user):
    login_as(make_user())
    _override(deps.get_league_service, get_current_league=AsyncMock(side_effect=RuntimeError("boom")))

    try:
        response = TestClient(app, raise_server_exceptions=False).get("/api/leagues/current")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"


def test_unknown_route(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_health_without_database(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "degraded"
