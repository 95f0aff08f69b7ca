"""Unit tests for JWT auth, token extraction and the auth pipelines."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from common.auth import JWTAuth, extract_token
from common.utils.exceptions import ForbiddenException, UnauthorizedException, ValidationException
from sharp.middleware.auth import AuthMiddleware
from sharp.pipelines import auth as pipelines


SECRET = "test-secret-key-for-unit-tests-only"
PASSWORD = "Courtside2026"


@pytest.fixture
def jwt_auth():
    return JWTAuth(secret=SECRET, access_token_expire_minutes=5)


def _request(headers=None, cookies=None):
    request = MagicMock()
    request.headers = headers or {}
    request.cookies = cookies or {}
    return request


# ─────────────────────────────────────────────────────────────────
# Passwords and tokens
# ─────────────────────────────────────────────────────────────────


class TestJWTAuth:
    def test_password_round_trip(self, jwt_auth):
        hashed = jwt_auth.hash_password(PASSWORD)

        assert hashed != PASSWORD
        assert jwt_auth.verify_password(PASSWORD, hashed) is True
        assert jwt_auth.verify_password("Courtside2027", hashed) is False

    def test_long_password_is_not_truncated(self, jwt_auth):
        base = "A1" + "x" * 80
        hashed = jwt_auth.hash_password(base + "first")

        assert jwt_auth.verify_password(base + "second", hashed) is False

    def test_malformed_hash(self, jwt_auth):
        assert jwt_auth.verify_password(PASSWORD, "not-a-bcrypt-hash") is False

    @pytest.mark.asyncio
    async def test_token_carries_claims(self, jwt_auth, sample_user_id):
        token = await jwt_auth.create_token(sample_user_id, role="coach")

        claims = await jwt_auth.verify_token(token)

        assert claims["sub"] == sample_user_id
        assert claims["role"] == "coach"

    @pytest.mark.asyncio
    async def test_revoked_token_rejected(self, jwt_auth, sample_user_id):
        token = await jwt_auth.create_token(sample_user_id)
        await jwt_auth.revoke_token(token)

        with pytest.raises(ValueError, match="revoked"):
            await jwt_auth.verify_token(token)

    @pytest.mark.asyncio
    async def test_foreign_signature_rejected(self, jwt_auth, sample_user_id):
        other = JWTAuth(secret="some-other-secret")
        token = await other.create_token(sample_user_id)

        with pytest.raises(ValueError, match="Invalid token"):
            await jwt_auth.verify_token(token)

    @pytest.mark.asyncio
    async def test_credentials_strip_password_hash(self, sample_user_id):
        auth = JWTAuth(secret=SECRET)
        stored = {"_id": ObjectId(sample_user_id), "email": "coach@example.com",
                  "passwordHash": auth.hash_password(PASSWORD)}
        auth._get_user_by_email = AsyncMock(return_value=stored)

        user = await auth.verify_credentials("coach@example.com", PASSWORD)

        assert "passwordHash" not in user
        assert user["email"] == "coach@example.com"

    @pytest.mark.asyncio
    async def test_credentials_unknown_email(self):
        auth = JWTAuth(secret=SECRET, get_user_by_email=AsyncMock(return_value=None))

        with pytest.raises(ValueError):
            await auth.verify_credentials("nobody@example.com", PASSWORD)


# ─────────────────────────────────────────────────────────────────
# Token extraction and the auth middleware
# ─────────────────────────────────────────────────────────────────


class TestExtractToken:
    def test_bearer_header(self):
        assert extract_token(_request({"Authorization": "Bearer abc.def"})) == "abc.def"

    def test_header_wins_over_cookie(self):
        request = _request({"Authorization": "Bearer from-header"}, {"session": "from-cookie"})
        assert extract_token(request) == "from-header"

    def test_session_cookie(self):
        assert extract_token(_request(cookies={"session": "from-cookie"})) == "from-cookie"

    def test_wrong_scheme(self):
        with pytest.raises(UnauthorizedException) as exc_info:
            extract_token(_request({"Authorization": "Basic dXNlcjpwYXNz"}))

        assert exc_info.value.code == "INVALID_AUTH_SCHEME"

    def test_missing(self):
        assert extract_token(_request()) is None


class TestAuthMiddleware:
    @pytest.mark.asyncio
    async def test_attaches_user(self, jwt_auth, make_user):
        user = make_user()
        user_service = MagicMock()
        user_service.get_user_by_id = AsyncMock(return_value=user)
        token = await jwt_auth.create_token(str(user["_id"]))
        request = _request({"Authorization": f"Bearer {token}"})

        result = await AuthMiddleware(jwt_auth, user_service).require_auth(request)

        assert result is user
        assert request.state.user is user
        assert request.state.token == token

    @pytest.mark.asyncio
    async def test_missing_token(self, jwt_auth):
        with pytest.raises(UnauthorizedException) as exc_info:
            await AuthMiddleware(jwt_auth, MagicMock()).require_auth(_request())

        assert exc_info.value.code == "AUTH_REQUIRED"

    @pytest.mark.asyncio
    async def test_deleted_user(self, jwt_auth, sample_user_id):
        user_service = MagicMock()
        user_service.get_user_by_id = AsyncMock(return_value=None)
        token = await jwt_auth.create_token(sample_user_id)

        with pytest.raises(UnauthorizedException) as exc_info:
            await AuthMiddleware(jwt_auth, user_service).require_auth(
                _request({"Authorization": f"Bearer {token}"})
            )

        assert exc_info.value.code == "INVALID_SESSION"

    def test_check_role(self, make_user):
        AuthMiddleware.check_role(make_user(role="coach"), ("coach", "assistant_coach"))

        with pytest.raises(ForbiddenException) as exc_info:
            AuthMiddleware.check_role(make_user(role="player"), ("coach",))

        assert exc_info.value.code == "INSUFFICIENT_ROLE"


# ─────────────────────────────────────────────────────────────────
# Pipelines
# ─────────────────────────────────────────────────────────────────


class TestRegisterPipeline:
    @pytest.mark.asyncio
    async def test_weak_password(self, jwt_auth):
        user_service = MagicMock()
        user_service.create_user = AsyncMock()

        with pytest.raises(ValidationException) as exc_info:
            await pipelines.register_pipeline(jwt_auth, user_service, "a@example.com", "short", "Ana")

        assert exc_info.value.code == "WEAK_PASSWORD"
        assert all(e["field"] == "password" for e in exc_info.value.errors)
        user_service.create_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_user_and_token(self, jwt_auth, sample_team_id):
        user_id = ObjectId()
        user_service = MagicMock()
        user_service.create_user = AsyncMock(side_effect=lambda **kw: {
            "_id": user_id, "email": kw["email"], "name": kw["name"],
            "role": kw["role"], "passwordHash": kw["password_hash"],
        })

        result = await pipelines.register_pipeline(
            jwt_auth, user_service, "ana@example.com", PASSWORD, "  Ana ", role="coach", team_id=sample_team_id,
        )

        kwargs = user_service.create_user.call_args[1]
        assert kwargs["name"] == "Ana"
        assert kwargs["team_id"] == sample_team_id
        assert jwt_auth.verify_password(PASSWORD, kwargs["password_hash"])
        assert result["user"]["id"] == str(user_id)
        assert "passwordHash" not in result["user"]
        claims = await jwt_auth.verify_token(result["token"])
        assert claims["sub"] == str(user_id)
        assert claims["role"] == "coach"


class TestLoginPipeline:
    @pytest.mark.asyncio
    async def test_bad_credentials(self):
        auth_provider = MagicMock()
        auth_provider.verify_credentials = AsyncMock(side_effect=ValueError("Invalid email or password"))

        with pytest.raises(UnauthorizedException) as exc_info:
            await pipelines.login_pipeline(auth_provider, "ana@example.com", "wrong")

        assert exc_info.value.status_code == 401
        assert exc_info.value.code == "INVALID_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_email_normalized(self, jwt_auth, make_user):
        user = make_user()
        auth_provider = MagicMock()
        auth_provider.verify_credentials = AsyncMock(return_value=user)
        auth_provider.create_token = jwt_auth.create_token

        result = await pipelines.login_pipeline(auth_provider, "  Ana@Example.com ", PASSWORD)

        auth_provider.verify_credentials.assert_called_once_with("ana@example.com", PASSWORD)
        assert result["user"]["id"] == str(user["_id"])

    @pytest.mark.asyncio
    async def test_logout_revokes(self, jwt_auth, sample_user_id):
        token = await jwt_auth.create_token(sample_user_id)

        await pipelines.logout_pipeline(jwt_auth, token)

        with pytest.raises(ValueError):
            await jwt_auth.verify_token(token)
