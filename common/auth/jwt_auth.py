"""
JWT + bcrypt authentication provider.

- JWT tokens for stateless authentication
- bcrypt (with SHA-256 pre-hash) for password storage
- In-memory token revocation for logout

Example:
    auth = JWTAuth(
        secret="your-secret-key",
        access_token_expire_minutes=60,
        get_user_by_email=user_service.get_user_by_email,
    )

    user = await auth.verify_credentials("coach@example.com", "Password123")
    token = await auth.create_token(str(user["_id"]), role=user["role"])
    claims = await auth.verify_token(token)
"""

import base64
import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional, Callable, Awaitable

import bcrypt as bcrypt_lib
from jose import jwt, JWTError

from common.auth.base import AuthProvider

logger = logging.getLogger(__name__)

# Returns the stored user document (including its password hash) or None
UserLookupCallback = Callable[[str], Awaitable[Optional[Dict[str, Any]]]]


class JWTAuth(AuthProvider):
    """
    JWT + bcrypt authentication provider.

    User storage stays in the application; the provider only needs a lookup
    callback to verify credentials.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 30,
        get_user_by_email: Optional[UserLookupCallback] = None,
        password_field: str = "passwordHash",
    ):
        """
        Initialize JWT auth provider.

        Args:
            secret: Secret key for JWT signing
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_minutes: Token lifetime
            get_user_by_email: Callback to fetch a user document by email
            password_field: Document field holding the password hash
        """
        self.secret = secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)
        self._get_user_by_email = get_user_by_email
        self._password_field = password_field

        # Revoked tokens live for the process lifetime only
        self._revoked_tokens: set = set()

    def _prehash_password(self, password: str) -> str:
        """
        Pre-hash password with SHA-256 before bcrypt.

        Keeps every password under bcrypt's 72-byte input limit.
        """
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash).decode("utf-8")

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        prehashed = self._prehash_password(password)
        return bcrypt_lib.hashpw(prehashed.encode("utf-8"), bcrypt_lib.gensalt()).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """Verify a password against its bcrypt hash."""
        prehashed = self._prehash_password(password)
        try:
            return bcrypt_lib.checkpw(prehashed.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    async def verify_credentials(
        self,
        email: str,
        password: str,
    ) -> Dict[str, Any]:
        """Verify email and password."""
        if not self._get_user_by_email:
            raise NotImplementedError("get_user_by_email callback not provided")

        user = await self._get_user_by_email(email)
        if not user:
            raise ValueError("Invalid email or password")

        password_hash = user.get(self._password_field, "")
        if not password_hash or not self.verify_password(password, password_hash):
            raise ValueError("Invalid email or password")

        return {k: v for k, v in user.items() if k != self._password_field}

    async def create_token(
        self,
        user_id: str,
        **claims: Any,
    ) -> str:
        """Create a JWT token for the user."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "exp": now + self.access_token_expire,
            "iat": now,
            **claims,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify and decode a JWT token."""
        if token in self._revoked_tokens:
            raise ValueError("Token has been revoked")

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
            )
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")

    async def revoke_token(self, token: str) -> None:
        """Add token to revocation list."""
        self._revoked_tokens.add(token)
        logger.debug("Token revoked")
