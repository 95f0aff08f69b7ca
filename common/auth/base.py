"""
Abstract authentication provider interface.

Defines the contract that auth providers must implement so the application
can swap token strategies without changing route code.

Example:
    from common.auth import AuthProvider, JWTAuth

    def get_auth_provider(settings) -> AuthProvider:
        return JWTAuth(secret=settings.JWT_SECRET)
"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class AuthProvider(ABC):
    """
    Abstract authentication provider.

    Token methods are async to support both local and remote verification.
    """

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """Hash a plain-text password for storage."""
        pass

    @abstractmethod
    def verify_password(self, password: str, hashed: str) -> bool:
        """Check a plain-text password against a stored hash."""
        pass

    @abstractmethod
    async def verify_credentials(
        self,
        email: str,
        password: str,
    ) -> Dict[str, Any]:
        """
        Verify email and password credentials.

        Returns:
            User document without the password hash

        Raises:
            ValueError: If credentials are invalid
        """
        pass

    @abstractmethod
    async def create_token(
        self,
        user_id: str,
        **claims: Any,
    ) -> str:
        """
        Create an authentication token for a user.

        Args:
            user_id: The user's ID
            **claims: Additional claims to include in the token

        Returns:
            The authentication token string
        """
        pass

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify an authentication token.

        Returns:
            Decoded token claims (at minimum: sub)

        Raises:
            ValueError: If token is invalid, expired, or revoked
        """
        pass

    @abstractmethod
    async def revoke_token(self, token: str) -> None:
        """Revoke/invalidate a token."""
        pass
