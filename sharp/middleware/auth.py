"""
Authentication middleware for protected routes.

Validates the bearer token (or session cookie) and attaches the user to
the request.
"""

import logging
from typing import Iterable

from fastapi import Request

from common.auth import AuthProvider, create_auth_dependency
from common.utils.exceptions import UnauthorizedException, ForbiddenException
from sharp.services.auth.user_service import UserService

logger = logging.getLogger(__name__)


class AuthMiddleware:
    """
    Resolves the current user for a request.
    """

    def __init__(
        self,
        auth_provider: AuthProvider,
        user_service: UserService,
        cookie_name: str = "session",
    ):
        """
        Initialize AuthMiddleware.

        Args:
            auth_provider: Verifies tokens
            user_service: Loads the user behind a token
            cookie_name: Session cookie accepted in place of the header
        """
        self._user_service = user_service
        self._get_user_id = create_auth_dependency(
            lambda: auth_provider,
            cookie_name=cookie_name,
        )

    async def require_auth(self, request: Request) -> dict:
        """
        Validate request is authenticated.

        Returns:
            User dict attached to request.state.user

        Raises:
            UnauthorizedException: Missing/invalid token or unknown user
        """
        user_id = await self._get_user_id(request)

        user = await self._user_service.get_user_by_id(user_id)
        if not user:
            logger.warning(f"Token for unknown user {user_id}")
            raise UnauthorizedException(
                message="Invalid or expired session",
                code="INVALID_SESSION",
            )

        request.state.user = user
        return user

    @staticmethod
    def check_role(user: dict, roles: Iterable[str]) -> None:
        """
        Raises:
            ForbiddenException: User's role is not one of roles
        """
        allowed = tuple(roles)
        if user.get("role") not in allowed:
            raise ForbiddenException(
                message=f"Requires role: {', '.join(allowed)}",
                code="INSUFFICIENT_ROLE",
            )
