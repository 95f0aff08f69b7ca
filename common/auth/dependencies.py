"""
FastAPI authentication dependencies.

Provides a factory that builds a dependency extracting the caller's user id
from a bearer token or, failing that, a session cookie. Works with any
AuthProvider implementation.

Example:
    from common.auth import JWTAuth, create_auth_dependency

    auth = JWTAuth(secret="your-secret")
    get_current_user_id = create_auth_dependency(lambda: auth)

    @app.get("/profile")
    async def get_profile(user_id: str = Depends(get_current_user_id)):
        return {"user_id": user_id}
"""

from typing import Callable, Optional

from fastapi import Request

from common.auth.base import AuthProvider
from common.utils.exceptions import UnauthorizedException


def extract_token(
    request: Request,
    header_name: str = "Authorization",
    scheme: str = "Bearer",
    cookie_name: Optional[str] = "session",
) -> Optional[str]:
    """
    Pull the raw token from the request.

    The Authorization header wins over the cookie when both are present.

    Returns:
        Token string, or None when neither source carries one
    """
    authorization = request.headers.get(header_name)
    if authorization:
        prefix = f"{scheme} "
        if not authorization.startswith(prefix):
            raise UnauthorizedException(
                message=f"Invalid authorization scheme. Expected: {scheme}",
                code="INVALID_AUTH_SCHEME",
            )
        return authorization[len(prefix):].strip() or None

    if cookie_name:
        return request.cookies.get(cookie_name) or None

    return None


def create_auth_dependency(
    get_auth_provider: Callable[[], AuthProvider],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
    cookie_name: Optional[str] = "session",
):
    """
    Factory to create FastAPI auth dependencies.

    Args:
        get_auth_provider: Callable that returns the AuthProvider instance
        header_name: Header to extract token from (default: Authorization)
        scheme: Auth scheme prefix (default: Bearer)
        cookie_name: Session cookie checked when the header is absent

    Returns:
        A FastAPI dependency function that extracts and verifies the user ID
    """

    async def get_current_user_id(request: Request) -> str:
        """
        Extract and verify user ID from the request.

        Raises:
            UnauthorizedException: If token is missing, invalid, or expired
        """
        token = extract_token(request, header_name, scheme, cookie_name)

        if not token:
            raise UnauthorizedException(
                message="Authentication required",
                code="AUTH_REQUIRED",
            )

        auth = get_auth_provider()
        try:
            payload = await auth.verify_token(token)
        except ValueError as e:
            raise UnauthorizedException(message=str(e), code="INVALID_TOKEN")

        user_id = payload.get("sub")
        if not user_id:
            raise UnauthorizedException(
                message="Token missing user ID",
                code="INVALID_TOKEN",
            )

        request.state.token = token
        return user_id

    return get_current_user_id
