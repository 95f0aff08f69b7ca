"""
Auth pipeline functions.

Stateless orchestration logic for registration, login and profile updates.
"""

import logging
from typing import Optional, Dict, Any

from common.auth import AuthProvider
from common.utils import validate_password
from common.utils.exceptions import UnauthorizedException, ValidationException
from sharp.database.documents import serialize_doc
from sharp.services.auth.user_service import UserService

logger = logging.getLogger(__name__)


async def register_pipeline(
    auth_provider: AuthProvider,
    user_service: UserService,
    email: str,
    password: str,
    name: str,
    role: str = "player",
    team_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create an account and issue its first token.

    Raises:
        ValidationException: Password too weak
        ConflictException: Email already registered
    """
    is_valid, problems = validate_password(password)
    if not is_valid:
        raise ValidationException(
            message="Password does not meet requirements",
            code="WEAK_PASSWORD",
            errors=[{"field": "password", "message": problem} for problem in problems],
        )

    user = await user_service.create_user(
        email=email,
        password_hash=auth_provider.hash_password(password),
        name=name.strip(),
        role=role,
        team_id=team_id,
    )
    token = await auth_provider.create_token(str(user["_id"]), role=role)

    return {"user": serialize_doc(user), "token": token}


async def login_pipeline(
    auth_provider: AuthProvider,
    email: str,
    password: str,
) -> Dict[str, Any]:
    """
    Verify credentials and issue a token.

    Raises:
        UnauthorizedException: Unknown email or wrong password
    """
    try:
        user = await auth_provider.verify_credentials(email.strip().lower(), password)
    except ValueError:
        logger.info("Failed login attempt")
        raise UnauthorizedException(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
        )

    token = await auth_provider.create_token(str(user["_id"]), role=user.get("role"))
    logger.info(f"User {user['_id']} logged in")

    return {"user": serialize_doc(user), "token": token}


async def logout_pipeline(auth_provider: AuthProvider, token: Optional[str]) -> None:
    if token:
        await auth_provider.revoke_token(token)


async def update_profile_pipeline(
    user_service: UserService,
    user_id: str,
    updates: Dict[str, Any],
) -> Dict[str, Any]:
    user = await user_service.update_profile(user_id, updates)
    return serialize_doc(user)
