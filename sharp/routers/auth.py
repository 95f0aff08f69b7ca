"""
FastAPI router for authentication endpoints.

Provides registration, login/logout and the current user's profile.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from common.auth import JWTAuth
from common.utils import success_response
from sharp.config import settings
from sharp.database.documents import serialize_doc
from sharp.dependencies import get_jwt_auth, get_user_service, require_auth
from sharp.pipelines import auth as pipelines
from sharp.schemas.auth import LoginRequest, RegisterRequest, UpdateProfileRequest
from sharp.services.auth.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.is_production(),
        samesite="lax",
    )


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """
    Register a new account.

    Returns the user and an access token; the token is also set as the
    session cookie.
    """
    result = await pipelines.register_pipeline(
        auth_provider=jwt_auth,
        user_service=user_service,
        email=body.email,
        password=body.password,
        name=body.name,
        role=body.role,
        team_id=body.teamId,
    )
    _set_session_cookie(response, result["token"])
    return success_response(result, "Registration successful")


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
):
    """Exchange email and password for an access token."""
    result = await pipelines.login_pipeline(
        auth_provider=jwt_auth,
        email=body.email,
        password=body.password,
    )
    _set_session_cookie(response, result["token"])
    return success_response(result)


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    user: Annotated[dict, Depends(require_auth)],
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
):
    """Revoke the current token and clear the session cookie."""
    await pipelines.logout_pipeline(jwt_auth, getattr(request.state, "token", None))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return success_response(message="Logged out")


@router.get("/me")
async def get_me(user: Annotated[dict, Depends(require_auth)]):
    return success_response(serialize_doc(user))


@router.put("/me")
async def update_me(
    body: UpdateProfileRequest,
    user: Annotated[dict, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update name and focus tracking preference."""
    result = await pipelines.update_profile_pipeline(
        user_service=user_service,
        user_id=str(user["_id"]),
        updates=body.model_dump(exclude_none=True),
    )
    return success_response(result)
