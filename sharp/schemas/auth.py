"""
Pydantic models for auth request validation.
"""

from typing import Optional, Literal
from pydantic import BaseModel, Field, EmailStr


Role = Literal["coach", "assistant_coach", "captain", "player", "admin"]


class RegisterRequest(BaseModel):
    """Request body for account registration."""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)
    role: Role = "player"
    teamId: Optional[str] = None


class LoginRequest(BaseModel):
    """Request body for login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateProfileRequest(BaseModel):
    """Request body for PUT /auth/me."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    focusTrackingEnabled: Optional[bool] = None
