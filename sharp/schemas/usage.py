"""
Pydantic models for usage tracking and AI endpoints.
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class TrackUsageRequest(BaseModel):
    """Record one use of a feature. Feature presence is checked in the handler."""
    feature: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class AIParseRequest(BaseModel):
    """Free text for AI workout/food parsing."""
    input: str = Field(..., min_length=1, max_length=2000)
    save: bool = True
    date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")


class CoachRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
