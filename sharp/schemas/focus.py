"""
Pydantic models for StudySharper focus sessions.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class FocusSessionRequest(BaseModel):
    """
    Focus session heartbeat. Sent repeatedly while a session runs and once
    more with final=true and endTime when it ends.
    """
    startTime: datetime
    endTime: Optional[datetime] = None
    durationSeconds: int = Field(0, ge=0)
    category: Optional[str] = Field(None, max_length=50)
    productiveScore: Optional[float] = Field(None, ge=0, le=100)
    idleEvents: int = Field(0, ge=0)
    final: bool = False
