"""
Pydantic models for CourtSync courts and bookings.
"""

from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field


SurfaceType = Literal["hard", "clay", "grass", "indoor"]
Purpose = Literal["practice", "match", "training", "maintenance"]


class CourtCreateRequest(BaseModel):
    """Request body for creating a court."""
    name: str = Field(..., min_length=1, max_length=100)
    facilityId: Optional[str] = None
    surfaceType: SurfaceType = "hard"
    isActive: bool = True
    maintenanceNotes: Optional[str] = Field(None, max_length=1000)


class CourtUpdateRequest(BaseModel):
    """Partial court update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    facilityId: Optional[str] = None
    surfaceType: Optional[SurfaceType] = None
    isActive: Optional[bool] = None
    maintenanceNotes: Optional[str] = Field(None, max_length=1000)


class BookingCreateRequest(BaseModel):
    """Request body for booking a court."""
    courtId: str
    startTime: datetime
    endTime: datetime
    purpose: Purpose
    eventId: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)
    participants: List[str] = Field(default_factory=list)
    isRecurring: bool = False
    recurrencePattern: Optional[str] = None


class ConflictCheckRequest(BaseModel):
    """Request body for checking a time slot."""
    courtId: str
    startTime: datetime
    endTime: datetime
    excludeBookingId: Optional[str] = None
