"""CourtSync court and booking services."""

from sharp.services.courts.court_service import CourtService, SURFACE_TYPES
from sharp.services.courts.booking_service import BookingService, PURPOSES, OVERRIDE_ROLES

__all__ = [
    "CourtService",
    "BookingService",
    "SURFACE_TYPES",
    "PURPOSES",
    "OVERRIDE_ROLES",
]
