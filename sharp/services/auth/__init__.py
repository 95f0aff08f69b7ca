"""Auth services."""

from sharp.services.auth.user_service import UserService, ROLES, TIERS

__all__ = ["UserService", "ROLES", "TIERS"]
