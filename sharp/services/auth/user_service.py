"""
User account service.

Handles user storage, lookup and profile updates.
"""

import logging
from typing import Optional, Dict, Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import ConflictException, NotFoundException
from sharp.database import collections
from sharp.database.documents import parse_object_id, utcnow

logger = logging.getLogger(__name__)

ROLES = ("coach", "assistant_coach", "captain", "player", "admin")
TIERS = ("free", "pro", "elite")


class UserService:
    """
    Handles user account CRUD.

    Passwords arrive already hashed; hashing belongs to the auth provider.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize UserService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._users_collection = db[collections.USERS]

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: str,
        role: str = "player",
        team_id: Optional[str] = None,
        subscription_tier: str = "free",
    ) -> Dict[str, Any]:
        """
        Create a user account.

        Args:
            email: Login email (stored lower-cased)
            password_hash: bcrypt hash from the auth provider
            name: Display name
            role: One of ROLES
            team_id: CourtSync team the user belongs to
            subscription_tier: One of TIERS

        Returns:
            Created user document

        Raises:
            ConflictException: Email already registered
        """
        now = utcnow()
        user = {
            "email": email.strip().lower(),
            "passwordHash": password_hash,
            "name": name.strip(),
            "role": role,
            "teamId": team_id,
            "subscriptionTier": subscription_tier,
            "focusTrackingEnabled": True,
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            result = await self._users_collection.insert_one(user)
        except DuplicateKeyError:
            raise ConflictException(
                message="An account with this email already exists",
                code="EMAIL_EXISTS",
            )

        user["_id"] = result.inserted_id
        logger.info(f"User created: {result.inserted_id} ({role})")
        return user

    async def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get user by ID, or None."""
        return await self._users_collection.find_one(
            {"_id": parse_object_id(user_id, "User")}
        )

    async def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get user by email, including the password hash."""
        return await self._users_collection.find_one({"email": email.strip().lower()})

    async def get_subscription_tier(self, user_id: str) -> str:
        """Subscription tier for a user; unknown users count as free."""
        user = await self._users_collection.find_one(
            {"_id": parse_object_id(user_id, "User")},
            {"subscriptionTier": 1},
        )
        if not user:
            return "free"
        return user.get("subscriptionTier") or "free"

    async def update_profile(
        self,
        user_id: str,
        updates: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Update editable profile fields.

        Args:
            user_id: User ID
            updates: Subset of name, focusTrackingEnabled

        Raises:
            NotFoundException: User does not exist
        """
        allowed = {k: v for k, v in updates.items() if k in ("name", "focusTrackingEnabled")}
        allowed["updatedAt"] = utcnow()

        user = await self._users_collection.find_one_and_update(
            {"_id": parse_object_id(user_id, "User")},
            {"$set": allowed},
            return_document=ReturnDocument.AFTER,
        )
        if not user:
            raise NotFoundException(message="User not found", code="USER_NOT_FOUND")

        return user
