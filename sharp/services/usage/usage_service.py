"""
Usage tracking service.

Records feature usage events and reports monthly usage against the
subscription tier limits.
"""

import logging
from datetime import datetime
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from sharp.database import collections
from sharp.database.documents import utcnow
from sharp.services.usage.feature_gate import (
    FEATURE_LIMITS,
    FeatureGate,
    month_start,
    next_month_start,
)

logger = logging.getLogger(__name__)


class UsageService:
    """
    Handles usage events and monthly summaries.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize UsageService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._usage_collection = db[collections.USAGE_EVENTS]

    async def count_monthly_usage(
        self,
        user_id: str,
        feature: str,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Count successful uses of a feature since the start of the month.
        """
        return await self._usage_collection.count_documents({
            "userId": ObjectId(user_id),
            "feature": feature,
            "success": True,
            "createdAt": {"$gte": month_start(now)},
        })

    async def track(
        self,
        user_id: str,
        feature: str,
        tier: str = "free",
        success: bool = True,
        tokens_used: int = 0,
        cost_cents: float = 0,
        model: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Record one use of a feature.

        Args:
            user_id: User's ID
            feature: Feature key
            tier: User's tier at the time of use
            success: Whether the use succeeded
            tokens_used: AI tokens consumed
            cost_cents: Estimated AI cost in cents
            model: AI model name
            metadata: Extra data from the client

        Returns:
            Created usage event
        """
        event = {
            "userId": ObjectId(user_id),
            "feature": feature,
            "tier": tier,
            "success": success,
            "tokensUsed": tokens_used,
            "costCents": cost_cents,
            "model": model,
            "metadata": metadata or {},
            "createdAt": utcnow(),
        }

        result = await self._usage_collection.insert_one(event)
        event["_id"] = result.inserted_id

        if not success:
            logger.warning(f"Failed {feature} use recorded for user {user_id}")
        return event

    async def monthly_counts(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, int]:
        """Successful uses per feature this month."""
        cursor = self._usage_collection.aggregate([
            {"$match": {
                "userId": ObjectId(user_id),
                "success": True,
                "createdAt": {"$gte": month_start(now)},
            }},
            {"$group": {"_id": "$feature", "count": {"$sum": 1}}},
        ])
        return {row["_id"]: row["count"] for row in await cursor.to_list(length=None)}

    async def usage_summary(
        self,
        user_id: str,
        tier: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Per-feature usage against the tier's limits.

        Returns:
            dict with tier, resetsAt and features {feature: {used, limit, hasAccess}}
        """
        counts = await self.monthly_counts(user_id, now)

        features = {}
        for feature in FEATURE_LIMITS:
            used = counts.get(feature, 0)
            access = FeatureGate.check_access(feature, tier, used, now)
            features[feature] = {
                "used": used,
                "limit": FEATURE_LIMITS[feature].get(tier),
                "hasAccess": access.has_access,
            }

        return {
            "tier": tier,
            "resetsAt": next_month_start(now),
            "features": features,
        }
