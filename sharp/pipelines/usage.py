"""
Usage and upgrade-prompt pipeline functions.
"""

import logging
from typing import Optional, Dict, Any

from common.utils.exceptions import BadRequestException
from sharp.services.usage.feature_gate import FEATURE_LIMITS, FeatureGate, UPGRADE_PROMPT_THRESHOLD
from sharp.services.usage.usage_service import UsageService

logger = logging.getLogger(__name__)


def user_tier(user: Dict[str, Any]) -> str:
    return user.get("subscriptionTier") or "free"


async def track_usage_pipeline(
    usage_service: UsageService,
    user: Dict[str, Any],
    feature: Optional[str],
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Record a feature use and report the remaining access.

    Raises:
        BadRequestException: Missing or unknown feature
    """
    if not feature:
        raise BadRequestException(message="Feature is required", code="FEATURE_REQUIRED")
    if feature not in FEATURE_LIMITS:
        raise BadRequestException(message=f"Unknown feature: {feature}", code="UNKNOWN_FEATURE")

    user_id = str(user["_id"])
    tier = user_tier(user)

    await usage_service.track(user_id, feature, tier=tier, metadata=metadata)
    used = await usage_service.count_monthly_usage(user_id, feature)
    access = FeatureGate.check_access(feature, tier, used)

    return {
        "feature": feature,
        "used": used,
        "hasAccess": access.has_access,
        "upgradeRequired": access.upgrade_required,
        "tierRequired": access.tier_required,
    }


async def usage_summary_pipeline(usage_service: UsageService, user: Dict[str, Any]) -> Dict[str, Any]:
    return await usage_service.usage_summary(str(user["_id"]), user_tier(user))


async def upgrade_prompt_pipeline(usage_service: UsageService, user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Whether to show an upgrade prompt.

    Returns:
        dict with shouldPrompt, urgency (0-1) and messages for the features
        close to their free limit
    """
    tier = user_tier(user)
    counts = await usage_service.monthly_counts(str(user["_id"]))

    messages = []
    if tier == "free":
        for feature, used in counts.items():
            limit = FEATURE_LIMITS.get(feature, {}).get("free")
            if isinstance(limit, bool) or limit is None:
                continue
            if used >= limit * UPGRADE_PROMPT_THRESHOLD:
                messages.append(FeatureGate.get_upgrade_message(feature))

    return {
        "shouldPrompt": FeatureGate.should_prompt_upgrade(tier, counts),
        "urgency": round(FeatureGate.calculate_upgrade_urgency(tier, counts), 2),
        "messages": messages,
    }
