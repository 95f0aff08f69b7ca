"""
Feature gate for the freemium subscription model.

Every feature has a static per-tier limit: an int is a monthly allowance,
None is unlimited and a bool switches the feature on or off.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Union

TIERS = ("free", "pro", "elite")

Limit = Union[int, bool, None]

FEATURE_LIMITS: Dict[str, Dict[str, Limit]] = {
    # AI features
    "workout_parsing": {"free": 10, "pro": 100, "elite": None},
    "food_parsing": {"free": 10, "pro": 100, "elite": None},
    "voice_input": {"free": 0, "pro": 50, "elite": None},
    "ai_coaching": {"free": 5, "pro": 50, "elite": None},

    # Advanced features
    "photo_analysis": {"free": 0, "pro": 10, "elite": None},
    "wearables_sync": {"free": False, "pro": True, "elite": True},
    "export_data": {"free": False, "pro": True, "elite": True},
    "coach_dashboard": {"free": False, "pro": False, "elite": True},

    # Data limits
    "history_days": {"free": 30, "pro": 365, "elite": None},
    "workout_templates": {"free": 3, "pro": 20, "elite": None},
}

UPGRADE_PROMPT_THRESHOLD = 0.8

UPGRADE_MESSAGES = {
    "workout_parsing": "Upgrade to {tier} for unlimited AI workout parsing",
    "food_parsing": "Upgrade to {tier} for unlimited AI food logging",
    "voice_input": "Upgrade to {tier} to use voice input for logging",
    "ai_coaching": "Upgrade to {tier} for unlimited AI coaching sessions",
    "photo_analysis": "Upgrade to {tier} to analyze food photos",
    "wearables_sync": "Upgrade to {tier} to sync with your fitness devices",
    "export_data": "Upgrade to {tier} to export your data",
    "coach_dashboard": "Upgrade to Elite for the coach dashboard",
    "history_days": "Upgrade to {tier} for unlimited data history",
    "workout_templates": "Upgrade to {tier} for more workout templates",
}


@dataclass
class UsageLimit:
    """Monthly allowance for a limited feature."""
    monthly_limit: int
    current_usage: int
    resets_at: datetime


@dataclass
class FeatureAccess:
    """Result of a feature access check."""
    has_access: bool
    upgrade_required: bool
    tier_required: str
    usage_limit: Optional[UsageLimit] = field(default=None)


def month_start(moment: Optional[datetime] = None) -> datetime:
    """First instant of the UTC month containing moment."""
    moment = moment or datetime.now(timezone.utc)
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def next_month_start(moment: Optional[datetime] = None) -> datetime:
    """First instant of the following UTC month."""
    start = month_start(moment)
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


class FeatureGate:
    """
    Static lookups against FEATURE_LIMITS.
    """

    @staticmethod
    def check_access(
        feature: str,
        tier: str,
        current_usage: int = 0,
        now: Optional[datetime] = None,
    ) -> FeatureAccess:
        """
        Check whether a tier may use a feature given this month's usage.

        Args:
            feature: Feature key
            tier: Subscription tier
            current_usage: Uses so far this month
            now: Reference time for the reset date

        Returns:
            FeatureAccess
        """
        limits = FEATURE_LIMITS.get(feature)
        if limits is None:
            return FeatureAccess(has_access=False, upgrade_required=True, tier_required="pro")

        limit = limits.get(tier, limits["free"])

        if isinstance(limit, bool):
            return FeatureAccess(
                has_access=limit,
                upgrade_required=not limit,
                tier_required=FeatureGate.get_required_tier(feature),
            )

        if limit is None:
            return FeatureAccess(has_access=True, upgrade_required=False, tier_required=tier)

        has_access = current_usage < limit
        return FeatureAccess(
            has_access=has_access,
            upgrade_required=not has_access,
            tier_required=FeatureGate.get_required_tier(feature),
            usage_limit=UsageLimit(
                monthly_limit=limit,
                current_usage=current_usage,
                resets_at=next_month_start(now),
            ),
        )

    @staticmethod
    def get_required_tier(feature: str) -> str:
        """Lowest tier with unlimited (or switched-on) access to the feature."""
        limits = FEATURE_LIMITS[feature]
        if limits["elite"] is None or limits["elite"] is True:
            if limits["pro"] is None or limits["pro"] is True:
                return "pro"
            return "elite"
        return "free"

    @staticmethod
    def get_limits_for_tier(tier: str) -> Dict[str, Limit]:
        return {feature: limits.get(tier) for feature, limits in FEATURE_LIMITS.items()}

    @staticmethod
    def should_prompt_upgrade(tier: str, usage: Dict[str, int]) -> bool:
        """True when a free user has used 80% or more of any numeric limit."""
        if tier != "free":
            return False

        for feature, count in usage.items():
            limit = FEATURE_LIMITS.get(feature, {}).get("free")
            if isinstance(limit, bool) or limit is None:
                continue
            if count >= limit * UPGRADE_PROMPT_THRESHOLD:
                return True
        return False

    @staticmethod
    def calculate_upgrade_urgency(tier: str, usage: Dict[str, int]) -> float:
        """Highest usage/limit ratio across free-tier limits, capped at 1."""
        if tier != "free":
            return 0.0

        urgency = 0.0
        for feature, count in usage.items():
            limit = FEATURE_LIMITS.get(feature, {}).get("free")
            if isinstance(limit, bool) or not limit:
                continue
            urgency = max(urgency, min(1.0, count / limit))
        return urgency

    @staticmethod
    def get_upgrade_message(feature: str) -> str:
        required = FeatureGate.get_required_tier(feature) if feature in FEATURE_LIMITS else "pro"
        tier_name = "Elite" if required == "elite" else "Pro"
        template = UPGRADE_MESSAGES.get(feature, "Upgrade to {tier} to unlock this feature")
        return template.format(tier=tier_name)
