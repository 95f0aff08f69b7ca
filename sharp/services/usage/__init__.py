"""Subscription feature gate and usage tracking."""

from sharp.services.usage.feature_gate import (
    FEATURE_LIMITS,
    FeatureAccess,
    FeatureGate,
    UsageLimit,
)
from sharp.services.usage.usage_service import UsageService

__all__ = [
    "FEATURE_LIMITS",
    "FeatureAccess",
    "FeatureGate",
    "UsageLimit",
    "UsageService",
]
