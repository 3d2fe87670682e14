"""
Creditline Feature Flags - Public API
=====================================
"""

from core.feature_flags.db_provider import DbFeatureFlagProvider
from core.feature_flags.gate import FEATURE_FLAG_CHANGED, FeatureGate
from core.feature_flags.models import FeatureFlag
from core.feature_flags.provider import (
    FeatureFlagProvider,
    InMemoryFeatureFlagProvider,
)
from core.feature_flags.registry import (
    FLAG_CREDIT_TERMS_GLOBAL,
    FLAG_LOYALTY_BENEFITS_GLOBAL,
    FLAG_SUBSCRIPTION_ENFORCEMENT,
    VALID_FEATURE_KEYS,
    feature_description,
    feature_label,
)

__all__ = [
    "FeatureFlag",
    "FeatureFlagProvider",
    "InMemoryFeatureFlagProvider",
    "DbFeatureFlagProvider",
    "FeatureGate",
    "FEATURE_FLAG_CHANGED",
    "FLAG_CREDIT_TERMS_GLOBAL",
    "FLAG_LOYALTY_BENEFITS_GLOBAL",
    "FLAG_SUBSCRIPTION_ENFORCEMENT",
    "VALID_FEATURE_KEYS",
    "feature_label",
    "feature_description",
]
