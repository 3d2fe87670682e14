"""
Creditline Feature Flags - Kill Switch Registry
===============================================
Closed set of global kill switches.
Default: ON unless a record explicitly disables the key.
"""

from __future__ import annotations


# ══════════════════════════════════════════════════════════════
# FLAG KEY CONSTANTS: one per globally switchable feature
# ══════════════════════════════════════════════════════════════

FLAG_CREDIT_TERMS_GLOBAL = "credit_terms_global"
FLAG_LOYALTY_BENEFITS_GLOBAL = "loyalty_benefits_global"
FLAG_SUBSCRIPTION_ENFORCEMENT = "subscription_enforcement"

VALID_FEATURE_KEYS = frozenset({
    FLAG_CREDIT_TERMS_GLOBAL,
    FLAG_LOYALTY_BENEFITS_GLOBAL,
    FLAG_SUBSCRIPTION_ENFORCEMENT,
})


FEATURE_LABELS: dict[str, str] = {
    FLAG_CREDIT_TERMS_GLOBAL: "Customer Credit Terms",
    FLAG_LOYALTY_BENEFITS_GLOBAL: "Loyalty Benefits",
    FLAG_SUBSCRIPTION_ENFORCEMENT: "Subscription Enforcement",
}

FEATURE_DESCRIPTIONS: dict[str, str] = {
    FLAG_CREDIT_TERMS_GLOBAL: (
        "Net 7/14/30/45/60 payment terms for approved business customers. "
        "When off, no credit can be approved, adjusted or used."
    ),
    FLAG_LOYALTY_BENEFITS_GLOBAL: (
        "Non-monetary loyalty benefits: priority processing, dedicated "
        "manager and faster SLA. When off, every benefit reads as disabled."
    ),
    FLAG_SUBSCRIPTION_ENFORCEMENT: (
        "Subscription limits and renewal banners for customer accounts."
    ),
}


def feature_label(feature_key: str) -> str:
    return FEATURE_LABELS.get(feature_key, feature_key)


def feature_description(feature_key: str) -> str:
    return FEATURE_DESCRIPTIONS.get(feature_key, "")
