"""
Creditline Benefits Engine — Event Types
=========================================
Non-monetary loyalty entitlements per customer.
"""

# ── Audit Event Types ─────────────────────────────────────────

BENEFIT_ENABLED = "benefit_enabled"
BENEFIT_DISABLED = "benefit_disabled"

ALL_EVENT_TYPES = (BENEFIT_ENABLED, BENEFIT_DISABLED)

RESOURCE_CUSTOMER_BENEFITS = "customer_benefits"

OP_ENABLE = "benefit.enable"
OP_DISABLE = "benefit.disable"

# ── Benefit Types ─────────────────────────────────────────────

BENEFIT_PRIORITY_PROCESSING = "priority_processing"
BENEFIT_DEDICATED_MANAGER = "dedicated_manager"
BENEFIT_FASTER_SLA = "faster_sla"

# Canonical display order.
ALL_BENEFIT_TYPES = (
    BENEFIT_PRIORITY_PROCESSING,
    BENEFIT_DEDICATED_MANAGER,
    BENEFIT_FASTER_SLA,
)

VALID_BENEFIT_TYPES = frozenset(ALL_BENEFIT_TYPES)

BENEFIT_LABELS = {
    BENEFIT_PRIORITY_PROCESSING: "Priority Processing",
    BENEFIT_DEDICATED_MANAGER: "Dedicated Account Manager",
    BENEFIT_FASTER_SLA: "Faster SLA",
}

BENEFIT_DESCRIPTIONS = {
    BENEFIT_PRIORITY_PROCESSING: "Orders are prioritized ahead of the standard processing queue",
    BENEFIT_DEDICATED_MANAGER: "A named account manager handles all requests for this customer",
    BENEFIT_FASTER_SLA: "Service level targets are reduced by 25% for this customer",
}


def benefit_label(benefit_type: str) -> str:
    if benefit_type not in VALID_BENEFIT_TYPES:
        raise ValueError(f"Unknown benefit type: {benefit_type}")
    return BENEFIT_LABELS[benefit_type]


def benefit_description(benefit_type: str) -> str:
    if benefit_type not in VALID_BENEFIT_TYPES:
        raise ValueError(f"Unknown benefit type: {benefit_type}")
    return BENEFIT_DESCRIPTIONS[benefit_type]
