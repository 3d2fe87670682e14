"""
Creditline Credit Engine — Event Types
=======================================
Audit event types, statuses and net-terms vocabulary for customer
credit terms.
"""

# ── Audit Event Types ─────────────────────────────────────────

CREDIT_TERMS_APPROVED = "credit_terms_approved"
CREDIT_TERMS_LIMIT_CHANGED = "credit_terms_limit_changed"
CREDIT_TERMS_SUSPENDED = "credit_terms_suspended"
CREDIT_TERMS_REACTIVATED = "credit_terms_reactivated"
CREDIT_TERMS_DEACTIVATED = "credit_terms_deactivated"
CREDIT_APPLIED_TO_ORDER = "credit_applied_to_order"
CREDIT_SETTLED = "credit_settled"

ALL_EVENT_TYPES = (
    CREDIT_TERMS_APPROVED,
    CREDIT_TERMS_LIMIT_CHANGED,
    CREDIT_TERMS_SUSPENDED,
    CREDIT_TERMS_REACTIVATED,
    CREDIT_TERMS_DEACTIVATED,
    CREDIT_APPLIED_TO_ORDER,
    CREDIT_SETTLED,
)

RESOURCE_CREDIT_TERMS = "customer_credit_terms"

# ── Operations ────────────────────────────────────────────────

OP_APPROVE = "credit.terms.approve"
OP_ADJUST_LIMIT = "credit.terms.adjust_limit"
OP_SUSPEND = "credit.terms.suspend"
OP_REACTIVATE = "credit.terms.reactivate"
OP_DEACTIVATE = "credit.terms.deactivate"
OP_APPLY_TO_ORDER = "credit.order.apply"
OP_SETTLE = "credit.order.settle"

# ── Credit Status ─────────────────────────────────────────────

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUS_SUSPENDED = "suspended"

VALID_CREDIT_STATUSES = frozenset({
    STATUS_ACTIVE, STATUS_INACTIVE, STATUS_SUSPENDED,
})

# ── Net Terms ─────────────────────────────────────────────────

NET_7 = "net_7"
NET_14 = "net_14"
NET_30 = "net_30"
NET_45 = "net_45"
NET_60 = "net_60"

NET_TERMS_DAYS = {
    NET_7: 7,
    NET_14: 14,
    NET_30: 30,
    NET_45: 45,
    NET_60: 60,
}

VALID_NET_TERMS = frozenset(NET_TERMS_DAYS)

DEFAULT_NET_TERMS = NET_14

# ── Ledger Payment Status ─────────────────────────────────────

PAYMENT_PENDING = "pending"
PAYMENT_PARTIALLY_PAID = "partially_paid"
PAYMENT_FULLY_PAID = "fully_paid"
PAYMENT_OVERPAID = "overpaid"

VALID_PAYMENT_STATUSES = frozenset({
    PAYMENT_PENDING, PAYMENT_PARTIALLY_PAID,
    PAYMENT_FULLY_PAID, PAYMENT_OVERPAID,
})

SETTLED_PAYMENT_STATUSES = frozenset({PAYMENT_FULLY_PAID, PAYMENT_OVERPAID})

# ── Utilization Levels ────────────────────────────────────────

UTILIZATION_HEALTHY = "healthy"
UTILIZATION_WARNING = "warning"
UTILIZATION_CRITICAL = "critical"
