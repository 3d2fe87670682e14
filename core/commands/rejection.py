"""
Creditline Command Layer — Rejection Model
============================================
Structured reasons for refused credit, benefit and flag operations.

A rejection is an expected, recoverable outcome. It is returned to the
caller inside a CommandOutcome, never raised.

Every rejection must be:
- Deterministic (same state + request → same rejection)
- Machine-readable (code)
- Human-readable (message)
- Displayable (details carries shortfall amounts, missing requirements, ...)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for an operation rejection.

    Fields:
        code:        Machine-readable rejection code (see ReasonCode).
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
        details:     Structured data for the consuming layer
                     (e.g. {"shortfall": Decimal("1")}).
    """

    code: str
    message: str
    policy_name: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

        if not isinstance(self.details, dict):
            raise ValueError("details must be a dict.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
            "details": dict(self.details),
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Authorization ─────────────────────────────────────────
    UNAUTHORIZED = "UNAUTHORIZED"

    # ── Kill switches ─────────────────────────────────────────
    FEATURE_DISABLED = "FEATURE_DISABLED"

    # ── Credit terms ──────────────────────────────────────────
    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    LIMIT_BELOW_BALANCE = "LIMIT_BELOW_BALANCE"
    CREDIT_NOT_USABLE = "CREDIT_NOT_USABLE"
    INSUFFICIENT_CREDIT = "INSUFFICIENT_CREDIT"


ALL_REASON_CODES = frozenset({
    ReasonCode.UNAUTHORIZED,
    ReasonCode.FEATURE_DISABLED,
    ReasonCode.NOT_ELIGIBLE,
    ReasonCode.INVALID_TRANSITION,
    ReasonCode.LIMIT_BELOW_BALANCE,
    ReasonCode.CREDIT_NOT_USABLE,
    ReasonCode.INSUFFICIENT_CREDIT,
})
