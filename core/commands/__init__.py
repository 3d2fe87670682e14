"""
Creditline Command Layer — Typed Outcomes
===========================================
Every mutation produces exactly one Outcome.
REJECTED outcomes are first-class results, not exceptions.
"""

from core.commands.outcomes import (
    CommandOutcome,
    CommandStatus,
)
from core.commands.rejection import (
    ALL_REASON_CODES,
    ReasonCode,
    RejectionReason,
)

__all__ = [
    # ── Outcomes ──────────────────────────────────────────────
    "CommandOutcome",
    "CommandStatus",
    # ── Rejection ─────────────────────────────────────────────
    "RejectionReason",
    "ReasonCode",
    "ALL_REASON_CODES",
]
