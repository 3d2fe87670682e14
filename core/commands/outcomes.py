"""
Creditline Command Layer — Command Outcome Contract
=====================================================
Every mutating operation produces exactly one Outcome.

ACCEPTED → the mutation was committed; `result` holds the new state.
REJECTED → nothing was written; `reason` is mandatory.

Rules:
- Exactly one outcome per operation
- Outcome is immutable (frozen dataclass)
- REJECTED must contain reason (RejectionReason)
- ACCEPTED must NOT contain reason
- occurred_at is mandatory
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
import uuid

from core.commands.rejection import RejectionReason


# ══════════════════════════════════════════════════════════════
# COMMAND STATUS
# ══════════════════════════════════════════════════════════════

class CommandStatus(Enum):
    """Binary command decision. No middle ground."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


# ══════════════════════════════════════════════════════════════
# COMMAND OUTCOME
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CommandOutcome:
    """
    Result of a credit, benefit or flag operation.

    Fields:
        operation:   Operation name (e.g. 'credit.terms.approve').
        status:      ACCEPTED or REJECTED.
        reason:      RejectionReason (mandatory if REJECTED, None if ACCEPTED).
        occurred_at: When the decision was made.
        result:      New state snapshot for accepted outcomes.
        command_id:  Unique id of this decision.

    Invariants:
        - REJECTED + reason is None → ValueError
        - ACCEPTED + reason is not None → ValueError
    """

    operation: str
    status: CommandStatus
    reason: Optional[RejectionReason]
    occurred_at: datetime
    result: Any = None
    command_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        if not self.operation or not isinstance(self.operation, str):
            raise ValueError("operation must be a non-empty string.")

        if not isinstance(self.status, CommandStatus):
            raise ValueError(
                f"status must be CommandStatus, got {type(self.status).__name__}."
            )

        if self.status == CommandStatus.REJECTED and self.reason is None:
            raise ValueError(
                "REJECTED outcome must include a RejectionReason. "
                "No silent rejections allowed."
            )

        if self.status == CommandStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

    @classmethod
    def accepted(
        cls, operation: str, occurred_at: datetime, result: Any = None
    ) -> "CommandOutcome":
        return cls(
            operation=operation,
            status=CommandStatus.ACCEPTED,
            reason=None,
            occurred_at=occurred_at,
            result=result,
        )

    @classmethod
    def rejected(
        cls, operation: str, occurred_at: datetime, reason: RejectionReason
    ) -> "CommandOutcome":
        return cls(
            operation=operation,
            status=CommandStatus.REJECTED,
            reason=reason,
            occurred_at=occurred_at,
        )

    @property
    def is_accepted(self) -> bool:
        return self.status == CommandStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == CommandStatus.REJECTED

    @property
    def code(self) -> Optional[str]:
        """Rejection code, or None when accepted."""
        return self.reason.code if self.reason is not None else None
