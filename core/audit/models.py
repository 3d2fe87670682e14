"""
Creditline Core Audit — Immutable Audit Facts
===============================================
Append-only facts describing every credit, benefit and kill-switch
mutation. Frozen dataclasses: once created, never modified.
Deletion of audit facts is forbidden.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


SEVERITY_LOW = "low"
SEVERITY_MEDIUM = "medium"
SEVERITY_HIGH = "high"
SEVERITY_CRITICAL = "critical"

VALID_SEVERITIES = frozenset({
    SEVERITY_LOW, SEVERITY_MEDIUM, SEVERITY_HIGH, SEVERITY_CRITICAL,
})


# ══════════════════════════════════════════════════════════════
# AUDIT FACT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AuditFact:
    """
    Immutable record of one committed mutation.

    Every successful mutation produces exactly one AuditFact.
    Read paths and rejected attempts produce none.
    """

    fact_id: uuid.UUID
    actor_id: str
    event_type: str
    resource_type: str
    resource_id: str
    action: str
    severity: str
    occurred_at: datetime
    event_data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")
        if not self.event_type or not isinstance(self.event_type, str):
            raise ValueError("event_type must be a non-empty string.")
        if self.severity not in VALID_SEVERITIES:
            raise ValueError(
                f"AuditFact severity must be one of {sorted(VALID_SEVERITIES)}, "
                f"got '{self.severity}'."
            )
        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

    def to_dict(self) -> dict:
        return {
            "fact_id": str(self.fact_id),
            "actor_id": self.actor_id,
            "event_type": self.event_type,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "action": self.action,
            "severity": self.severity,
            "occurred_at": self.occurred_at.isoformat(),
            "event_data": dict(self.event_data),
        }
