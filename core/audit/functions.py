"""
Creditline Core Audit — Pure Audit Functions
==============================================
Factory functions for audit facts.
All functions are pure — they return new frozen objects, never mutate.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from core.audit.models import SEVERITY_HIGH, AuditFact


def _plain(value: Any) -> Any:
    """Normalize event_data values to JSON-friendly primitives."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def create_audit_fact(
    actor_id: str,
    event_type: str,
    resource_type: str,
    resource_id: str,
    action: str,
    occurred_at: datetime,
    event_data: Optional[dict] = None,
    severity: str = SEVERITY_HIGH,
) -> AuditFact:
    """Create an immutable audit fact."""
    return AuditFact(
        fact_id=uuid.uuid4(),
        actor_id=actor_id,
        event_type=event_type,
        resource_type=resource_type,
        resource_id=str(resource_id),
        action=action,
        severity=severity,
        occurred_at=occurred_at,
        event_data=_plain(event_data or {}),
    )
