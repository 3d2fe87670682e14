"""
Creditline Core Audit — DB-backed Sink
========================================
Appends audit facts to the audit fact table. Insert only.
"""

from __future__ import annotations

from core.audit.models import AuditFact


class DbAuditSink:
    def record(self, fact: AuditFact) -> None:
        from core.credit_store.models import AuditFactRow

        AuditFactRow.objects.create(
            fact_id=fact.fact_id,
            actor_id=fact.actor_id,
            event_type=fact.event_type,
            resource_type=fact.resource_type,
            resource_id=fact.resource_id,
            action=fact.action,
            severity=fact.severity,
            event_data=dict(fact.event_data),
            occurred_at=fact.occurred_at,
        )

    def count(self, event_type: str | None = None) -> int:
        from core.credit_store.models import AuditFactRow

        rows = AuditFactRow.objects.all()
        if event_type is not None:
            rows = rows.filter(event_type=event_type)
        return rows.count()
