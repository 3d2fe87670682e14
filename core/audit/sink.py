"""
Creditline Core Audit — Sinks and Best-Effort Emission
========================================================
Audit is observability, not a transactional participant.

A sink that fails to accept a fact never rolls back the mutation that
produced it; the failure is logged as a local warning instead.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from core.audit.models import AuditFact

logger = logging.getLogger("creditline.audit")


class AuditSink(Protocol):
    def record(self, fact: AuditFact) -> None:
        ...


class InMemoryAuditSink:
    """Append-only in-memory sink used by tests/bootstrap."""

    def __init__(self) -> None:
        self._facts: List[AuditFact] = []

    def record(self, fact: AuditFact) -> None:
        self._facts.append(fact)

    @property
    def facts(self) -> tuple[AuditFact, ...]:
        return tuple(self._facts)

    def of_type(self, event_type: str) -> tuple[AuditFact, ...]:
        return tuple(f for f in self._facts if f.event_type == event_type)

    def __len__(self) -> int:
        return len(self._facts)


class AuditEmitter:
    """
    Wraps an AuditSink with best-effort delivery.

    emit() returns True when the sink accepted the fact, False when
    delivery failed (or no sink is configured).
    """

    def __init__(self, sink: Optional[AuditSink] = None) -> None:
        self._sink = sink

    def emit(self, fact: AuditFact) -> bool:
        if self._sink is None:
            logger.debug(f"No audit sink configured, dropping {fact.event_type}")
            return False
        try:
            self._sink.record(fact)
        except Exception as exc:
            logger.warning(
                f"Audit delivery failed for {fact.event_type} "
                f"on {fact.resource_type}/{fact.resource_id}: {exc}"
            )
            return False
        return True
