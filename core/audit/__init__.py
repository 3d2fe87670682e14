"""
Creditline Core Audit — Public API
====================================
Immutable audit facts and best-effort sinks.
"""

from core.audit.functions import create_audit_fact
from core.audit.models import (
    SEVERITY_CRITICAL,
    SEVERITY_HIGH,
    SEVERITY_LOW,
    SEVERITY_MEDIUM,
    AuditFact,
)
from core.audit.db_sink import DbAuditSink
from core.audit.sink import AuditEmitter, AuditSink, InMemoryAuditSink

__all__ = [
    "AuditFact",
    "SEVERITY_LOW",
    "SEVERITY_MEDIUM",
    "SEVERITY_HIGH",
    "SEVERITY_CRITICAL",
    "create_audit_fact",
    "AuditSink",
    "InMemoryAuditSink",
    "DbAuditSink",
    "AuditEmitter",
]
