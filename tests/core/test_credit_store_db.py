from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.audit import AuditEmitter, DbAuditSink, create_audit_fact
from core.feature_flags import (
    FEATURE_FLAG_CHANGED,
    FLAG_CREDIT_TERMS_GLOBAL,
    DbFeatureFlagProvider,
    FeatureGate,
)
from core.permissions import Actor
from core.time import FixedClock

pytestmark = pytest.mark.django_db(transaction=True)

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)
ADMIN = Actor.super_admin("admin-1")


def test_db_flag_provider_defaults_to_enabled() -> None:
    gate = FeatureGate(DbFeatureFlagProvider(), clock=FixedClock(NOW))
    assert gate.is_enabled(FLAG_CREDIT_TERMS_GLOBAL) is True
    assert DbFeatureFlagProvider().all_flags() == ()


def test_db_flag_provider_round_trips_toggle() -> None:
    sink = DbAuditSink()
    gate = FeatureGate(
        DbFeatureFlagProvider(), audit=AuditEmitter(sink), clock=FixedClock(NOW)
    )

    gate.set_enabled(FLAG_CREDIT_TERMS_GLOBAL, False, ADMIN, reason="incident")
    flag = DbFeatureFlagProvider().get_flag(FLAG_CREDIT_TERMS_GLOBAL)
    assert flag.enabled is False
    assert flag.disabled_by == "admin-1"
    assert flag.disabled_reason == "incident"
    assert flag.disabled_at == NOW

    gate.set_enabled(FLAG_CREDIT_TERMS_GLOBAL, True, ADMIN)
    flag = DbFeatureFlagProvider().get_flag(FLAG_CREDIT_TERMS_GLOBAL)
    assert flag.enabled is True
    assert flag.disabled_reason is None
    assert len(DbFeatureFlagProvider().all_flags()) == 1

    assert sink.count(FEATURE_FLAG_CHANGED) == 2


def test_db_audit_sink_persists_event_data() -> None:
    from core.credit_store.models import AuditFactRow

    fact = create_audit_fact(
        actor_id="admin-1",
        event_type="credit_terms_suspended",
        resource_type="customer_credit_terms",
        resource_id="cust-1",
        action="suspend",
        occurred_at=NOW,
        event_data={"reason": "late payments"},
    )
    DbAuditSink().record(fact)

    row = AuditFactRow.objects.get(fact_id=fact.fact_id)
    assert row.event_data == {"reason": "late payments"}
    assert row.severity == "high"
    assert row.occurred_at == NOW
