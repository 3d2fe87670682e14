from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.audit import AuditEmitter, DbAuditSink
from core.commands import ReasonCode
from core.feature_flags import DbFeatureFlagProvider, FeatureGate
from core.permissions import Actor
from core.time import FixedClock
from engines.credit.commands import (
    AdjustCreditLimitRequest,
    ApplyCreditToOrderRequest,
    ApproveCreditTermsRequest,
    ReactivateCreditTermsRequest,
    SettleCreditOrderRequest,
    SuspendCreditTermsRequest,
)
from engines.credit.db_store import DbCreditTermsStore
from engines.credit.eligibility import CustomerHistory, InMemoryCustomerHistoryProvider
from engines.credit.events import CREDIT_APPLIED_TO_ORDER, CREDIT_TERMS_APPROVED
from engines.credit.services import CreditMutationService, CreditQueryService

pytestmark = pytest.mark.django_db(transaction=True)

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)
ADMIN = Actor.super_admin("admin-1")
SYSTEM = Actor.system("invoice-webhook")
PLACER = Actor.order_placer("sales-1")


def _services():
    clock = FixedClock(NOW)
    sink = DbAuditSink()
    store = DbCreditTermsStore()
    service = CreditMutationService(
        store=store,
        feature_gate=FeatureGate(DbFeatureFlagProvider(), clock=clock),
        history_provider=InMemoryCustomerHistoryProvider([
            CustomerHistory("cust-1", lifetime_orders=3, loyalty_tier="silver"),
        ]),
        audit=AuditEmitter(sink),
        clock=clock,
    )
    return service, CreditQueryService(store=store, clock=clock), sink


def test_approve_persists_terms() -> None:
    service, query, sink = _services()

    outcome = service.approve(
        ApproveCreditTermsRequest("cust-1", 5000, "net_30"), ADMIN
    )
    assert outcome.is_accepted

    terms = DbCreditTermsStore().get("cust-1")
    assert terms.status == "active"
    assert terms.credit_limit == Decimal("5000")
    assert terms.current_balance == 0
    assert terms.net_terms == "net_30"
    assert terms.approved_at == NOW
    assert terms.version == 1
    assert sink.count(CREDIT_TERMS_APPROVED) == 1


def test_apply_and_settle_round_trip() -> None:
    service, query, sink = _services()
    service.approve(ApproveCreditTermsRequest("cust-1", 5000, "net_30"), ADMIN)

    outcome = service.apply_to_order(
        ApplyCreditToOrderRequest("order-1", "cust-1", 5000), PLACER
    )
    assert outcome.is_accepted
    assert query.available_credit("cust-1") == 0

    over = service.apply_to_order(
        ApplyCreditToOrderRequest("order-2", "cust-1", 1), PLACER
    )
    assert over.code == ReasonCode.INSUFFICIENT_CREDIT

    entries = query.ledger("cust-1")
    assert len(entries) == 1
    assert entries[0].credit_due_date == NOW + timedelta(days=30)
    assert entries[0].sequence == 1

    settled = service.settle(
        SettleCreditOrderRequest("order-1", "cust-1", 2000), SYSTEM
    )
    assert settled.result.payment_status == "partially_paid"
    assert query.get_terms("cust-1").current_balance == Decimal("3000")
    assert query.ledger("cust-1")[0].amount_paid == Decimal("2000")
    assert sink.count(CREDIT_APPLIED_TO_ORDER) == 1


def test_duplicate_order_rejected() -> None:
    service, query, _ = _services()
    service.approve(ApproveCreditTermsRequest("cust-1", 5000), ADMIN)
    service.apply_to_order(ApplyCreditToOrderRequest("order-1", "cust-1", 10), PLACER)

    outcome = service.apply_to_order(
        ApplyCreditToOrderRequest("order-1", "cust-1", 10), PLACER
    )
    assert outcome.code == ReasonCode.INVALID_TRANSITION
    assert query.get_terms("cust-1").current_balance == Decimal("10")


def test_suspend_reactivate_preserves_balance() -> None:
    service, query, _ = _services()
    service.approve(ApproveCreditTermsRequest("cust-1", 5000), ADMIN)
    service.apply_to_order(ApplyCreditToOrderRequest("order-1", "cust-1", 750), PLACER)

    service.suspend(SuspendCreditTermsRequest("cust-1", "late payments"), ADMIN)
    suspended = query.get_terms("cust-1")
    assert suspended.status == "suspended"
    assert suspended.suspended_reason == "late payments"

    service.reactivate(ReactivateCreditTermsRequest("cust-1"), ADMIN)
    terms = query.get_terms("cust-1")
    assert terms.status == "active"
    assert terms.current_balance == Decimal("750")
    assert terms.suspended_reason is None
    assert terms.suspended_at is None


def test_limit_below_balance_leaves_row_untouched() -> None:
    service, query, _ = _services()
    service.approve(ApproveCreditTermsRequest("cust-1", 5000), ADMIN)
    service.apply_to_order(ApplyCreditToOrderRequest("order-1", "cust-1", 3000), PLACER)

    outcome = service.adjust_limit(AdjustCreditLimitRequest("cust-1", 2000), ADMIN)
    assert outcome.code == ReasonCode.LIMIT_BELOW_BALANCE
    assert query.get_terms("cust-1").credit_limit == Decimal("5000")


def test_rejected_first_approval_writes_nothing() -> None:
    service, query, sink = _services()
    outcome = service.approve(ApproveCreditTermsRequest("cust-2", 5000), ADMIN)
    assert outcome.code == ReasonCode.NOT_ELIGIBLE
    assert query.get_terms("cust-2") is None
    assert sink.count() == 0
