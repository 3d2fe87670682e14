"""
Creditline Credit Engine — Concurrency Tests
=============================================
Concurrent orders never overdraw the limit, and lifecycle changes
racing an order resolve to exactly one consistent outcome.
"""

import threading
from datetime import datetime, timezone
from decimal import Decimal

from core.audit import AuditEmitter, InMemoryAuditSink
from core.commands import ReasonCode
from core.feature_flags import FeatureGate, InMemoryFeatureFlagProvider
from core.permissions import Actor
from core.time import FixedClock
from engines.credit.commands import (
    AdjustCreditLimitRequest,
    ApplyCreditToOrderRequest,
    ApproveCreditTermsRequest,
    SuspendCreditTermsRequest,
)
from engines.credit.events import CREDIT_APPLIED_TO_ORDER
from engines.credit.services import CreditMutationService
from engines.credit.store import InMemoryCreditTermsStore

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)
ADMIN = Actor.super_admin("admin-1")
PLACER = Actor.order_placer("sales-1")


def _service():
    store = InMemoryCreditTermsStore()
    sink = InMemoryAuditSink()
    service = CreditMutationService(
        store=store,
        feature_gate=FeatureGate(InMemoryFeatureFlagProvider()),
        audit=AuditEmitter(sink),
        clock=FixedClock(NOW),
    )
    return service, store, sink


def _run_threads(target, count):
    start = threading.Barrier(count)
    results = [None] * count

    def worker(i):
        start.wait()
        results[i] = target(i)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


class TestConcurrentApply:
    def test_two_orders_racing_for_the_last_credit(self):
        service, store, _ = _service()
        service.approve(
            ApproveCreditTermsRequest("cust-1", 1000, override_eligibility=True), ADMIN
        )

        outcomes = _run_threads(
            lambda i: service.apply_to_order(
                ApplyCreditToOrderRequest(f"order-{i}", "cust-1", 600), PLACER
            ),
            2,
        )

        accepted = [o for o in outcomes if o.is_accepted]
        rejected = [o for o in outcomes if o.is_rejected]
        assert len(accepted) == 1
        assert len(rejected) == 1
        assert rejected[0].code == ReasonCode.INSUFFICIENT_CREDIT
        assert store.get("cust-1").current_balance == Decimal("600")

    def test_many_small_orders_stop_exactly_at_limit(self):
        service, store, sink = _service()
        service.approve(
            ApproveCreditTermsRequest("cust-1", 1000, override_eligibility=True), ADMIN
        )

        outcomes = _run_threads(
            lambda i: service.apply_to_order(
                ApplyCreditToOrderRequest(f"order-{i}", "cust-1", 100), PLACER
            ),
            25,
        )

        assert sum(1 for o in outcomes if o.is_accepted) == 10
        terms = store.get("cust-1")
        assert terms.current_balance == terms.credit_limit
        assert len(store.ledger_entries("cust-1")) == 10
        assert len(sink.of_type(CREDIT_APPLIED_TO_ORDER)) == 10
        sequences = sorted(e.sequence for e in store.ledger_entries("cust-1"))
        assert sequences == list(range(1, 11))

    def test_duplicate_order_racing_applies_once(self):
        service, store, _ = _service()
        service.approve(
            ApproveCreditTermsRequest("cust-1", 5000, override_eligibility=True), ADMIN
        )

        outcomes = _run_threads(
            lambda i: service.apply_to_order(
                ApplyCreditToOrderRequest("order-1", "cust-1", 100), PLACER
            ),
            8,
        )

        assert sum(1 for o in outcomes if o.is_accepted) == 1
        assert store.get("cust-1").current_balance == Decimal("100")

    def test_customers_do_not_interfere(self):
        service, store, _ = _service()
        for cid in ("cust-a", "cust-b"):
            service.approve(
                ApproveCreditTermsRequest(cid, 500, override_eligibility=True), ADMIN
            )

        outcomes = _run_threads(
            lambda i: service.apply_to_order(
                ApplyCreditToOrderRequest(
                    f"order-{i}", "cust-a" if i % 2 else "cust-b", 50
                ),
                PLACER,
            ),
            20,
        )

        assert all(o.is_accepted for o in outcomes)
        assert store.get("cust-a").current_balance == Decimal("500")
        assert store.get("cust-b").current_balance == Decimal("500")


class TestLifecycleRaces:
    ROUNDS = 20

    def test_suspend_racing_apply_resolves_one_way(self):
        for _ in range(self.ROUNDS):
            service, store, _ = _service()
            service.approve(
                ApproveCreditTermsRequest("cust-1", 1000, override_eligibility=True),
                ADMIN,
            )

            def run(i):
                if i == 0:
                    return service.suspend(
                        SuspendCreditTermsRequest("cust-1", "risk review"), ADMIN
                    )
                return service.apply_to_order(
                    ApplyCreditToOrderRequest("order-1", "cust-1", 400), PLACER
                )

            suspended, applied = _run_threads(run, 2)

            assert suspended.is_accepted
            terms = store.get("cust-1")
            assert terms.status == "suspended"
            entries = store.ledger_entries("cust-1")
            if applied.is_accepted:
                assert terms.current_balance == Decimal("400")
                assert [e.order_id for e in entries] == ["order-1"]
            else:
                assert applied.code == ReasonCode.CREDIT_NOT_USABLE
                assert terms.current_balance == 0
                assert entries == ()
            assert terms.current_balance == sum(
                (e.credit_amount_used for e in entries), Decimal("0")
            )

    def test_adjust_limit_racing_apply_keeps_limit_above_balance(self):
        for _ in range(self.ROUNDS):
            service, store, _ = _service()
            service.approve(
                ApproveCreditTermsRequest("cust-1", 1000, override_eligibility=True),
                ADMIN,
            )

            def run(i):
                if i == 0:
                    return service.adjust_limit(
                        AdjustCreditLimitRequest("cust-1", 500), ADMIN
                    )
                return service.apply_to_order(
                    ApplyCreditToOrderRequest("order-1", "cust-1", 600), PLACER
                )

            adjusted, applied = _run_threads(run, 2)

            assert adjusted.is_accepted != applied.is_accepted
            terms = store.get("cust-1")
            if applied.is_accepted:
                assert adjusted.code == ReasonCode.LIMIT_BELOW_BALANCE
                assert terms.credit_limit == Decimal("1000")
                assert terms.current_balance == Decimal("600")
            else:
                assert applied.code == ReasonCode.INSUFFICIENT_CREDIT
                assert terms.credit_limit == Decimal("500")
                assert terms.current_balance == 0
            assert terms.current_balance <= terms.credit_limit
