"""
Creditline Credit Engine — Ledger derivation
=============================================
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from engines.credit.ledger import (
    LedgerEntry,
    OrderSnapshot,
    days_until_due,
    derive_ledger_entries,
    due_status,
    payment_status_for,
    summarize_ledger,
)
from engines.credit.notices import (
    NOTICE_OVERDUE,
    NOTICE_REACTIVATED,
    NOTICE_SUSPENDED,
    overdue_notices,
    reactivation_notice,
    suspension_notice,
)
from engines.credit.store import CreditTerms

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def _entry(order_id, amount, due_in_days, status="pending", paid=0, seq=0):
    return LedgerEntry(
        order_id=order_id,
        customer_id="cust-1",
        credit_amount_used=amount,
        credit_due_date=NOW + timedelta(days=due_in_days),
        payment_status=status,
        amount_paid=paid,
        sequence=seq,
    )


class TestLedgerEntry:
    def test_overdue_only_after_due_date(self):
        entry = _entry("o1", 100, 0)
        assert entry.is_overdue(NOW) is False
        assert entry.is_overdue(NOW + timedelta(seconds=1)) is True

    @pytest.mark.parametrize("status", ["fully_paid", "overpaid"])
    def test_settled_never_overdue(self, status):
        entry = _entry("o1", 100, -10, status=status, paid=100)
        assert entry.is_overdue(NOW) is False
        assert entry.outstanding_amount == 0

    def test_partially_paid_outstanding(self):
        entry = _entry("o1", 100, 5, status="partially_paid", paid=40)
        assert entry.outstanding_amount == Decimal("60")

    def test_with_payment_moves_status(self):
        entry = _entry("o1", 100, 5)
        partial = entry.with_payment(Decimal("30"))
        assert partial.payment_status == "partially_paid"
        full = partial.with_payment(Decimal("70"))
        assert full.payment_status == "fully_paid"
        over = full.with_payment(Decimal("1"))
        assert over.payment_status == "overpaid"
        assert over.amount_paid == Decimal("101")

    def test_invalid_status(self):
        with pytest.raises(ValueError, match="payment_status"):
            _entry("o1", 100, 5, status="void")

    def test_payment_status_for(self):
        assert payment_status_for(Decimal("10"), Decimal("0")) == "pending"


class TestSummarizeLedger:
    def test_empty(self):
        summary = summarize_ledger([], NOW)
        assert summary.total_outstanding == 0
        assert summary.overdue_count == 0
        assert summary.next_due is None
        assert summary.entry_count == 0

    def test_aggregates(self):
        entries = [
            _entry("o1", 1000, -5, seq=1),                              # overdue
            _entry("o2", 500, -1, status="partially_paid", paid=200, seq=2),  # overdue
            _entry("o3", 300, 10, seq=3),
            _entry("o4", 700, 3, seq=4),
            _entry("o5", 900, -30, status="fully_paid", paid=900, seq=5),
        ]
        summary = summarize_ledger(entries, NOW)
        assert summary.total_outstanding == Decimal("2500")
        assert summary.net_outstanding == Decimal("2300")
        assert summary.overdue_amount == Decimal("1500")
        assert summary.overdue_count == 2
        assert summary.next_due.order_id == "o4"
        assert summary.entry_count == 5

    def test_partial_payment_counts_full_credit_used(self):
        entries = [_entry("o1", 100, 5, status="partially_paid", paid=40, seq=1)]
        summary = summarize_ledger(entries, NOW)
        assert summary.total_outstanding == Decimal("100")
        assert summary.net_outstanding == Decimal("60")
        assert summary.to_dict()["net_outstanding"] == "60.00"

    def test_next_due_ties_by_sequence(self):
        entries = [_entry("late", 100, 7, seq=2), _entry("early", 100, 7, seq=1)]
        assert summarize_ledger(entries, NOW).next_due.order_id == "early"

    def test_overdue_recomputed_at_read_time(self):
        entries = [_entry("o1", 100, 2, seq=1)]
        assert summarize_ledger(entries, NOW).overdue_count == 0
        assert summarize_ledger(entries, NOW + timedelta(days=3)).overdue_count == 1


class TestDueStatus:
    def test_days_until_due_rounds_up(self):
        assert days_until_due(NOW + timedelta(hours=1), NOW) == 1
        assert days_until_due(NOW + timedelta(days=2), NOW) == 2
        assert days_until_due(NOW - timedelta(days=2), NOW) == -2

    def test_overdue_label(self):
        status = due_status(NOW - timedelta(days=4), NOW)
        assert status.label == "4 days overdue"
        assert status.is_overdue and status.is_urgent

    def test_due_today(self):
        status = due_status(NOW, NOW)
        assert status.label == "Due today"
        assert status.is_urgent and not status.is_overdue

    @pytest.mark.parametrize("days,urgent", [(1, True), (3, True), (4, False), (30, False)])
    def test_urgent_window(self, days, urgent):
        status = due_status(NOW + timedelta(days=days), NOW)
        assert status.label == f"Due in {days} days"
        assert status.is_urgent is urgent


class TestDeriveLedgerEntries:
    def test_due_date_from_net_terms(self):
        orders = [
            OrderSnapshot("o1", "cust-1", Decimal("100"), NOW),
            OrderSnapshot(
                "o2", "cust-1", Decimal("50"), NOW,
                credit_due_date=NOW + timedelta(days=7),
            ),
        ]
        entries = derive_ledger_entries(orders, "net_30")
        assert entries[0].credit_due_date == NOW + timedelta(days=30)
        assert entries[1].credit_due_date == NOW + timedelta(days=7)
        assert [e.sequence for e in entries] == [1, 2]


class TestNotices:
    def test_overdue_notices_oldest_first(self):
        entries = [
            _entry("o1", 100, -1, seq=1),
            _entry("o2", 200, -10, seq=2),
            _entry("o3", 300, 5, seq=3),
        ]
        notices = overdue_notices(entries, NOW)
        assert [n.order_id for n in notices] == ["o2", "o1"]
        assert notices[0].kind == NOTICE_OVERDUE
        assert notices[0].days_overdue == 10
        assert notices[0].amount == Decimal("200")

    def test_suspension_and_reactivation_notices(self):
        suspended = CreditTerms(
            customer_id="cust-1", credit_limit=5000, current_balance=1200,
            status="suspended", suspended_reason="late payments", suspended_at=NOW,
        )
        notice = suspension_notice(suspended, NOW)
        assert notice.kind == NOTICE_SUSPENDED
        assert notice.reason == "late payments"
        assert notice.amount == Decimal("1200")

        active = CreditTerms(customer_id="cust-1", credit_limit=5000, current_balance=1200)
        notice = reactivation_notice(active, NOW)
        assert notice.kind == NOTICE_REACTIVATED
        assert notice.amount == Decimal("3800")
        assert notice.to_dict()["amount"] == "3800.00"

    def test_notices_carry_currency(self):
        entries = [_entry("o1", 1500, -2, seq=1)]
        notice = overdue_notices(entries, NOW, "GHS")[0]
        assert notice.currency == "GHS"
        assert notice.to_dict()["formatted_amount"] == "GHS 1,500.00"

        active = CreditTerms(customer_id="cust-1", credit_limit=5000, current_balance=0)
        notice = reactivation_notice(active, NOW)
        assert notice.currency == "USD"
        assert notice.to_dict()["currency"] == "USD"
