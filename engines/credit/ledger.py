"""
Creditline Credit Engine — Ledger
==================================
Per-order credit usage and read-time aggregates.

Overdue status is computed at read time from the injected clock,
never stored. A due date is fixed when credit is applied and is not
recalculated if the customer's net terms later change.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from core.config import DEFAULT_CONFIG, CreditEngineConfig
from engines.credit.calculations import ZERO, calculate_due_date, to_money
from engines.credit.events import (
    PAYMENT_FULLY_PAID,
    PAYMENT_OVERPAID,
    PAYMENT_PARTIALLY_PAID,
    PAYMENT_PENDING,
    SETTLED_PAYMENT_STATUSES,
    VALID_PAYMENT_STATUSES,
)

SECONDS_PER_DAY = 86400


def payment_status_for(amount_used: Decimal, amount_paid: Decimal) -> str:
    if amount_paid <= ZERO:
        return PAYMENT_PENDING
    if amount_paid < amount_used:
        return PAYMENT_PARTIALLY_PAID
    if amount_paid == amount_used:
        return PAYMENT_FULLY_PAID
    return PAYMENT_OVERPAID


# ══════════════════════════════════════════════════════════════
# LEDGER ENTRY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerEntry:
    """One order's credit usage."""

    order_id: str
    customer_id: str
    credit_amount_used: Decimal
    credit_due_date: datetime
    payment_status: str = PAYMENT_PENDING
    amount_paid: Decimal = ZERO
    created_at: Optional[datetime] = None
    sequence: int = 0

    def __post_init__(self):
        if not self.order_id:
            raise ValueError("order_id must be non-empty.")
        if not self.customer_id:
            raise ValueError("customer_id must be non-empty.")
        used = to_money(self.credit_amount_used, "credit_amount_used")
        paid = to_money(self.amount_paid, "amount_paid")
        if used < 0:
            raise ValueError("credit_amount_used must be >= 0.")
        if paid < 0:
            raise ValueError("amount_paid must be >= 0.")
        object.__setattr__(self, "credit_amount_used", used)
        object.__setattr__(self, "amount_paid", paid)
        if self.payment_status not in VALID_PAYMENT_STATUSES:
            raise ValueError(f"Invalid payment_status: {self.payment_status}")
        if not isinstance(self.credit_due_date, datetime):
            raise ValueError("credit_due_date must be a datetime.")

    @property
    def is_settled(self) -> bool:
        return self.payment_status in SETTLED_PAYMENT_STATUSES

    @property
    def outstanding_amount(self) -> Decimal:
        if self.is_settled:
            return ZERO
        return max(ZERO, self.credit_amount_used - self.amount_paid)

    def is_overdue(self, now: datetime) -> bool:
        return now > self.credit_due_date and not self.is_settled

    def with_payment(self, amount: Decimal) -> "LedgerEntry":
        paid = self.amount_paid + to_money(amount)
        return replace(
            self,
            amount_paid=paid,
            payment_status=payment_status_for(self.credit_amount_used, paid),
        )

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "customer_id": self.customer_id,
            "credit_amount_used": str(self.credit_amount_used),
            "amount_paid": str(self.amount_paid),
            "credit_due_date": self.credit_due_date.isoformat(),
            "payment_status": self.payment_status,
            "sequence": self.sequence,
        }


# ══════════════════════════════════════════════════════════════
# ORDER SNAPSHOT (read from the external order provider)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class OrderSnapshot:
    order_id: str
    customer_id: str
    total_amount: Decimal
    created_at: datetime
    payment_status: str = PAYMENT_PENDING
    credit_due_date: Optional[datetime] = None
    amount_paid: Decimal = ZERO

    def __post_init__(self):
        if not self.order_id:
            raise ValueError("order_id must be non-empty.")
        object.__setattr__(
            self, "total_amount", to_money(self.total_amount, "total_amount")
        )
        object.__setattr__(
            self, "amount_paid", to_money(self.amount_paid, "amount_paid")
        )
        if self.payment_status not in VALID_PAYMENT_STATUSES:
            raise ValueError(f"Invalid payment_status: {self.payment_status}")


def derive_ledger_entries(
    orders: Iterable[OrderSnapshot],
    net_terms: str,
) -> Tuple[LedgerEntry, ...]:
    """
    Build ledger entries from order snapshots.

    An order that already carries a credit_due_date keeps it; otherwise
    the due date is its creation date plus the net terms.
    """
    entries = []
    for sequence, order in enumerate(orders, start=1):
        due = order.credit_due_date or calculate_due_date(order.created_at, net_terms)
        entries.append(LedgerEntry(
            order_id=order.order_id,
            customer_id=order.customer_id,
            credit_amount_used=order.total_amount,
            credit_due_date=due,
            payment_status=order.payment_status,
            amount_paid=order.amount_paid,
            created_at=order.created_at,
            sequence=sequence,
        ))
    return tuple(entries)


# ══════════════════════════════════════════════════════════════
# SUMMARY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerSummary:
    """
    total_outstanding and overdue_amount add up the credit used on each
    unsettled order, partial payments included. net_outstanding is the
    same set net of payments received so far.
    """
    total_outstanding: Decimal
    overdue_amount: Decimal
    overdue_count: int
    next_due: Optional[LedgerEntry]
    entry_count: int
    net_outstanding: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "total_outstanding": str(self.total_outstanding),
            "net_outstanding": str(self.net_outstanding),
            "overdue_amount": str(self.overdue_amount),
            "overdue_count": self.overdue_count,
            "next_due": self.next_due.to_dict() if self.next_due else None,
            "entry_count": self.entry_count,
        }


def summarize_ledger(entries: Iterable[LedgerEntry], now: datetime) -> LedgerSummary:
    rows = list(entries)
    total = ZERO
    net = ZERO
    overdue_amount = ZERO
    overdue_count = 0
    upcoming = []

    for index, entry in enumerate(rows):
        if entry.is_settled:
            continue
        total += entry.credit_amount_used
        net += entry.outstanding_amount
        if entry.is_overdue(now):
            overdue_amount += entry.credit_amount_used
            overdue_count += 1
        else:
            upcoming.append((entry.credit_due_date, entry.sequence, index, entry))

    next_due = min(upcoming, key=lambda item: item[:3])[3] if upcoming else None
    return LedgerSummary(
        total_outstanding=total,
        overdue_amount=overdue_amount,
        overdue_count=overdue_count,
        next_due=next_due,
        entry_count=len(rows),
        net_outstanding=net,
    )


# ── Due Status ────────────────────────────────────────────────

def days_until_due(due_date: datetime, now: datetime) -> int:
    """Whole days until due, rounded up. Negative when overdue."""
    return math.ceil((due_date - now).total_seconds() / SECONDS_PER_DAY)


@dataclass(frozen=True)
class DueStatus:
    label: str
    days: int
    is_overdue: bool
    is_urgent: bool


def due_status(
    due_date: datetime,
    now: datetime,
    config: Optional[CreditEngineConfig] = None,
) -> DueStatus:
    cfg = config or DEFAULT_CONFIG
    days = days_until_due(due_date, now)
    if days < 0:
        return DueStatus(f"{abs(days)} days overdue", days, True, True)
    if days == 0:
        return DueStatus("Due today", days, False, True)
    return DueStatus(
        f"Due in {days} days", days, False, days <= cfg.due_soon_days
    )
