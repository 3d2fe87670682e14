"""
Creditline Credit Engine — Notice Data
=======================================
Payloads for the external notification collaborator. The engine
builds them; it never sends messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from core.config import DEFAULT_CONFIG
from engines.credit.calculations import format_credit_amount
from engines.credit.ledger import LedgerEntry, days_until_due

NOTICE_SUSPENDED = "credit_suspended"
NOTICE_REACTIVATED = "credit_reactivated"
NOTICE_OVERDUE = "credit_overdue"


@dataclass(frozen=True)
class CreditNotice:
    kind: str
    customer_id: str
    occurred_at: datetime
    reason: Optional[str] = None
    amount: Optional[Decimal] = None
    due_date: Optional[datetime] = None
    order_id: Optional[str] = None
    days_overdue: Optional[int] = None
    currency: str = DEFAULT_CONFIG.default_currency

    @property
    def formatted_amount(self) -> Optional[str]:
        if self.amount is None:
            return None
        return format_credit_amount(self.amount, self.currency)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "customer_id": self.customer_id,
            "occurred_at": self.occurred_at.isoformat(),
            "reason": self.reason,
            "amount": str(self.amount) if self.amount is not None else None,
            "currency": self.currency,
            "formatted_amount": self.formatted_amount,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "order_id": self.order_id,
            "days_overdue": self.days_overdue,
        }


def suspension_notice(
    terms, occurred_at: datetime, currency: Optional[str] = None
) -> CreditNotice:
    return CreditNotice(
        kind=NOTICE_SUSPENDED,
        customer_id=terms.customer_id,
        occurred_at=occurred_at,
        reason=terms.suspended_reason,
        amount=terms.current_balance,
        currency=currency or DEFAULT_CONFIG.default_currency,
    )


def reactivation_notice(
    terms, occurred_at: datetime, currency: Optional[str] = None
) -> CreditNotice:
    return CreditNotice(
        kind=NOTICE_REACTIVATED,
        customer_id=terms.customer_id,
        occurred_at=occurred_at,
        amount=terms.available_credit,
        currency=currency or DEFAULT_CONFIG.default_currency,
    )


def overdue_notices(
    entries: Iterable[LedgerEntry],
    now: datetime,
    currency: Optional[str] = None,
) -> Tuple[CreditNotice, ...]:
    """One notice per overdue, unsettled entry, oldest due date first."""
    overdue = sorted(
        (e for e in entries if e.is_overdue(now)),
        key=lambda e: (e.credit_due_date, e.sequence),
    )
    return tuple(
        CreditNotice(
            kind=NOTICE_OVERDUE,
            customer_id=e.customer_id,
            occurred_at=now,
            amount=e.outstanding_amount,
            due_date=e.credit_due_date,
            order_id=e.order_id,
            days_overdue=abs(days_until_due(e.credit_due_date, now)),
            currency=currency or DEFAULT_CONFIG.default_currency,
        )
        for e in overdue
    )
