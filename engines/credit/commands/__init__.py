"""
Creditline Credit Engine — Commands
====================================
Typed requests for credit terms mutations. Malformed requests fail
at construction with ValueError; business rule failures are returned
as rejected outcomes by the service.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from engines.credit.calculations import to_money
from engines.credit.events import DEFAULT_NET_TERMS, VALID_NET_TERMS


def _require_id(value, field_name: str) -> None:
    if not value or not isinstance(value, str):
        raise ValueError(f"{field_name} must be a non-empty string.")


def _require_aware(value: Optional[datetime], field_name: str) -> None:
    if value is None:
        return
    if not isinstance(value, datetime) or value.tzinfo is None:
        raise ValueError(f"{field_name} must be a timezone-aware datetime.")


@dataclass(frozen=True)
class ApproveCreditTermsRequest:
    """Grant credit terms to a customer (first approval or re-approval)."""
    customer_id: str
    credit_limit: Decimal
    net_terms: str = DEFAULT_NET_TERMS
    override_eligibility: bool = False

    def __post_init__(self):
        _require_id(self.customer_id, "customer_id")
        limit = to_money(self.credit_limit, "credit_limit")
        if limit < 0:
            raise ValueError("credit_limit must be >= 0.")
        object.__setattr__(self, "credit_limit", limit)
        if self.net_terms not in VALID_NET_TERMS:
            raise ValueError(f"Invalid net_terms: {self.net_terms}")


@dataclass(frozen=True)
class AdjustCreditLimitRequest:
    customer_id: str
    new_limit: Decimal
    reason: Optional[str] = None

    def __post_init__(self):
        _require_id(self.customer_id, "customer_id")
        limit = to_money(self.new_limit, "new_limit")
        if limit < 0:
            raise ValueError("new_limit must be >= 0.")
        object.__setattr__(self, "new_limit", limit)


@dataclass(frozen=True)
class SuspendCreditTermsRequest:
    """Suspend credit usage. reason is required but may be empty."""
    customer_id: str
    reason: str

    def __post_init__(self):
        _require_id(self.customer_id, "customer_id")
        if not isinstance(self.reason, str):
            raise ValueError("reason must be a string.")


@dataclass(frozen=True)
class ReactivateCreditTermsRequest:
    customer_id: str

    def __post_init__(self):
        _require_id(self.customer_id, "customer_id")


@dataclass(frozen=True)
class DeactivateCreditTermsRequest:
    customer_id: str
    reason: Optional[str] = None

    def __post_init__(self):
        _require_id(self.customer_id, "customer_id")


@dataclass(frozen=True)
class ApplyCreditToOrderRequest:
    """Charge an order total against the customer's credit line."""
    order_id: str
    customer_id: str
    order_total: Decimal
    order_date: Optional[datetime] = None

    def __post_init__(self):
        _require_id(self.order_id, "order_id")
        _require_id(self.customer_id, "customer_id")
        total = to_money(self.order_total, "order_total")
        if total <= 0:
            raise ValueError("order_total must be > 0.")
        object.__setattr__(self, "order_total", total)
        _require_aware(self.order_date, "order_date")


@dataclass(frozen=True)
class SettleCreditOrderRequest:
    """Record a payment against an order that used credit."""
    order_id: str
    customer_id: str
    amount: Decimal

    def __post_init__(self):
        _require_id(self.order_id, "order_id")
        _require_id(self.customer_id, "customer_id")
        amount = to_money(self.amount, "amount")
        if amount <= 0:
            raise ValueError("amount must be > 0.")
        object.__setattr__(self, "amount", amount)
