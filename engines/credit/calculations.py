"""
Creditline Credit Engine — Pure Calculations
=============================================
Derived read-only helpers over a credit terms snapshot.

Readers never raise on a transient balance > limit artifact; they
clamp instead. None of these functions take a lock or need an actor.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, ROUND_UP, Decimal, InvalidOperation
from typing import Any, Optional

from core.config import DEFAULT_CONFIG, CreditEngineConfig
from engines.credit.events import (
    NET_TERMS_DAYS,
    STATUS_ACTIVE,
    UTILIZATION_CRITICAL,
    UTILIZATION_HEALTHY,
    UTILIZATION_WARNING,
)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any, field_name: str = "amount") -> Decimal:
    """Coerce int/str/Decimal to an exact, finite Decimal. Floats go through str()."""
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a number, got bool.")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"{field_name} must be a number, got {value!r}.")
    if not amount.is_finite():
        raise ValueError(f"{field_name} must be finite.")
    return amount


def to_money(value: Any, field_name: str = "amount") -> Decimal:
    """to_decimal() rounded half-up to cents."""
    return to_decimal(value, field_name).quantize(CENT, rounding=ROUND_HALF_UP)


def format_credit_amount(amount: Any, currency: Optional[str] = None) -> str:
    """'USD 1,234.50'. Currency defaults to the configured one."""
    code = currency or DEFAULT_CONFIG.default_currency
    return f"{code} {to_money(amount):,.2f}"


# ── Net Terms ─────────────────────────────────────────────────

def net_terms_days(net_terms: str) -> int:
    try:
        return NET_TERMS_DAYS[net_terms]
    except KeyError:
        raise ValueError(
            f"Unknown net terms '{net_terms}'. "
            f"Must be one of: {sorted(NET_TERMS_DAYS)}"
        ) from None


def net_terms_label(net_terms: str) -> str:
    return f"Net {net_terms_days(net_terms)}"


def net_terms_description(net_terms: str) -> str:
    return f"Payment due within {net_terms_days(net_terms)} days of invoice"


def calculate_due_date(order_date: datetime, net_terms: str) -> datetime:
    """Due date is fixed at the time credit is used."""
    return order_date + timedelta(days=net_terms_days(net_terms))


# ── Limit / Balance ───────────────────────────────────────────

def credit_utilization(current_balance: Any, credit_limit: Any) -> int:
    """
    Percentage of the limit currently outstanding.

    Half-up rounding, clamped to [0, 100]; 0 when the limit is not
    positive.
    """
    balance = Decimal(str(current_balance))
    limit = Decimal(str(credit_limit))
    if limit <= ZERO:
        return 0
    percent = (balance * 100 / limit).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(min(Decimal("100"), max(ZERO, percent)))


def available_credit(credit_limit: Any, current_balance: Any) -> Decimal:
    limit = to_money(credit_limit, "credit_limit")
    balance = to_money(current_balance, "current_balance")
    return max(ZERO, limit - balance).quantize(CENT)


def utilization_level(
    utilization: int,
    config: Optional[CreditEngineConfig] = None,
) -> str:
    cfg = config or DEFAULT_CONFIG
    if utilization >= cfg.utilization_critical_percent:
        return UTILIZATION_CRITICAL
    if utilization >= cfg.utilization_warning_percent:
        return UTILIZATION_WARNING
    return UTILIZATION_HEALTHY


# ── Usability ─────────────────────────────────────────────────

def is_credit_usable(terms) -> bool:
    """Active status and a positive limit. None is never usable."""
    if terms is None:
        return False
    return terms.status == STATUS_ACTIVE and Decimal(str(terms.credit_limit)) > ZERO


def can_cover_with_credit(terms, order_total: Any) -> bool:
    if not is_credit_usable(terms):
        return False
    amount = to_decimal(order_total, "order_total")
    return amount <= available_credit(terms.credit_limit, terms.current_balance)


def shortfall(terms, order_total: Any) -> Decimal:
    """
    How much the order exceeds the available credit (0 if covered).

    The total is compared unrounded; any excess rounds up to at least
    one cent.
    """
    amount = to_decimal(order_total, "order_total")
    available = available_credit(terms.credit_limit, terms.current_balance)
    return max(ZERO, amount - available).quantize(CENT, rounding=ROUND_UP)
