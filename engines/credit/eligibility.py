"""
Creditline Credit Engine — Eligibility Evaluator
=================================================
Pure qualification check for new credit terms.

Eligibility is a fact about the customer: it never reads the
feature gate and never mutates state. The mutation service applies
the kill switch separately before acting on the result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Protocol, Tuple

from core.config import DEFAULT_CONFIG, CreditEngineConfig
from engines.credit.calculations import ZERO, to_money

TIER_BRONZE = "bronze"
TIER_SILVER = "silver"
TIER_GOLD = "gold"

TRUST_TIER_NEW = "new"

MISSING_TIER = "need silver tier or above"
MISSING_NO_OVERDUE = "has overdue invoices"


def missing_orders_message(min_orders: int) -> str:
    return f"need {min_orders}+ orders"


@dataclass(frozen=True)
class CustomerHistory:
    """Standing signals supplied by the customer history provider."""
    customer_id: str
    lifetime_orders: int = 0
    loyalty_tier: str = TIER_BRONZE
    trust_tier: str = TRUST_TIER_NEW
    has_overdue_invoices: bool = False
    has_overdue_credit: bool = False

    def __post_init__(self):
        if not self.customer_id:
            raise ValueError("customer_id must be non-empty.")
        if self.lifetime_orders < 0:
            raise ValueError("lifetime_orders must be >= 0.")
        if not self.loyalty_tier:
            raise ValueError("loyalty_tier must be non-empty.")


@dataclass(frozen=True)
class EligibilityResult:
    """
    eligible and missing_requirements are the decision. The remaining
    fields are informational, including available_credit on any
    existing line.
    """
    eligible: bool
    missing_requirements: Tuple[str, ...] = field(default_factory=tuple)
    lifetime_orders: int = 0
    loyalty_tier: str = TIER_BRONZE
    trust_tier: str = TRUST_TIER_NEW
    has_overdue_invoices: bool = False
    has_overdue_credit: bool = False
    available_credit: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "eligible": self.eligible,
            "missing_requirements": list(self.missing_requirements),
            "lifetime_orders": self.lifetime_orders,
            "loyalty_tier": self.loyalty_tier,
            "trust_tier": self.trust_tier,
            "has_overdue_invoices": self.has_overdue_invoices,
            "has_overdue_credit": self.has_overdue_credit,
            "available_credit": str(self.available_credit),
        }


def evaluate_eligibility(
    history: CustomerHistory,
    config: Optional[CreditEngineConfig] = None,
    current_available_credit: Any = ZERO,
) -> EligibilityResult:
    """
    All rules must hold for eligible=True. Each failing rule appends
    one reason, in rule order.
    """
    cfg = config or DEFAULT_CONFIG
    missing = []

    if history.lifetime_orders < cfg.min_lifetime_orders:
        missing.append(missing_orders_message(cfg.min_lifetime_orders))
    if not cfg.is_tier_eligible(history.loyalty_tier):
        missing.append(MISSING_TIER)
    if history.has_overdue_invoices:
        missing.append(MISSING_NO_OVERDUE)

    return EligibilityResult(
        eligible=not missing,
        missing_requirements=tuple(missing),
        lifetime_orders=history.lifetime_orders,
        loyalty_tier=history.loyalty_tier.lower(),
        trust_tier=history.trust_tier,
        has_overdue_invoices=history.has_overdue_invoices,
        has_overdue_credit=history.has_overdue_credit,
        available_credit=to_money(current_available_credit, "available_credit"),
    )


# ── History Providers ─────────────────────────────────────────

class CustomerHistoryProvider(Protocol):
    def get_history(self, customer_id: str) -> Optional[CustomerHistory]:
        ...


class InMemoryCustomerHistoryProvider:
    def __init__(self, histories: Iterable[CustomerHistory] = ()) -> None:
        self._histories: Dict[str, CustomerHistory] = {
            h.customer_id: h for h in histories
        }

    def set_history(self, history: CustomerHistory) -> None:
        self._histories[history.customer_id] = history

    def get_history(self, customer_id: str) -> Optional[CustomerHistory]:
        return self._histories.get(customer_id)


def history_or_default(
    provider: Optional[CustomerHistoryProvider],
    customer_id: str,
) -> CustomerHistory:
    """Missing history counts as zero orders at bronze tier."""
    history = provider.get_history(customer_id) if provider is not None else None
    if history is None:
        return CustomerHistory(customer_id=customer_id)
    return history
