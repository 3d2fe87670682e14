"""
Creditline Benefits Engine — Benefit Store
===========================================
One row per (customer, benefit type). Rows are independent: writing
one benefit never touches another. Last writer wins.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Protocol, Tuple

from engines.benefits.events import ALL_BENEFIT_TYPES, VALID_BENEFIT_TYPES


@dataclass(frozen=True)
class CustomerBenefit:
    """
    enabled is the only source of truth. The timestamps are audit
    trail and are never compared to infer state.
    """

    customer_id: str
    benefit_type: str
    enabled: bool = False
    enabled_at: Optional[datetime] = None
    enabled_by: Optional[str] = None
    disabled_at: Optional[datetime] = None
    disabled_by: Optional[str] = None
    disabled_reason: Optional[str] = None

    def __post_init__(self):
        if not self.customer_id:
            raise ValueError("customer_id must be non-empty.")
        if self.benefit_type not in VALID_BENEFIT_TYPES:
            raise ValueError(f"Invalid benefit_type: {self.benefit_type}")

    def to_dict(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "benefit_type": self.benefit_type,
            "enabled": self.enabled,
            "enabled_at": self.enabled_at.isoformat() if self.enabled_at else None,
            "enabled_by": self.enabled_by,
            "disabled_at": self.disabled_at.isoformat() if self.disabled_at else None,
            "disabled_by": self.disabled_by,
            "disabled_reason": self.disabled_reason,
        }


def _ordered(benefits) -> Tuple[CustomerBenefit, ...]:
    return tuple(sorted(benefits, key=lambda b: ALL_BENEFIT_TYPES.index(b.benefit_type)))


class BenefitStore(Protocol):
    def get(self, customer_id: str, benefit_type: str) -> Optional[CustomerBenefit]:
        ...

    def list_for_customer(self, customer_id: str) -> Tuple[CustomerBenefit, ...]:
        ...

    def save(self, benefit: CustomerBenefit) -> None:
        ...


class InMemoryBenefitStore:
    def __init__(self, benefits=()) -> None:
        self._lock = threading.Lock()
        self._rows: Dict[Tuple[str, str], CustomerBenefit] = {
            (b.customer_id, b.benefit_type): b for b in benefits
        }

    def get(self, customer_id: str, benefit_type: str) -> Optional[CustomerBenefit]:
        return self._rows.get((customer_id, benefit_type))

    def list_for_customer(self, customer_id: str) -> Tuple[CustomerBenefit, ...]:
        with self._lock:
            rows = [b for (cid, _), b in self._rows.items() if cid == customer_id]
        return _ordered(rows)

    def save(self, benefit: CustomerBenefit) -> None:
        with self._lock:
            self._rows[(benefit.customer_id, benefit.benefit_type)] = benefit


class DbBenefitStore:
    @staticmethod
    def _to_benefit(row) -> CustomerBenefit:
        return CustomerBenefit(
            customer_id=row.customer_id,
            benefit_type=row.benefit_type,
            enabled=row.enabled,
            enabled_at=row.enabled_at,
            enabled_by=row.enabled_by,
            disabled_at=row.disabled_at,
            disabled_by=row.disabled_by,
            disabled_reason=row.disabled_reason,
        )

    def get(self, customer_id: str, benefit_type: str) -> Optional[CustomerBenefit]:
        from core.credit_store.models import CustomerBenefitRow

        row = CustomerBenefitRow.objects.filter(
            customer_id=customer_id, benefit_type=benefit_type
        ).first()
        return self._to_benefit(row) if row is not None else None

    def list_for_customer(self, customer_id: str) -> Tuple[CustomerBenefit, ...]:
        from core.credit_store.models import CustomerBenefitRow

        rows = CustomerBenefitRow.objects.filter(
            customer_id=customer_id, benefit_type__in=ALL_BENEFIT_TYPES
        )
        return _ordered(self._to_benefit(row) for row in rows)

    def save(self, benefit: CustomerBenefit) -> None:
        from core.credit_store.models import CustomerBenefitRow

        CustomerBenefitRow.objects.update_or_create(
            customer_id=benefit.customer_id,
            benefit_type=benefit.benefit_type,
            defaults={
                "enabled": benefit.enabled,
                "enabled_at": benefit.enabled_at,
                "enabled_by": benefit.enabled_by,
                "disabled_at": benefit.disabled_at,
                "disabled_by": benefit.disabled_by,
                "disabled_reason": benefit.disabled_reason,
            },
        )
