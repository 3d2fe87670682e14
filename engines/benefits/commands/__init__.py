"""
Creditline Benefits Engine — Commands
======================================
"""

from __future__ import annotations

from dataclasses import dataclass

from engines.benefits.events import VALID_BENEFIT_TYPES


def _validate(customer_id: str, benefit_type: str) -> None:
    if not customer_id or not isinstance(customer_id, str):
        raise ValueError("customer_id must be a non-empty string.")
    if benefit_type not in VALID_BENEFIT_TYPES:
        raise ValueError(f"Invalid benefit_type: {benefit_type}")


@dataclass(frozen=True)
class EnableBenefitRequest:
    customer_id: str
    benefit_type: str

    def __post_init__(self):
        _validate(self.customer_id, self.benefit_type)


@dataclass(frozen=True)
class DisableBenefitRequest:
    """reason is required but may be empty."""
    customer_id: str
    benefit_type: str
    reason: str

    def __post_init__(self):
        _validate(self.customer_id, self.benefit_type)
        if not isinstance(self.reason, str):
            raise ValueError("reason must be a string.")
