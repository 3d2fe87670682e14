"""
Creditline Core Config — Engine Rules
=======================================
Doctrine: No hardcoded thresholds in engine logic.
Eligibility thresholds, utilization bands and the SLA multiplier
come from configuration data, not from source code.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Mapping, Optional, Tuple


# ══════════════════════════════════════════════════════════════
# CREDIT ENGINE CONFIG
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CreditEngineConfig:
    """
    Tunable rules for the credit and benefit engines.

    Defaults reproduce the production rules: two lifetime orders,
    silver tier or above, a 0.75 SLA multiplier, warning at 75% and
    critical at 90% utilization.
    """

    min_lifetime_orders: int = 2
    ineligible_loyalty_tiers: Tuple[str, ...] = ("bronze",)
    faster_sla_multiplier: Decimal = Decimal("0.75")
    due_soon_days: int = 3
    utilization_warning_percent: int = 75
    utilization_critical_percent: int = 90
    default_currency: str = "USD"

    def __post_init__(self) -> None:
        if self.min_lifetime_orders < 0:
            raise ValueError("min_lifetime_orders must be >= 0.")
        tiers = tuple(str(t).lower() for t in self.ineligible_loyalty_tiers)
        object.__setattr__(self, "ineligible_loyalty_tiers", tiers)

        multiplier = Decimal(str(self.faster_sla_multiplier))
        if not Decimal("0") < multiplier <= Decimal("1"):
            raise ValueError(
                f"faster_sla_multiplier must be in (0, 1], got {multiplier}."
            )
        object.__setattr__(self, "faster_sla_multiplier", multiplier)

        if self.due_soon_days < 0:
            raise ValueError("due_soon_days must be >= 0.")
        if not (
            0 <= self.utilization_warning_percent
            <= self.utilization_critical_percent <= 100
        ):
            raise ValueError(
                "utilization thresholds must satisfy "
                "0 <= warning <= critical <= 100."
            )
        if not self.default_currency or len(self.default_currency) != 3:
            raise ValueError("default_currency must be a 3-letter code.")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "CreditEngineConfig":
        """Build from a settings dict. Unknown keys are rejected."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown credit engine settings: {unknown}")
        values = dict(data)
        if "ineligible_loyalty_tiers" in values:
            values["ineligible_loyalty_tiers"] = tuple(
                values["ineligible_loyalty_tiers"]
            )
        return cls(**values)

    def is_tier_eligible(self, loyalty_tier: Optional[str]) -> bool:
        if loyalty_tier is None:
            return False
        return loyalty_tier.lower() not in self.ineligible_loyalty_tiers


DEFAULT_CONFIG = CreditEngineConfig()


def load_engine_config() -> CreditEngineConfig:
    """Read CREDITLINE_ENGINE from Django settings, falling back to defaults."""
    from django.conf import settings

    if not settings.configured:
        return DEFAULT_CONFIG
    return CreditEngineConfig.from_mapping(
        getattr(settings, "CREDITLINE_ENGINE", None)
    )
