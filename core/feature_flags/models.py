"""
Creditline Feature Flags - Immutable Models
===========================================
A FeatureFlag row exists only once a key has been toggled. The enabled
boolean is authoritative; disabled_* fields are audit metadata and are
present only while the flag is disabled.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.feature_flags.registry import VALID_FEATURE_KEYS


@dataclass(frozen=True)
class FeatureFlag:
    feature_key: str
    enabled: bool = True
    disabled_by: Optional[str] = None
    disabled_at: Optional[datetime] = None
    disabled_reason: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.feature_key not in VALID_FEATURE_KEYS:
            raise ValueError(
                f"feature_key '{self.feature_key}' not valid. "
                f"Must be one of: {sorted(VALID_FEATURE_KEYS)}"
            )

        if not isinstance(self.enabled, bool):
            raise ValueError("enabled must be a bool.")

        if self.enabled:
            if (
                self.disabled_by is not None
                or self.disabled_at is not None
                or self.disabled_reason is not None
            ):
                raise ValueError(
                    "Enabled flag must not carry disabled_by/at/reason."
                )
        else:
            if self.disabled_reason is None:
                raise ValueError(
                    "Disabled flag must record disabled_reason (may be empty)."
                )

    def to_dict(self) -> dict:
        return {
            "feature_key": self.feature_key,
            "enabled": self.enabled,
            "disabled_by": self.disabled_by,
            "disabled_at": (
                self.disabled_at.isoformat() if self.disabled_at else None
            ),
            "disabled_reason": self.disabled_reason,
        }
