"""
Creditline Feature Flags - Provider Protocol and In-Memory Provider
===================================================================
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from core.feature_flags.models import FeatureFlag


class FeatureFlagProvider(Protocol):
    def get_flag(self, feature_key: str) -> Optional[FeatureFlag]:
        ...

    def save_flag(self, flag: FeatureFlag) -> None:
        ...

    def all_flags(self) -> tuple[FeatureFlag, ...]:
        ...


class InMemoryFeatureFlagProvider:
    """
    Deterministic in-memory provider used by tests/bootstrap.
    Last writer wins.
    """

    def __init__(self, flags: Iterable[FeatureFlag] | None = None):
        self._flags: dict[str, FeatureFlag] = {}
        for flag in flags or ():
            if flag.feature_key in self._flags:
                raise ValueError(
                    f"Duplicate feature flag '{flag.feature_key}'."
                )
            self._flags[flag.feature_key] = flag

    def get_flag(self, feature_key: str) -> Optional[FeatureFlag]:
        return self._flags.get(feature_key)

    def save_flag(self, flag: FeatureFlag) -> None:
        self._flags[flag.feature_key] = flag

    def all_flags(self) -> tuple[FeatureFlag, ...]:
        return tuple(
            self._flags[key] for key in sorted(self._flags)
        )
