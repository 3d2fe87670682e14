"""
Creditline Feature Flags - DB-backed Provider
=============================================
Resolves kill switches from the system feature flag table.
A missing row means the key was never toggled (fail-open).
"""

from __future__ import annotations

from typing import Optional

from core.feature_flags.models import FeatureFlag
from core.feature_flags.registry import VALID_FEATURE_KEYS


class DbFeatureFlagProvider:
    @staticmethod
    def _to_flag(row) -> FeatureFlag:
        if row.enabled:
            return FeatureFlag(
                feature_key=row.feature_key,
                enabled=True,
                updated_by=row.updated_by,
                updated_at=row.updated_at,
            )
        return FeatureFlag(
            feature_key=row.feature_key,
            enabled=False,
            disabled_by=row.disabled_by,
            disabled_at=row.disabled_at,
            disabled_reason=row.disabled_reason or "",
            updated_by=row.updated_by,
            updated_at=row.updated_at,
        )

    def get_flag(self, feature_key: str) -> Optional[FeatureFlag]:
        if feature_key not in VALID_FEATURE_KEYS:
            return None

        from core.credit_store.models import SystemFeatureFlag

        row = SystemFeatureFlag.objects.filter(feature_key=feature_key).first()
        if row is None:
            return None
        return self._to_flag(row)

    def save_flag(self, flag: FeatureFlag) -> None:
        from core.credit_store.models import SystemFeatureFlag

        SystemFeatureFlag.objects.update_or_create(
            feature_key=flag.feature_key,
            defaults={
                "enabled": flag.enabled,
                "disabled_by": flag.disabled_by,
                "disabled_at": flag.disabled_at,
                "disabled_reason": flag.disabled_reason,
                "updated_by": flag.updated_by,
                "updated_at": flag.updated_at,
            },
        )

    def all_flags(self) -> tuple[FeatureFlag, ...]:
        from core.credit_store.models import SystemFeatureFlag

        rows = SystemFeatureFlag.objects.filter(
            feature_key__in=sorted(VALID_FEATURE_KEYS)
        ).order_by("feature_key")
        return tuple(self._to_flag(row) for row in rows)
