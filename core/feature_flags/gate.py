"""
Creditline Feature Flags - Feature Gate
=======================================
Process-wide kill switches, injected into every consumer.

Contract:
- is_enabled(key) is True when no record exists for key (fail-open
  for keys that were never toggled) or the record is enabled.
- is_enabled(key) is False only for an explicit disabled record.
- set_enabled() is the only writer. It requires a super-privileged
  actor and emits one high-severity AuditFact per toggle.
- Toggling a kill switch is never itself gated by another switch.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.audit import AuditEmitter, SEVERITY_HIGH, create_audit_fact
from core.commands import CommandOutcome, ReasonCode, RejectionReason
from core.feature_flags.models import FeatureFlag
from core.feature_flags.provider import (
    FeatureFlagProvider,
    InMemoryFeatureFlagProvider,
)
from core.feature_flags.registry import VALID_FEATURE_KEYS, feature_label
from core.permissions import Actor, require_super_privileged
from core.time import Clock, SystemClock

logger = logging.getLogger("creditline.flags")

FEATURE_FLAG_CHANGED = "feature_flag_changed"
OPERATION_SET_FLAG = "feature_flag.set"


class FeatureGate:
    def __init__(
        self,
        provider: FeatureFlagProvider | None = None,
        *,
        audit: AuditEmitter | None = None,
        clock: Clock | None = None,
    ):
        self._provider = provider if provider is not None else InMemoryFeatureFlagProvider()
        self._audit = audit if audit is not None else AuditEmitter()
        self._clock = clock if clock is not None else SystemClock()

    # ── Reads ─────────────────────────────────────────────────

    def is_enabled(self, feature_key: str) -> bool:
        flag = self._provider.get_flag(feature_key)
        if flag is None:
            return True
        return flag.enabled

    def get_flag(self, feature_key: str) -> Optional[FeatureFlag]:
        return self._provider.get_flag(feature_key)

    def check(self, feature_key: str) -> Optional[RejectionReason]:
        """Return FEATURE_DISABLED when the kill switch is explicitly off."""
        if self.is_enabled(feature_key):
            return None
        flag = self._provider.get_flag(feature_key)
        reason = flag.disabled_reason if flag is not None else ""
        return RejectionReason(
            code=ReasonCode.FEATURE_DISABLED,
            message=(
                f"{feature_label(feature_key)} is disabled "
                f"(kill switch '{feature_key}')."
            ),
            policy_name="feature_gate",
            details={"feature_key": feature_key, "disabled_reason": reason},
        )

    def snapshot(self) -> dict[str, bool]:
        """Effective state of every known key."""
        return {key: self.is_enabled(key) for key in sorted(VALID_FEATURE_KEYS)}

    # ── Writes ────────────────────────────────────────────────

    def set_enabled(
        self,
        feature_key: str,
        enabled: bool,
        actor: Actor,
        reason: Optional[str] = None,
    ) -> CommandOutcome:
        now = self._clock.now_utc()

        denied = require_super_privileged(actor)
        if denied is not None:
            logger.debug(f"Flag toggle rejected: {denied.code} for {feature_key}")
            return CommandOutcome.rejected(OPERATION_SET_FLAG, now, denied)

        if enabled:
            flag = FeatureFlag(
                feature_key=feature_key,
                enabled=True,
                updated_by=actor.actor_id,
                updated_at=now,
            )
        else:
            flag = FeatureFlag(
                feature_key=feature_key,
                enabled=False,
                disabled_by=actor.actor_id,
                disabled_at=now,
                disabled_reason=reason if reason is not None else "",
                updated_by=actor.actor_id,
                updated_at=now,
            )

        self._provider.save_flag(flag)
        logger.info(
            f"Kill switch {feature_key} {'enabled' if enabled else 'disabled'} "
            f"by {actor.actor_id}"
        )

        self._audit.emit(create_audit_fact(
            actor_id=actor.actor_id,
            event_type=FEATURE_FLAG_CHANGED,
            resource_type="system_feature_flags",
            resource_id=feature_key,
            action="enable" if enabled else "disable",
            occurred_at=now,
            severity=SEVERITY_HIGH,
            event_data={
                "feature_key": feature_key,
                "enabled": enabled,
                "reason": reason,
                "changed_by": actor.actor_id,
            },
        ))
        return CommandOutcome.accepted(OPERATION_SET_FLAG, now, flag)
