"""
Creditline Benefits Engine — Benefit Registry
==============================================
Per-customer entitlements consumed by scheduling logic elsewhere.

Unlike the global feature gate, absence of a row means the benefit
is OFF. The loyalty_benefits_global kill switch turns every benefit
off for reads and blocks enable/disable while it is disabled.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional, Tuple

from core.audit import AuditEmitter, SEVERITY_HIGH, create_audit_fact
from core.commands import CommandOutcome, RejectionReason
from core.config import DEFAULT_CONFIG, CreditEngineConfig
from core.feature_flags import FLAG_LOYALTY_BENEFITS_GLOBAL, FeatureGate
from core.permissions import Actor, require_super_privileged
from core.time import Clock, SystemClock
from engines.benefits.commands import DisableBenefitRequest, EnableBenefitRequest
from engines.benefits.events import (
    BENEFIT_DEDICATED_MANAGER,
    BENEFIT_DISABLED,
    BENEFIT_ENABLED,
    BENEFIT_FASTER_SLA,
    BENEFIT_PRIORITY_PROCESSING,
    OP_DISABLE,
    OP_ENABLE,
    RESOURCE_CUSTOMER_BENEFITS,
)
from engines.benefits.store import BenefitStore, CustomerBenefit

logger = logging.getLogger("creditline.benefits")

STANDARD_SLA_MULTIPLIER = Decimal("1.0")


class BenefitRegistry:
    def __init__(
        self,
        *,
        store: BenefitStore,
        feature_gate: FeatureGate,
        audit: Optional[AuditEmitter] = None,
        clock: Optional[Clock] = None,
        config: Optional[CreditEngineConfig] = None,
    ):
        self._store = store
        self._gate = feature_gate
        self._audit = audit if audit is not None else AuditEmitter()
        self._clock = clock if clock is not None else SystemClock()
        self._config = config or DEFAULT_CONFIG

    # ── Reads ─────────────────────────────────────────────────

    def has_benefit(self, customer_id: str, benefit_type: str) -> bool:
        if not self._gate.is_enabled(FLAG_LOYALTY_BENEFITS_GLOBAL):
            return False
        benefit = self._store.get(customer_id, benefit_type)
        return benefit is not None and benefit.enabled

    def enabled_benefits(self, customer_id: str) -> Tuple[str, ...]:
        if not self._gate.is_enabled(FLAG_LOYALTY_BENEFITS_GLOBAL):
            return ()
        return tuple(
            b.benefit_type
            for b in self._store.list_for_customer(customer_id)
            if b.enabled
        )

    def benefits(self, customer_id: str) -> Tuple[CustomerBenefit, ...]:
        """Raw rows, including disabled ones, for admin views."""
        return self._store.list_for_customer(customer_id)

    def has_priority_processing(self, customer_id: str) -> bool:
        return self.has_benefit(customer_id, BENEFIT_PRIORITY_PROCESSING)

    def has_dedicated_manager(self, customer_id: str) -> bool:
        return self.has_benefit(customer_id, BENEFIT_DEDICATED_MANAGER)

    def has_faster_sla(self, customer_id: str) -> bool:
        return self.has_benefit(customer_id, BENEFIT_FASTER_SLA)

    def sla_multiplier(self, customer_id: str) -> Decimal:
        if self.has_faster_sla(customer_id):
            return self._config.faster_sla_multiplier
        return STANDARD_SLA_MULTIPLIER

    # ── Writes ────────────────────────────────────────────────

    def _precheck(self, actor: Actor) -> Optional[RejectionReason]:
        return (
            require_super_privileged(actor)
            or self._gate.check(FLAG_LOYALTY_BENEFITS_GLOBAL)
        )

    def _emit(self, actor: Actor, event_type: str, benefit: CustomerBenefit,
              now, event_data: dict) -> None:
        self._audit.emit(create_audit_fact(
            actor_id=actor.actor_id,
            event_type=event_type,
            resource_type=RESOURCE_CUSTOMER_BENEFITS,
            resource_id=f"{benefit.customer_id}:{benefit.benefit_type}",
            action="enable" if benefit.enabled else "disable",
            occurred_at=now,
            severity=SEVERITY_HIGH,
            event_data={
                "customer_id": benefit.customer_id,
                "benefit_type": benefit.benefit_type,
                **event_data,
            },
        ))

    def enable(self, request: EnableBenefitRequest, actor: Actor) -> CommandOutcome:
        now = self._clock.now_utc()
        rejection = self._precheck(actor)
        if rejection is not None:
            logger.debug(f"{OP_ENABLE} rejected: {rejection.code}")
            return CommandOutcome.rejected(OP_ENABLE, now, rejection)

        current = self._store.get(request.customer_id, request.benefit_type)
        base = current or CustomerBenefit(
            customer_id=request.customer_id,
            benefit_type=request.benefit_type,
        )
        benefit = replace(
            base,
            enabled=True,
            enabled_at=now,
            enabled_by=actor.actor_id,
            disabled_at=None,
            disabled_by=None,
            disabled_reason=None,
        )
        self._store.save(benefit)

        logger.info(
            f"Benefit {benefit.benefit_type} enabled for {benefit.customer_id} "
            f"by {actor.actor_id}"
        )
        self._emit(actor, BENEFIT_ENABLED, benefit, now, {
            "previously_enabled": bool(current and current.enabled),
        })
        return CommandOutcome.accepted(OP_ENABLE, now, benefit)

    def disable(self, request: DisableBenefitRequest, actor: Actor) -> CommandOutcome:
        now = self._clock.now_utc()
        rejection = self._precheck(actor)
        if rejection is not None:
            logger.debug(f"{OP_DISABLE} rejected: {rejection.code}")
            return CommandOutcome.rejected(OP_DISABLE, now, rejection)

        current = self._store.get(request.customer_id, request.benefit_type)
        base = current or CustomerBenefit(
            customer_id=request.customer_id,
            benefit_type=request.benefit_type,
        )
        benefit = replace(
            base,
            enabled=False,
            disabled_at=now,
            disabled_by=actor.actor_id,
            disabled_reason=request.reason,
        )
        self._store.save(benefit)

        logger.info(
            f"Benefit {benefit.benefit_type} disabled for {benefit.customer_id} "
            f"by {actor.actor_id}"
        )
        self._emit(actor, BENEFIT_DISABLED, benefit, now, {
            "reason": request.reason,
            "previously_enabled": bool(current and current.enabled),
        })
        return CommandOutcome.accepted(OP_DISABLE, now, benefit)
