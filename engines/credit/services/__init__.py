"""
Creditline Credit Engine — Service Layer
=========================================
CreditMutationService is the only writer of credit terms state.

Check order for every operation:
    1. Authorization (before anything else; leaks no state)
    2. Kill switch credit_terms_global (where gated)
    3. Business rules, evaluated inside the per-customer critical
       section so that read-check-write is atomic per customer.

Suspend, deactivate and settle only reduce exposure and are not
gated by the kill switch.

Accepted mutations emit exactly one AuditFact after commit. Audit
delivery failures are logged by the emitter and never undo the write.

CreditQueryService is the read path: pure derivations over store
snapshots, no actor, no lock.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from core.audit import AuditEmitter, SEVERITY_HIGH, create_audit_fact
from core.commands import CommandOutcome, ReasonCode, RejectionReason
from core.config import DEFAULT_CONFIG, CreditEngineConfig
from core.feature_flags import FLAG_CREDIT_TERMS_GLOBAL, FeatureGate
from core.permissions import (
    Actor,
    require_credit_apply,
    require_settlement_actor,
    require_super_privileged,
)
from core.time import Clock, SystemClock
from engines.credit.calculations import (
    ZERO,
    calculate_due_date,
    utilization_level,
)
from engines.credit.commands import (
    AdjustCreditLimitRequest,
    ApplyCreditToOrderRequest,
    ApproveCreditTermsRequest,
    DeactivateCreditTermsRequest,
    ReactivateCreditTermsRequest,
    SettleCreditOrderRequest,
    SuspendCreditTermsRequest,
)
from engines.credit.eligibility import (
    CustomerHistoryProvider,
    EligibilityResult,
    evaluate_eligibility,
    history_or_default,
)
from engines.credit.events import (
    CREDIT_APPLIED_TO_ORDER,
    CREDIT_SETTLED,
    CREDIT_TERMS_APPROVED,
    CREDIT_TERMS_DEACTIVATED,
    CREDIT_TERMS_LIMIT_CHANGED,
    CREDIT_TERMS_REACTIVATED,
    CREDIT_TERMS_SUSPENDED,
    OP_ADJUST_LIMIT,
    OP_APPLY_TO_ORDER,
    OP_APPROVE,
    OP_DEACTIVATE,
    OP_REACTIVATE,
    OP_SETTLE,
    OP_SUSPEND,
    RESOURCE_CREDIT_TERMS,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
    STATUS_SUSPENDED,
)
from engines.credit.ledger import LedgerEntry, LedgerSummary, summarize_ledger
from engines.credit.notices import CreditNotice, overdue_notices, suspension_notice
from engines.credit.policies import (
    approvable_status_policy,
    credit_terms_must_exist_policy,
    credit_usable_policy,
    eligibility_policy,
    ledger_entry_must_exist_policy,
    ledger_entry_not_settled_policy,
    limit_not_below_balance_policy,
    must_be_suspended_policy,
    order_not_already_applied_policy,
    sufficient_credit_policy,
)
from engines.credit.store import CreditTerms, CreditTermsStore, CreditWriteConflict

logger = logging.getLogger("creditline.credit")


def _conflict(customer_id: str) -> RejectionReason:
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=f"Concurrent write conflict for customer '{customer_id}'.",
        policy_name="store_write_conflict",
        details={"customer_id": customer_id},
    )


# ══════════════════════════════════════════════════════════════
# MUTATION SERVICE
# ══════════════════════════════════════════════════════════════

class CreditMutationService:
    def __init__(
        self,
        *,
        store: CreditTermsStore,
        feature_gate: FeatureGate,
        history_provider: Optional[CustomerHistoryProvider] = None,
        audit: Optional[AuditEmitter] = None,
        clock: Optional[Clock] = None,
        config: Optional[CreditEngineConfig] = None,
    ):
        self._store = store
        self._gate = feature_gate
        self._history = history_provider
        self._audit = audit if audit is not None else AuditEmitter()
        self._clock = clock if clock is not None else SystemClock()
        self._config = config or DEFAULT_CONFIG

    # ── Internals ─────────────────────────────────────────────

    def _reject(
        self, operation: str, now: datetime, reason: RejectionReason
    ) -> CommandOutcome:
        logger.debug(f"{operation} rejected: {reason.code} ({reason.policy_name})")
        return CommandOutcome.rejected(operation, now, reason)

    def _emit(
        self,
        actor: Actor,
        event_type: str,
        action: str,
        customer_id: str,
        now: datetime,
        event_data: dict,
    ) -> None:
        self._audit.emit(create_audit_fact(
            actor_id=actor.actor_id,
            event_type=event_type,
            resource_type=RESOURCE_CREDIT_TERMS,
            resource_id=customer_id,
            action=action,
            occurred_at=now,
            severity=SEVERITY_HIGH,
            event_data={
                "customer_id": customer_id,
                "currency": self._config.default_currency,
                **event_data,
            },
        ))

    @staticmethod
    def _touch(terms: CreditTerms, now: datetime, **changes) -> CreditTerms:
        return terms.evolve(updated_at=now, version=terms.version + 1, **changes)

    # ── Approve ───────────────────────────────────────────────

    def check_eligibility(self, customer_id: str) -> EligibilityResult:
        history = history_or_default(self._history, customer_id)
        terms = self._store.get(customer_id)
        available = terms.available_credit if terms is not None else ZERO
        return evaluate_eligibility(history, self._config, available)

    def approve(
        self, request: ApproveCreditTermsRequest, actor: Actor
    ) -> CommandOutcome:
        now = self._clock.now_utc()
        cid = request.customer_id

        rejection = (
            require_super_privileged(actor)
            or self._gate.check(FLAG_CREDIT_TERMS_GLOBAL)
        )
        if rejection is None and not request.override_eligibility:
            rejection = eligibility_policy(self.check_eligibility(cid))
        if rejection is not None:
            return self._reject(OP_APPROVE, now, rejection)

        try:
            with self._store.mutate(cid) as session:
                existing = session.terms
                rejection = (
                    approvable_status_policy(existing)
                    or limit_not_below_balance_policy(existing, request.credit_limit)
                )
                if rejection is not None:
                    return self._reject(OP_APPROVE, now, rejection)

                if existing is None:
                    terms = CreditTerms(
                        customer_id=cid,
                        credit_limit=request.credit_limit,
                        current_balance=ZERO,
                        status=STATUS_ACTIVE,
                        net_terms=request.net_terms,
                        approved_by=actor.actor_id,
                        approved_at=now,
                        created_at=now,
                        updated_at=now,
                        version=1,
                    )
                else:
                    terms = self._touch(
                        existing, now,
                        credit_limit=request.credit_limit,
                        status=STATUS_ACTIVE,
                        net_terms=request.net_terms,
                        approved_by=actor.actor_id,
                        approved_at=now,
                    )
                session.save(terms)
        except CreditWriteConflict:
            return self._reject(OP_APPROVE, now, _conflict(cid))

        logger.info(
            f"Credit terms approved for {cid}: limit {terms.credit_limit}, "
            f"{terms.net_terms} by {actor.actor_id}"
        )
        self._emit(actor, CREDIT_TERMS_APPROVED, "approve", cid, now, {
            "credit_limit": terms.credit_limit,
            "net_terms": terms.net_terms,
            "override_eligibility": request.override_eligibility,
            "previous_status": existing.status if existing else None,
        })
        return CommandOutcome.accepted(OP_APPROVE, now, terms)

    # ── Adjust Limit ──────────────────────────────────────────

    def adjust_limit(
        self, request: AdjustCreditLimitRequest, actor: Actor
    ) -> CommandOutcome:
        now = self._clock.now_utc()
        cid = request.customer_id

        rejection = (
            require_super_privileged(actor)
            or self._gate.check(FLAG_CREDIT_TERMS_GLOBAL)
        )
        if rejection is not None:
            return self._reject(OP_ADJUST_LIMIT, now, rejection)

        with self._store.mutate(cid) as session:
            existing = session.terms
            rejection = (
                credit_terms_must_exist_policy(existing, cid)
                or limit_not_below_balance_policy(existing, request.new_limit)
            )
            if rejection is not None:
                return self._reject(OP_ADJUST_LIMIT, now, rejection)

            old_limit = existing.credit_limit
            terms = self._touch(existing, now, credit_limit=request.new_limit)
            session.save(terms)

        logger.info(
            f"Credit limit for {cid} changed {old_limit} -> {terms.credit_limit} "
            f"by {actor.actor_id}"
        )
        self._emit(actor, CREDIT_TERMS_LIMIT_CHANGED, "update", cid, now, {
            "old_limit": old_limit,
            "new_limit": terms.credit_limit,
            "current_balance": terms.current_balance,
            "reason": request.reason,
        })
        return CommandOutcome.accepted(OP_ADJUST_LIMIT, now, terms)

    # ── Suspend ───────────────────────────────────────────────

    def suspend(
        self, request: SuspendCreditTermsRequest, actor: Actor
    ) -> CommandOutcome:
        now = self._clock.now_utc()
        cid = request.customer_id

        rejection = require_super_privileged(actor)
        if rejection is not None:
            return self._reject(OP_SUSPEND, now, rejection)

        with self._store.mutate(cid) as session:
            existing = session.terms
            rejection = credit_terms_must_exist_policy(existing, cid)
            if rejection is not None:
                return self._reject(OP_SUSPEND, now, rejection)

            already_suspended = existing.status == STATUS_SUSPENDED
            if already_suspended:
                terms = existing
            else:
                terms = self._touch(
                    existing, now,
                    status=STATUS_SUSPENDED,
                    suspended_reason=request.reason,
                    suspended_at=now,
                )
                session.save(terms)

        logger.info(
            f"Credit terms for {cid} suspended by {actor.actor_id}"
            + (" (already suspended)" if already_suspended else "")
        )
        self._emit(actor, CREDIT_TERMS_SUSPENDED, "suspend", cid, now, {
            "reason": request.reason,
            "previous_status": existing.status,
            "already_suspended": already_suspended,
            "current_balance": terms.current_balance,
        })
        return CommandOutcome.accepted(OP_SUSPEND, now, terms)

    # ── Reactivate ────────────────────────────────────────────

    def reactivate(
        self, request: ReactivateCreditTermsRequest, actor: Actor
    ) -> CommandOutcome:
        now = self._clock.now_utc()
        cid = request.customer_id

        rejection = (
            require_super_privileged(actor)
            or self._gate.check(FLAG_CREDIT_TERMS_GLOBAL)
        )
        if rejection is not None:
            return self._reject(OP_REACTIVATE, now, rejection)

        with self._store.mutate(cid) as session:
            existing = session.terms
            rejection = (
                credit_terms_must_exist_policy(existing, cid)
                or must_be_suspended_policy(existing)
            )
            if rejection is not None:
                return self._reject(OP_REACTIVATE, now, rejection)

            terms = self._touch(
                existing, now,
                status=STATUS_ACTIVE,
                suspended_reason=None,
                suspended_at=None,
            )
            session.save(terms)

        logger.info(f"Credit terms for {cid} reactivated by {actor.actor_id}")
        self._emit(actor, CREDIT_TERMS_REACTIVATED, "reactivate", cid, now, {
            "previous_reason": existing.suspended_reason,
            "current_balance": terms.current_balance,
        })
        return CommandOutcome.accepted(OP_REACTIVATE, now, terms)

    # ── Deactivate ────────────────────────────────────────────

    def deactivate(
        self, request: DeactivateCreditTermsRequest, actor: Actor
    ) -> CommandOutcome:
        now = self._clock.now_utc()
        cid = request.customer_id

        rejection = require_super_privileged(actor)
        if rejection is not None:
            return self._reject(OP_DEACTIVATE, now, rejection)

        with self._store.mutate(cid) as session:
            existing = session.terms
            rejection = credit_terms_must_exist_policy(existing, cid)
            if rejection is not None:
                return self._reject(OP_DEACTIVATE, now, rejection)

            terms = self._touch(
                existing, now,
                status=STATUS_INACTIVE,
                suspended_reason=None,
                suspended_at=None,
            )
            session.save(terms)

        logger.info(f"Credit terms for {cid} deactivated by {actor.actor_id}")
        self._emit(actor, CREDIT_TERMS_DEACTIVATED, "deactivate", cid, now, {
            "reason": request.reason,
            "previous_status": existing.status,
            "current_balance": terms.current_balance,
        })
        return CommandOutcome.accepted(OP_DEACTIVATE, now, terms)

    # ── Apply To Order ────────────────────────────────────────

    def apply_to_order(
        self, request: ApplyCreditToOrderRequest, actor: Actor
    ) -> CommandOutcome:
        """
        Charge an order to the customer's credit line.

        The usability check, the available-credit check, the balance
        increment and the ledger entry all happen under one
        per-customer lock: two concurrent orders can never together
        push the balance past the limit.
        """
        now = self._clock.now_utc()
        cid = request.customer_id

        rejection = (
            require_credit_apply(actor)
            or self._gate.check(FLAG_CREDIT_TERMS_GLOBAL)
        )
        if rejection is not None:
            return self._reject(OP_APPLY_TO_ORDER, now, rejection)

        try:
            with self._store.mutate(cid) as session:
                existing = session.terms
                rejection = (
                    credit_usable_policy(existing, cid)
                    or order_not_already_applied_policy(
                        session.get_ledger_entry(request.order_id), request.order_id
                    )
                    or sufficient_credit_policy(existing, request.order_total)
                )
                if rejection is not None:
                    return self._reject(OP_APPLY_TO_ORDER, now, rejection)

                order_date = request.order_date or now
                entry = LedgerEntry(
                    order_id=request.order_id,
                    customer_id=cid,
                    credit_amount_used=request.order_total,
                    credit_due_date=calculate_due_date(order_date, existing.net_terms),
                    created_at=now,
                    sequence=session.next_sequence(),
                )
                terms = self._touch(
                    existing, now,
                    current_balance=existing.current_balance + request.order_total,
                )
                session.add_ledger_entry(entry)
                session.save(terms)
        except CreditWriteConflict:
            return self._reject(OP_APPLY_TO_ORDER, now, _conflict(cid))

        logger.info(
            f"Credit {request.order_total} applied to order {request.order_id} "
            f"for {cid}; balance {terms.current_balance}/{terms.credit_limit}"
        )
        self._emit(actor, CREDIT_APPLIED_TO_ORDER, "apply", cid, now, {
            "order_id": request.order_id,
            "amount": request.order_total,
            "new_balance": terms.current_balance,
            "credit_due_date": entry.credit_due_date,
        })
        return CommandOutcome.accepted(OP_APPLY_TO_ORDER, now, entry)

    # ── Settle ────────────────────────────────────────────────

    def settle(
        self, request: SettleCreditOrderRequest, actor: Actor
    ) -> CommandOutcome:
        """
        Record a payment against one order.

        The balance drops by at most the order's outstanding amount, so
        an overpayment marks the entry overpaid without releasing debt
        owed on other orders. Settled entries accept no more payments.
        """
        now = self._clock.now_utc()
        cid = request.customer_id

        rejection = require_settlement_actor(actor)
        if rejection is not None:
            return self._reject(OP_SETTLE, now, rejection)

        with self._store.mutate(cid) as session:
            existing = session.terms
            entry = session.get_ledger_entry(request.order_id)
            rejection = (
                credit_terms_must_exist_policy(existing, cid)
                or ledger_entry_must_exist_policy(entry, request.order_id, cid)
                or ledger_entry_not_settled_policy(entry)
            )
            if rejection is not None:
                return self._reject(OP_SETTLE, now, rejection)

            released = min(request.amount, entry.outstanding_amount)
            new_balance = max(ZERO, existing.current_balance - released)
            updated_entry = entry.with_payment(request.amount)
            terms = self._touch(existing, now, current_balance=new_balance)
            session.save_ledger_entry(updated_entry)
            session.save(terms)

        logger.info(
            f"Settled {request.amount} on order {request.order_id} for {cid}; "
            f"balance {terms.current_balance}, {updated_entry.payment_status}"
        )
        self._emit(actor, CREDIT_SETTLED, "settle", cid, now, {
            "order_id": request.order_id,
            "amount": request.amount,
            "released": released,
            "new_balance": terms.current_balance,
            "payment_status": updated_entry.payment_status,
        })
        return CommandOutcome.accepted(OP_SETTLE, now, updated_entry)


# ══════════════════════════════════════════════════════════════
# QUERY SERVICE
# ══════════════════════════════════════════════════════════════

class CreditQueryService:
    """Read-only views. Never locks, never audits, never raises on clamps."""

    def __init__(
        self,
        *,
        store: CreditTermsStore,
        clock: Optional[Clock] = None,
        config: Optional[CreditEngineConfig] = None,
    ):
        self._store = store
        self._clock = clock if clock is not None else SystemClock()
        self._config = config or DEFAULT_CONFIG

    def get_terms(self, customer_id: str) -> Optional[CreditTerms]:
        return self._store.get(customer_id)

    def available_credit(self, customer_id: str) -> Decimal:
        terms = self._store.get(customer_id)
        return terms.available_credit if terms is not None else ZERO

    def utilization(self, customer_id: str) -> int:
        terms = self._store.get(customer_id)
        return terms.utilization if terms is not None else 0

    def utilization_level(self, customer_id: str) -> str:
        return utilization_level(self.utilization(customer_id), self._config)

    def can_cover(self, customer_id: str, order_total) -> bool:
        terms = self._store.get(customer_id)
        return terms is not None and terms.can_cover(order_total)

    def ledger(self, customer_id: str) -> Tuple[LedgerEntry, ...]:
        return self._store.ledger_entries(customer_id)

    def ledger_summary(self, customer_id: str) -> LedgerSummary:
        return summarize_ledger(
            self._store.ledger_entries(customer_id), self._clock.now_utc()
        )

    def overdue_notices(self, customer_id: str) -> Tuple[CreditNotice, ...]:
        return overdue_notices(
            self._store.ledger_entries(customer_id),
            self._clock.now_utc(),
            self._config.default_currency,
        )

    def suspension_notice(self, customer_id: str) -> Optional[CreditNotice]:
        """Notice data for a currently suspended account, else None."""
        terms = self._store.get(customer_id)
        if terms is None or terms.status != STATUS_SUSPENDED:
            return None
        return suspension_notice(
            terms,
            terms.suspended_at or self._clock.now_utc(),
            self._config.default_currency,
        )
