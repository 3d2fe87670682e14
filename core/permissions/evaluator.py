"""
Creditline Permissions - Deterministic Capability Checks
========================================================
Authorization is always evaluated before any business rule so that
unauthorized callers learn nothing about customer state.
"""

from __future__ import annotations

from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.permissions.constants import (
    CAPABILITY_CREDIT_APPLY,
    CAPABILITY_SUPER_ADMIN,
)
from core.permissions.models import Actor


def _deny(actor, required: str, policy_name: str) -> RejectionReason:
    actor_id = getattr(actor, "actor_id", None) or "<anonymous>"
    return RejectionReason(
        code=ReasonCode.UNAUTHORIZED,
        message=f"Actor '{actor_id}' lacks required capability '{required}'.",
        policy_name=policy_name,
        details={"required_capability": required},
    )


def require_super_privileged(actor: Optional[Actor]) -> Optional[RejectionReason]:
    """Only super-privileged actors may mutate credit, benefits or flags."""
    if isinstance(actor, Actor) and actor.is_super_privileged:
        return None
    return _deny(actor, CAPABILITY_SUPER_ADMIN, "require_super_privileged")


def require_credit_apply(actor: Optional[Actor]) -> Optional[RejectionReason]:
    """Order placement on credit: super-privileged, system, or CREDIT_APPLY."""
    if isinstance(actor, Actor) and (
        actor.is_super_privileged
        or actor.is_system
        or actor.has_capability(CAPABILITY_CREDIT_APPLY)
    ):
        return None
    return _deny(actor, CAPABILITY_CREDIT_APPLY, "require_credit_apply")


def require_settlement_actor(actor: Optional[Actor]) -> Optional[RejectionReason]:
    """Settlement is an external trigger: system or super-privileged only."""
    if isinstance(actor, Actor) and (actor.is_system or actor.is_super_privileged):
        return None
    return _deny(actor, CAPABILITY_SUPER_ADMIN, "require_settlement_actor")
