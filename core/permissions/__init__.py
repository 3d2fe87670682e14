"""
Creditline Permissions - Public API
===================================
"""

from core.permissions.constants import (
    ACTOR_TYPE_HUMAN,
    ACTOR_TYPE_SYSTEM,
    CAPABILITY_CREDIT_APPLY,
    CAPABILITY_SUPER_ADMIN,
)
from core.permissions.evaluator import (
    require_credit_apply,
    require_settlement_actor,
    require_super_privileged,
)
from core.permissions.models import Actor

__all__ = [
    "ACTOR_TYPE_HUMAN",
    "ACTOR_TYPE_SYSTEM",
    "CAPABILITY_SUPER_ADMIN",
    "CAPABILITY_CREDIT_APPLY",
    "Actor",
    "require_super_privileged",
    "require_credit_apply",
    "require_settlement_actor",
]
