"""
Creditline Permissions - Immutable Actor Model
==============================================
"""

from __future__ import annotations

from dataclasses import dataclass

from core.permissions.constants import (
    ACTOR_TYPE_HUMAN,
    ACTOR_TYPE_SYSTEM,
    CAPABILITY_CREDIT_APPLY,
    CAPABILITY_SUPER_ADMIN,
    VALID_ACTOR_TYPES,
    VALID_CAPABILITIES,
)


@dataclass(frozen=True)
class Actor:
    """
    Pre-resolved caller identity.

    The engine never authenticates; it only reads the capabilities
    the authorization provider attached to the actor.
    """

    actor_id: str
    capabilities: tuple[str, ...] = ()
    actor_type: str = ACTOR_TYPE_HUMAN

    def __post_init__(self):
        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")

        if self.actor_type not in VALID_ACTOR_TYPES:
            raise ValueError(
                f"actor_type '{self.actor_type}' not valid. "
                f"Must be one of: {sorted(VALID_ACTOR_TYPES)}"
            )

        if not isinstance(self.capabilities, (tuple, list, frozenset, set)):
            raise ValueError("capabilities must be a tuple.")

        normalized = tuple(sorted(set(self.capabilities)))
        for capability in normalized:
            if capability not in VALID_CAPABILITIES:
                raise ValueError(
                    f"capability '{capability}' not valid. "
                    f"Must be one of: {sorted(VALID_CAPABILITIES)}"
                )

        object.__setattr__(self, "capabilities", normalized)

    def has_capability(self, capability: str) -> bool:
        return capability in self.capabilities

    @property
    def is_super_privileged(self) -> bool:
        return CAPABILITY_SUPER_ADMIN in self.capabilities

    @property
    def is_system(self) -> bool:
        return self.actor_type == ACTOR_TYPE_SYSTEM

    @classmethod
    def super_admin(cls, actor_id: str) -> "Actor":
        return cls(actor_id=actor_id, capabilities=(CAPABILITY_SUPER_ADMIN,))

    @classmethod
    def system(cls, component: str) -> "Actor":
        return cls(actor_id=component, actor_type=ACTOR_TYPE_SYSTEM)

    @classmethod
    def order_placer(cls, actor_id: str) -> "Actor":
        return cls(actor_id=actor_id, capabilities=(CAPABILITY_CREDIT_APPLY,))
