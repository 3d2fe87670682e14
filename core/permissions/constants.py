"""
Creditline Permissions - Capability Constants
=============================================
Capabilities are resolved by the external authorization provider
and handed to the engine on the Actor.
"""

# Super-privileged capability: approve, adjust, suspend, reactivate,
# deactivate credit terms; toggle benefits and kill switches.
CAPABILITY_SUPER_ADMIN = "SUPER_ADMIN"

# Narrow capability: place orders on credit terms.
CAPABILITY_CREDIT_APPLY = "CREDIT_APPLY"

VALID_CAPABILITIES = frozenset({
    CAPABILITY_SUPER_ADMIN,
    CAPABILITY_CREDIT_APPLY,
})

ACTOR_TYPE_HUMAN = "HUMAN"
ACTOR_TYPE_SYSTEM = "SYSTEM"

VALID_ACTOR_TYPES = frozenset({ACTOR_TYPE_HUMAN, ACTOR_TYPE_SYSTEM})
