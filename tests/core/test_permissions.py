"""
Tests for core.permissions — Actor model and capability checks.
"""

import pytest

from core.commands import ReasonCode
from core.permissions import (
    CAPABILITY_CREDIT_APPLY,
    CAPABILITY_SUPER_ADMIN,
    Actor,
    require_credit_apply,
    require_settlement_actor,
    require_super_privileged,
)

ADMIN = Actor.super_admin("admin-1")
SYSTEM = Actor.system("invoice-webhook")
PLACER = Actor.order_placer("sales-1")
NOBODY = Actor(actor_id="viewer-1")


class TestActor:
    def test_capabilities_normalized(self):
        actor = Actor(
            actor_id="a",
            capabilities=[CAPABILITY_SUPER_ADMIN, CAPABILITY_CREDIT_APPLY, CAPABILITY_SUPER_ADMIN],
        )
        assert actor.capabilities == (CAPABILITY_CREDIT_APPLY, CAPABILITY_SUPER_ADMIN)

    def test_unknown_capability(self):
        with pytest.raises(ValueError, match="capability"):
            Actor(actor_id="a", capabilities=("ROOT",))

    def test_unknown_actor_type(self):
        with pytest.raises(ValueError, match="actor_type"):
            Actor(actor_id="a", actor_type="ROBOT")

    def test_empty_actor_id(self):
        with pytest.raises(ValueError, match="actor_id"):
            Actor(actor_id="")

    def test_factories(self):
        assert ADMIN.is_super_privileged
        assert SYSTEM.is_system and not SYSTEM.is_super_privileged
        assert PLACER.has_capability(CAPABILITY_CREDIT_APPLY)


class TestCapabilityChecks:
    def test_super_privileged(self):
        assert require_super_privileged(ADMIN) is None
        for actor in (SYSTEM, PLACER, NOBODY, None):
            reason = require_super_privileged(actor)
            assert reason.code == ReasonCode.UNAUTHORIZED
            assert reason.details == {"required_capability": CAPABILITY_SUPER_ADMIN}

    def test_credit_apply(self):
        for actor in (ADMIN, SYSTEM, PLACER):
            assert require_credit_apply(actor) is None
        assert require_credit_apply(NOBODY).code == ReasonCode.UNAUTHORIZED

    def test_settlement(self):
        assert require_settlement_actor(ADMIN) is None
        assert require_settlement_actor(SYSTEM) is None
        assert require_settlement_actor(PLACER).code == ReasonCode.UNAUTHORIZED

    def test_message_names_actor(self):
        assert "viewer-1" in require_super_privileged(NOBODY).message
        assert "<anonymous>" in require_super_privileged(None).message
