"""
Creditline Credit Engine — Eligibility Evaluator
=================================================
"""

from decimal import Decimal

import pytest

from core.config import CreditEngineConfig
from engines.credit.eligibility import (
    CustomerHistory,
    InMemoryCustomerHistoryProvider,
    evaluate_eligibility,
    history_or_default,
)


def _history(**overrides):
    values = dict(
        customer_id="cust-1",
        lifetime_orders=5,
        loyalty_tier="gold",
        has_overdue_invoices=False,
    )
    values.update(overrides)
    return CustomerHistory(**values)


class TestEvaluateEligibility:
    def test_all_rules_pass(self):
        result = evaluate_eligibility(_history())
        assert result.eligible is True
        assert result.missing_requirements == ()

    def test_one_order_silver(self):
        result = evaluate_eligibility(_history(lifetime_orders=1, loyalty_tier="silver"))
        assert result.eligible is False
        assert list(result.missing_requirements) == ["need 2+ orders"]

    def test_bronze_tier(self):
        result = evaluate_eligibility(_history(loyalty_tier="bronze"))
        assert result.missing_requirements == ("need silver tier or above",)

    def test_bronze_case_insensitive(self):
        result = evaluate_eligibility(_history(loyalty_tier="Bronze"))
        assert result.eligible is False
        assert result.loyalty_tier == "bronze"

    def test_overdue_invoices(self):
        result = evaluate_eligibility(_history(has_overdue_invoices=True))
        assert result.missing_requirements == ("has overdue invoices",)

    def test_all_failures_in_rule_order(self):
        result = evaluate_eligibility(_history(
            lifetime_orders=0, loyalty_tier="bronze", has_overdue_invoices=True,
        ))
        assert result.missing_requirements == (
            "need 2+ orders",
            "need silver tier or above",
            "has overdue invoices",
        )

    def test_overdue_credit_is_informational(self):
        result = evaluate_eligibility(_history(has_overdue_credit=True))
        assert result.eligible is True
        assert result.has_overdue_credit is True

    @pytest.mark.parametrize("orders,eligible", [(0, False), (1, False), (2, True), (50, True)])
    def test_order_threshold(self, orders, eligible):
        assert evaluate_eligibility(_history(lifetime_orders=orders)).eligible is eligible

    def test_threshold_from_config(self):
        cfg = CreditEngineConfig(min_lifetime_orders=5)
        result = evaluate_eligibility(_history(lifetime_orders=3), cfg)
        assert result.missing_requirements == ("need 5+ orders",)

    def test_to_dict(self):
        data = evaluate_eligibility(_history(lifetime_orders=1)).to_dict()
        assert data["eligible"] is False
        assert data["missing_requirements"] == ["need 2+ orders"]

    def test_trust_tier_and_available_credit_are_informational(self):
        result = evaluate_eligibility(
            _history(trust_tier="established"), None, Decimal("1250.5")
        )
        assert result.eligible is True
        assert result.trust_tier == "established"
        assert result.available_credit == Decimal("1250.50")
        data = result.to_dict()
        assert data["trust_tier"] == "established"
        assert data["available_credit"] == "1250.50"

    def test_defaults_for_new_customer(self):
        result = evaluate_eligibility(_history())
        assert result.trust_tier == "new"
        assert result.available_credit == Decimal("0")


class TestHistory:
    def test_negative_orders(self):
        with pytest.raises(ValueError, match="lifetime_orders"):
            _history(lifetime_orders=-1)

    def test_missing_history_defaults_to_bronze_zero(self):
        provider = InMemoryCustomerHistoryProvider()
        history = history_or_default(provider, "cust-9")
        assert history.lifetime_orders == 0
        assert history.loyalty_tier == "bronze"
        assert history_or_default(None, "cust-9") == history

    def test_provider_returns_stored_history(self):
        provider = InMemoryCustomerHistoryProvider([_history()])
        assert history_or_default(provider, "cust-1").loyalty_tier == "gold"
        provider.set_history(_history(loyalty_tier="silver"))
        assert provider.get_history("cust-1").loyalty_tier == "silver"
