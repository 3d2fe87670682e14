"""
Creditline Credit Engine — Calculation invariants
==================================================
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from engines.credit.calculations import (
    available_credit,
    calculate_due_date,
    can_cover_with_credit,
    credit_utilization,
    format_credit_amount,
    is_credit_usable,
    net_terms_days,
    net_terms_description,
    net_terms_label,
    shortfall,
    to_money,
    utilization_level,
)
from engines.credit.store import CreditTerms

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)

AMOUNTS = [0, 1, 999, 4000, 4999, 5000, 5001, 10000, 123456]
LIMITS = [0, 1, 1000, 5000, 10000]
STATUSES = ["active", "inactive", "suspended"]


def _terms(limit, balance, status="active"):
    extra = {}
    if status == "suspended":
        extra = {"suspended_reason": "late", "suspended_at": NOW}
    return CreditTerms(
        customer_id="cust-1",
        credit_limit=limit,
        current_balance=balance,
        status=status,
        **extra,
    )


class TestToMoney:
    def test_quantizes_to_cents(self):
        assert to_money("10.005") == Decimal("10.01")
        assert to_money(5000) == Decimal("5000.00")
        assert to_money(0.1) == Decimal("0.10")

    @pytest.mark.parametrize("bad", ["abc", None, True, float("nan"), "Infinity"])
    def test_rejects_non_numbers(self, bad):
        with pytest.raises(ValueError):
            to_money(bad, "order_total")


class TestNetTerms:
    @pytest.mark.parametrize("term,days", [
        ("net_7", 7), ("net_14", 14), ("net_30", 30), ("net_45", 45), ("net_60", 60),
    ])
    def test_days_label_description(self, term, days):
        assert net_terms_days(term) == days
        assert net_terms_label(term) == f"Net {days}"
        assert net_terms_description(term) == f"Payment due within {days} days of invoice"

    def test_unknown_term(self):
        with pytest.raises(ValueError, match="Unknown net terms"):
            net_terms_days("net_90")

    def test_due_date(self):
        assert calculate_due_date(NOW, "net_30") == NOW + timedelta(days=30)


class TestUtilization:
    @pytest.mark.parametrize("limit", LIMITS)
    @pytest.mark.parametrize("balance", AMOUNTS)
    def test_always_between_0_and_100(self, balance, limit):
        assert 0 <= credit_utilization(balance, limit) <= 100

    def test_zero_limit(self):
        assert credit_utilization(500, 0) == 0

    def test_balance_over_limit_clamped(self):
        assert credit_utilization(6000, 5000) == 100

    def test_half_up_rounding(self):
        assert credit_utilization(1, 200) == 1       # 0.5% -> 1
        assert credit_utilization(4000, 5000) == 80
        assert credit_utilization(333, 1000) == 33

    @pytest.mark.parametrize("percent,level", [
        (0, "healthy"), (74, "healthy"), (75, "warning"),
        (89, "warning"), (90, "critical"), (100, "critical"),
    ])
    def test_levels(self, percent, level):
        assert utilization_level(percent) == level


class TestAvailableCredit:
    @pytest.mark.parametrize("limit", LIMITS)
    @pytest.mark.parametrize("balance", AMOUNTS)
    def test_never_negative(self, balance, limit):
        assert available_credit(limit, balance) >= 0

    def test_simple(self):
        assert available_credit(5000, 4000) == Decimal("1000")


class TestUsability:
    def test_none_is_not_usable(self):
        assert is_credit_usable(None) is False
        assert can_cover_with_credit(None, 1) is False

    def test_zero_limit_not_usable(self):
        assert is_credit_usable(_terms(0, 0)) is False

    @pytest.mark.parametrize("status", ["inactive", "suspended"])
    @pytest.mark.parametrize("amount", AMOUNTS)
    def test_non_active_never_covers(self, status, amount):
        assert can_cover_with_credit(_terms(10000, 0, status), amount) is False

    @pytest.mark.parametrize("status", STATUSES)
    @pytest.mark.parametrize("amount", AMOUNTS)
    def test_zero_limit_never_covers(self, status, amount):
        assert can_cover_with_credit(_terms(0, 0, status), amount) is False

    def test_boundary_can_cover(self):
        terms = _terms(5000, 4000)
        assert terms.can_cover(1000) is True
        assert terms.can_cover(1001) is False

    def test_sub_cent_excess_is_not_covered(self):
        terms = _terms(5000, 4000)
        assert can_cover_with_credit(terms, Decimal("1000.004")) is False
        assert can_cover_with_credit(terms, Decimal("1000.00")) is True
        assert shortfall(terms, Decimal("1000.004")) == Decimal("0.01")
        assert shortfall(terms, Decimal("999.999")) == Decimal("0")

    def test_suspension_overrides_available_credit(self):
        terms = _terms(10000, 0, "suspended")
        assert terms.available_credit == Decimal("10000")
        assert terms.can_cover(1) is False


class TestCreditTermsModel:
    def test_suspension_metadata_only_when_suspended(self):
        with pytest.raises(ValueError, match="Suspension metadata"):
            CreditTerms(
                customer_id="c", credit_limit=100, status="active",
                suspended_reason="x",
            )

    def test_negative_balance_rejected(self):
        with pytest.raises(ValueError, match="current_balance"):
            CreditTerms(customer_id="c", credit_limit=100, current_balance=-1)

    def test_invalid_net_terms(self):
        with pytest.raises(ValueError, match="net_terms"):
            CreditTerms(customer_id="c", credit_limit=100, net_terms="net_90")

    def test_reader_tolerates_balance_over_limit(self):
        terms = _terms(5000, 6000)
        assert terms.utilization == 100
        assert terms.available_credit == 0
        assert terms.can_cover(1) is False


class TestFormatting:
    def test_default_currency(self):
        assert format_credit_amount(Decimal("1234.5")) == "USD 1,234.50"

    def test_explicit_currency(self):
        assert format_credit_amount(0, "GHS") == "GHS 0.00"
