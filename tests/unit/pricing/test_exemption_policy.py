"""
Unit Tests for GST Exemption Rules
"""

import pytest
from decimal import Decimal

from microservices.pricing_service.exemption_policy import (
    ExemptionPolicy,
    ExemptionRule,
    category_rule,
    small_order_rule,
)
from microservices.pricing_service.protocols import InvalidAmountError

pytestmark = [pytest.mark.unit]


class TestDefaultPolicy:
    """Small orders and books are exempt"""

    def test_small_order_exempt(self, exemption_policy):
        decision = exemption_policy.check_exemption(Decimal("400"), "gifts")
        assert decision.exempt is True
        assert decision.reason == "Small order exemption"

    def test_threshold_is_strict(self, exemption_policy):
        assert exemption_policy.check_exemption(Decimal("499.99"), "gifts").exempt is True
        assert exemption_policy.check_exemption(Decimal("500.00"), "gifts").exempt is False

    def test_books_exempt_at_any_amount(self, exemption_policy):
        decision = exemption_policy.check_exemption(Decimal("10000"), "books")
        assert decision.exempt is True
        assert decision.reason == "Educational material exemption"

    def test_small_order_reason_wins_for_small_book_order(self, exemption_policy):
        decision = exemption_policy.check_exemption(Decimal("100"), "books")
        assert decision.reason == "Small order exemption"

    def test_not_exempt(self, exemption_policy):
        decision = exemption_policy.check_exemption(Decimal("1000"), "gifts")
        assert decision.exempt is False
        assert decision.reason is None

    def test_category_match_is_exact(self, exemption_policy):
        assert exemption_policy.check_exemption(Decimal("1000"), "Books").exempt is False

    def test_accepts_plain_numbers(self, exemption_policy):
        assert exemption_policy.check_exemption(499, "gifts").exempt is True
        assert exemption_policy.check_exemption("500", "gifts").exempt is False


class TestCustomPolicy:
    """Tests for configured rules"""

    def test_from_config(self, pricing_config):
        policy = ExemptionPolicy.from_config(pricing_config)
        assert [r.name for r in policy.rules] == ["small_order", "exempt_category"]
        assert policy.check_exemption(Decimal("499.99"), "gifts").exempt is True

    def test_custom_threshold_and_categories(self):
        policy = ExemptionPolicy([small_order_rule(Decimal("100")), category_rule(["books", "food"])])
        assert policy.check_exemption(Decimal("150"), "gifts").exempt is False
        assert policy.check_exemption(Decimal("150"), "food").exempt is True

    def test_first_matching_rule_wins(self):
        policy = ExemptionPolicy([
            ExemptionRule(name="always", reason="First", applies=lambda amount, category: True),
            ExemptionRule(name="also", reason="Second", applies=lambda amount, category: True),
        ])
        assert policy.check_exemption(Decimal("1"), "gifts").reason == "First"

    def test_no_rules_never_exempt(self):
        policy = ExemptionPolicy([])
        assert policy.check_exemption(Decimal("0"), "books").exempt is False


class TestInputValidation:

    @pytest.mark.parametrize("amount", [Decimal("-10"), Decimal("-0.01"), -1, "-5"])
    def test_negative_amount_rejected(self, exemption_policy, amount):
        with pytest.raises(InvalidAmountError) as exc_info:
            exemption_policy.check_exemption(amount, "gifts")
        assert exc_info.value.amount < 0

    def test_zero_amount_is_small_order(self, exemption_policy):
        assert exemption_policy.check_exemption(Decimal("0"), "gifts").reason == "Small order exemption"
