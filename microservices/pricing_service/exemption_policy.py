"""
Tax Exemption Policy

Ordered rules that can zero out GST regardless of rate. The first matching
rule wins. The decision is advisory: the caller skips the tax calculation.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, Optional, Tuple

from .models import ExemptionDecision
from .money import Amount
from .tax_calculator import ensure_non_negative

logger = logging.getLogger(__name__)

SMALL_ORDER_THRESHOLD = Decimal("500")
EXEMPT_CATEGORIES: Tuple[str, ...] = ("books",)


@dataclass(frozen=True)
class ExemptionRule:
    name: str
    reason: str
    applies: Callable[[Decimal, str], bool]


def small_order_rule(threshold: Decimal) -> ExemptionRule:
    # strictly below the threshold
    return ExemptionRule(
        name="small_order",
        reason="Small order exemption",
        applies=lambda amount, category: amount < threshold,
    )


def category_rule(categories: Iterable[str]) -> ExemptionRule:
    exempt = frozenset(categories)
    return ExemptionRule(
        name="exempt_category",
        reason="Educational material exemption",
        applies=lambda amount, category: category in exempt,
    )


class ExemptionPolicy:
    """Evaluates exemption rules in order"""

    def __init__(self, rules: Optional[Iterable[ExemptionRule]] = None):
        if rules is None:
            rules = (small_order_rule(SMALL_ORDER_THRESHOLD), category_rule(EXEMPT_CATEGORIES))
        self.rules: Tuple[ExemptionRule, ...] = tuple(rules)

    @classmethod
    def from_config(cls, config) -> "ExemptionPolicy":
        return cls((
            small_order_rule(config.small_order_threshold),
            category_rule(config.exempt_categories),
        ))

    def check_exemption(self, order_amount: Amount, category: str) -> ExemptionDecision:
        """
        Check whether an order is exempt from GST

        Args:
            order_amount: Order amount the rules are evaluated against, >= 0
            category: Product category

        Returns:
            ExemptionDecision with the reason of the first matching rule

        Raises:
            InvalidAmountError: order_amount is negative
        """
        amount = ensure_non_negative(order_amount, "order_amount")
        for rule in self.rules:
            if rule.applies(amount, category):
                logger.debug(f"Order of {amount} ({category}) exempt: {rule.name}")
                return ExemptionDecision(exempt=True, reason=rule.reason)
        return ExemptionDecision(exempt=False)
