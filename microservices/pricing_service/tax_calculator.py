"""
GST Calculator

Interstate sales carry IGST at the full rate; intrastate sales carry CGST and
SGST at half the rate each. Every component is rounded to paise on its own
before the total is summed, so the total may differ by one paisa from
rounding subtotal * rate / 100 directly. Invoice totals depend on this.
"""

import logging
from decimal import Decimal
from typing import Iterable

from .models import Address, OrderLineItem, TaxBreakdown, TaxCalculationResult, TransactionType
from .money import Amount, HUNDRED, TWO, ZERO, round_money, to_decimal
from .protocols import InvalidAmountError
from .rate_table import RateTable

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_CATEGORY = "gifts"


def ensure_non_negative(value: Amount, field_name: str) -> Decimal:
    """Convert to Decimal, rejecting negative amounts"""
    amount = to_decimal(value)
    if amount < 0:
        raise InvalidAmountError(f"{field_name} must be >= 0, got {amount}", amount=amount)
    return amount


class TaxCalculator:
    """Forward GST calculation for single and multi-category orders"""

    def __init__(self, rate_table: RateTable):
        self.rate_table = rate_table

    def is_interstate(self, state: str) -> bool:
        """Exact string comparison against the seller's state, no normalisation"""
        return state != self.rate_table.seller_home_state

    def transaction_type(self, state: str) -> TransactionType:
        return TransactionType.INTERSTATE if self.is_interstate(state) else TransactionType.INTRASTATE

    def calculate_gst(
        self,
        subtotal: Amount,
        billing_address: Address,
        category: str = DEFAULT_PRODUCT_CATEGORY,
    ) -> TaxCalculationResult:
        """
        Calculate GST on a pre-tax amount

        Args:
            subtotal: Amount before tax, >= 0
            billing_address: Customer billing address
            category: Product category used for the rate lookup

        Returns:
            Tax calculation with CGST/SGST or IGST split

        Raises:
            InvalidAmountError: subtotal is negative
        """
        amount = ensure_non_negative(subtotal, "subtotal")
        rate = self.rate_table.rate_for(category)
        state = billing_address.state

        if not self.rate_table.is_known_state(state):
            logger.warning(
                f"Billing state '{state}' is not a known Indian state; comparing by exact name",
                extra={"event": "unknown_billing_state", "state": state},
            )

        if self.is_interstate(state):
            igst = round_money(amount * rate / HUNDRED)
            breakdown = TaxBreakdown(igst=igst, total=igst)
            transaction_type = TransactionType.INTERSTATE
        else:
            half = round_money(amount * (rate / TWO) / HUNDRED)
            breakdown = TaxBreakdown(cgst=half, sgst=half, total=half + half)
            transaction_type = TransactionType.INTRASTATE

        rounded_subtotal = round_money(amount)
        return TaxCalculationResult(
            subtotal=rounded_subtotal,
            tax_breakdown=breakdown,
            tax_total=breakdown.total,
            grand_total=round_money(rounded_subtotal + breakdown.total),
            tax_rate_percent=rate,
            transaction_type=transaction_type,
        )

    def calculate_tax_for_items(
        self,
        items: Iterable[OrderLineItem],
        billing_address: Address,
    ) -> TaxCalculationResult:
        """
        Calculate GST for lines of mixed categories

        Each line is calculated and rounded on its own, then the sums are
        rounded again. The aggregate reports a tax rate of 0 with
        is_mixed_rate set.
        """
        subtotal = cgst = sgst = igst = ZERO
        for item in items:
            line = self.calculate_gst(item.amount, billing_address, item.category)
            subtotal += line.subtotal
            cgst += line.tax_breakdown.cgst
            sgst += line.tax_breakdown.sgst
            igst += line.tax_breakdown.igst

        cgst, sgst, igst = round_money(cgst), round_money(sgst), round_money(igst)
        total = round_money(cgst + sgst + igst)
        subtotal = round_money(subtotal)
        breakdown = TaxBreakdown(cgst=cgst, sgst=sgst, igst=igst, total=total)

        return TaxCalculationResult(
            subtotal=subtotal,
            tax_breakdown=breakdown,
            tax_total=total,
            grand_total=round_money(subtotal + total),
            tax_rate_percent=ZERO,
            is_mixed_rate=True,
            transaction_type=self.transaction_type(billing_address.state),
        )
