"""
Reverse GST Calculator

Recovers the pre-tax amount and the tax portion from a tax-inclusive total,
for refunds and cancellations. The CGST/SGST/IGST split is not recovered;
refund callers recompute the forward split on amount_before_tax.
"""

from .models import Address, ReverseTaxResult
from .money import Amount, HUNDRED, round_money
from .rate_table import RateTable
from .tax_calculator import DEFAULT_PRODUCT_CATEGORY, ensure_non_negative


class ReverseTaxCalculator:

    def __init__(self, rate_table: RateTable):
        self.rate_table = rate_table

    def calculate_reverse_gst(
        self,
        amount_including_tax: Amount,
        billing_address: Address,
        category: str = DEFAULT_PRODUCT_CATEGORY,
    ) -> ReverseTaxResult:
        """amount_before_tax = amount / (1 + rate / 100); both parts rounded from the unrounded quotient"""
        amount = ensure_non_negative(amount_including_tax, "amount_including_tax")
        rate = self.rate_table.rate_for(category)

        before_tax = amount / (1 + rate / HUNDRED)
        return ReverseTaxResult(
            amount_including_tax=round_money(amount),
            amount_before_tax=round_money(before_tax),
            tax_amount=round_money(amount - before_tax),
            tax_rate_percent=rate,
        )
