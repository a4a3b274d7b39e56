"""
Order Totals Assembler

Fixed pipeline: subtotal -> coupon discount -> taxable base -> exemption
check -> GST on the taxable base -> shipping -> grand total.

GST is charged on the post-discount amount, while free-shipping eligibility
is decided on the pre-discount subtotal.
"""

import logging
from decimal import Decimal, ROUND_DOWN
from typing import List, Optional, Sequence, Tuple

from .coupon_engine import CouponEngine
from .exemption_policy import ExemptionPolicy
from .models import Address, Coupon, ExemptionDecision, OrderLineItem, OrderTotals, TaxBreakdown
from .money import Amount, PAISE, ZERO, round_money, to_decimal
from .protocols import CouponError
from .tax_calculator import DEFAULT_PRODUCT_CATEGORY, TaxCalculator, ensure_non_negative

logger = logging.getLogger(__name__)

SHIPPING_THRESHOLD = Decimal("999")
FLAT_SHIPPING_FEE = Decimal("99")

NOT_EXEMPT = ExemptionDecision(exempt=False)


class OrderTotalsAssembler:
    """Builds checkout totals from the tax calculator and coupon engine"""

    def __init__(
        self,
        tax_calculator: TaxCalculator,
        coupon_engine: CouponEngine,
        exemption_policy: Optional[ExemptionPolicy] = None,
        shipping_threshold: Amount = SHIPPING_THRESHOLD,
        flat_shipping_fee: Amount = FLAT_SHIPPING_FEE,
    ):
        """
        Args:
            tax_calculator: Forward GST calculator
            coupon_engine: Coupon validation
            exemption_policy: Exemption rules; None disables exemptions
            shipping_threshold: Subtotals above this ship free
            flat_shipping_fee: Shipping charged otherwise
        """
        self.tax_calculator = tax_calculator
        self.coupon_engine = coupon_engine
        self.exemption_policy = exemption_policy
        self.shipping_threshold = to_decimal(shipping_threshold)
        self.flat_shipping_fee = to_decimal(flat_shipping_fee)

    # Helpers

    def _discount(self, coupon: Optional[Coupon], subtotal: Decimal) -> Tuple[Decimal, Optional[str]]:
        """Coupon rejections are not fatal: checkout continues without a discount"""
        if coupon is None:
            return round_money(ZERO), None
        try:
            return self.coupon_engine.validate(coupon, subtotal).discount_amount, None
        except CouponError as e:
            logger.warning(
                f"Coupon {coupon.code} rejected at checkout: {e.message}",
                extra={"event": "coupon_rejected", "coupon_code": coupon.code, "reason": e.code.value},
            )
            return round_money(ZERO), e.message

    def _exemption(self, amount: Decimal, category: str) -> ExemptionDecision:
        if self.exemption_policy is None:
            return NOT_EXEMPT
        return self.exemption_policy.check_exemption(amount, category)

    def _shipping(
        self,
        subtotal: Decimal,
        shipping_threshold: Optional[Amount],
        flat_shipping_fee: Optional[Amount],
    ) -> Decimal:
        threshold = self.shipping_threshold if shipping_threshold is None else to_decimal(shipping_threshold)
        fee = self.flat_shipping_fee if flat_shipping_fee is None else to_decimal(flat_shipping_fee)
        return round_money(ZERO if subtotal > threshold else fee)

    # Assembly

    def assemble(
        self,
        subtotal: Amount,
        billing_address: Address,
        coupon: Optional[Coupon] = None,
        category: str = DEFAULT_PRODUCT_CATEGORY,
        shipping_threshold: Optional[Amount] = None,
        flat_shipping_fee: Optional[Amount] = None,
    ) -> OrderTotals:
        """
        Assemble totals for a single-category order

        Args:
            subtotal: Cart subtotal before discount and tax
            billing_address: Customer billing address
            coupon: Coupon applied by the customer, if any
            category: Product category for the GST rate
            shipping_threshold: Override of the free-shipping threshold
            flat_shipping_fee: Override of the flat shipping fee

        Raises:
            InvalidAmountError: subtotal is negative
        """
        amount = round_money(ensure_non_negative(subtotal, "subtotal"))
        discount, coupon_error = self._discount(coupon, amount)
        taxable_base = round_money(amount - discount)

        exemption = self._exemption(taxable_base, category)
        if exemption.exempt:
            breakdown = TaxBreakdown()
        else:
            breakdown = self.tax_calculator.calculate_gst(taxable_base, billing_address, category).tax_breakdown
        tax = round_money(breakdown.total)

        shipping = self._shipping(amount, shipping_threshold, flat_shipping_fee)
        return OrderTotals(
            subtotal=amount,
            discount=discount,
            coupon_code=coupon.code if coupon is not None and coupon_error is None else None,
            coupon_error=coupon_error,
            taxable_base=taxable_base,
            tax=tax,
            tax_breakdown=breakdown,
            exemption=exemption,
            shipping=shipping,
            grand_total=round_money(taxable_base + tax + shipping),
        )

    def assemble_items(
        self,
        items: Sequence[OrderLineItem],
        billing_address: Address,
        coupon: Optional[Coupon] = None,
        shipping_threshold: Optional[Amount] = None,
        flat_shipping_fee: Optional[Amount] = None,
    ) -> OrderTotals:
        """
        Assemble totals for a multi-category cart

        The coupon is validated against the cart subtotal and its discount is
        spread over the lines in proportion to their amounts, so the discounted
        lines always sum to the taxable base. Each discounted line is then taxed
        at its own category rate.
        """
        amount = round_money(sum((round_money(item.amount) for item in items), ZERO))
        discount, coupon_error = self._discount(coupon, amount)
        taxable_base = round_money(amount - discount)

        discounted = self._allocate_discount(items, amount, discount)
        decisions = [self._exemption(taxable_base, line.category) for line in discounted]
        taxable_lines = [line for line, d in zip(discounted, decisions) if not d.exempt]

        # the order counts as exempt only when no line is left to tax
        exemption = decisions[0] if decisions and not taxable_lines else NOT_EXEMPT

        breakdown = self.tax_calculator.calculate_tax_for_items(taxable_lines, billing_address).tax_breakdown
        tax = round_money(breakdown.total)

        shipping = self._shipping(amount, shipping_threshold, flat_shipping_fee)
        return OrderTotals(
            subtotal=amount,
            discount=discount,
            coupon_code=coupon.code if coupon is not None and coupon_error is None else None,
            coupon_error=coupon_error,
            taxable_base=taxable_base,
            tax=tax,
            tax_breakdown=breakdown,
            exemption=exemption,
            shipping=shipping,
            grand_total=round_money(taxable_base + tax + shipping),
        )

    @staticmethod
    def _allocate_discount(
        items: Sequence[OrderLineItem],
        subtotal: Decimal,
        discount: Decimal,
    ) -> List[OrderLineItem]:
        if not items:
            return []
        amounts = [round_money(item.amount) for item in items]
        if discount == 0 or subtotal == 0:
            return [OrderLineItem(amount=a, category=i.category) for a, i in zip(amounts, items)]

        # largest remainder: floor every share to paise, then hand the
        # leftover paise to the lines with the biggest truncated fraction
        exact = [discount * amount / subtotal for amount in amounts]
        shares = [e.quantize(PAISE, rounding=ROUND_DOWN) for e in exact]
        leftover = int((discount - sum(shares, ZERO)) / PAISE)
        by_fraction = sorted(range(len(items)), key=lambda k: (shares[k] - exact[k], k))
        for k in by_fraction[:leftover]:
            shares[k] += PAISE

        return [
            OrderLineItem(amount=amount - share, category=item.category)
            for amount, share, item in zip(amounts, shares, items)
        ]
