"""
Pricing Service Business Logic

Entry point used by the checkout and refund workflows. Wires the rate
table, tax calculators, exemption policy and coupon engine together.
Every operation is a pure computation over its inputs; coupon snapshots
are read from the injected coupon source.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from .coupon_engine import CouponEngine
from .exemption_policy import ExemptionPolicy
from .invoice import TaxInvoiceGenerator
from .models import (
    Address,
    BestCouponResult,
    Coupon,
    DiscountResult,
    ExemptionDecision,
    OrderLineItem,
    OrderTotals,
    RefundBreakdown,
    TaxCalculationResult,
    TaxInvoice,
)
from .money import Amount, to_decimal
from .order_totals import OrderTotalsAssembler
from .protocols import CouponNotFoundError, CouponSourceProtocol, InvalidAmountError
from .rate_table import RateTable
from .reverse_tax import ReverseTaxCalculator
from .tax_calculator import TaxCalculator, ensure_non_negative

logger = logging.getLogger(__name__)


class PricingService:
    """
    Order pricing and GST computation

    Handles coupon validation, checkout totals, tax invoices and refunds.
    """

    def __init__(
        self,
        rate_table: RateTable,
        tax_calculator: TaxCalculator,
        coupon_engine: CouponEngine,
        totals_assembler: OrderTotalsAssembler,
        reverse_calculator: ReverseTaxCalculator,
        invoice_generator: TaxInvoiceGenerator,
        exemption_policy: Optional[ExemptionPolicy] = None,
        coupon_source: Optional[CouponSourceProtocol] = None,
        default_category: str = "gifts",
    ):
        self.rate_table = rate_table
        self.tax_calculator = tax_calculator
        self.coupon_engine = coupon_engine
        self.totals_assembler = totals_assembler
        self.reverse_calculator = reverse_calculator
        self.invoice_generator = invoice_generator
        self.exemption_policy = exemption_policy
        self.coupon_source = coupon_source
        self.default_category = default_category

        logger.info(f"PricingService initialized (seller state: {rate_table.seller_home_state})")

    # Coupons

    def validate_coupon(self, code: str, order_amount: Amount, now: Optional[datetime] = None) -> DiscountResult:
        """
        Validate a coupon code against an order amount

        Raises:
            InvalidAmountError: order_amount is not positive
            CouponError: coupon unknown or rejected
        """
        amount = self._positive_order_amount(order_amount)
        coupon = self.coupon_source.get_coupon_by_code(code) if self.coupon_source else None
        if coupon is None:
            raise CouponNotFoundError("Invalid coupon code", code.strip().upper())

        result = self.coupon_engine.validate(coupon, amount, now)
        logger.info(f"Coupon {coupon.code} valid: discount {result.discount_amount} on {amount}")
        return result

    def best_coupon_for_order(self, order_amount: Amount, now: Optional[datetime] = None) -> Optional[BestCouponResult]:
        """Best active coupon for an order amount, or None"""
        amount = self._positive_order_amount(order_amount)
        candidates: List[Coupon] = self.coupon_source.list_active_coupons() if self.coupon_source else []
        return self.coupon_engine.best_for_order(candidates, amount, now)

    # Checkout

    def calculate_order_totals(
        self,
        subtotal: Amount,
        billing_address: Address,
        coupon: Optional[Coupon] = None,
        category: Optional[str] = None,
    ) -> OrderTotals:
        return self.totals_assembler.assemble(
            subtotal, billing_address, coupon=coupon, category=category or self.default_category
        )

    def calculate_cart_totals(
        self,
        items: Sequence[OrderLineItem],
        billing_address: Address,
        coupon: Optional[Coupon] = None,
    ) -> OrderTotals:
        return self.totals_assembler.assemble_items(items, billing_address, coupon=coupon)

    def calculate_tax(
        self,
        subtotal: Amount,
        billing_address: Address,
        category: Optional[str] = None,
    ) -> TaxCalculationResult:
        return self.tax_calculator.calculate_gst(subtotal, billing_address, category or self.default_category)

    def check_exemption(self, order_amount: Amount, category: Optional[str] = None) -> ExemptionDecision:
        amount = ensure_non_negative(order_amount, "order_amount")
        if self.exemption_policy is None:
            return ExemptionDecision(exempt=False)
        return self.exemption_policy.check_exemption(amount, category or self.default_category)

    def generate_invoice(
        self,
        calculation: TaxCalculationResult,
        billing_address: Address,
        category: Optional[str] = None,
        exemption: Optional[ExemptionDecision] = None,
    ) -> TaxInvoice:
        return self.invoice_generator.generate(calculation, billing_address, category, exemption)

    # Refunds

    def calculate_refund(
        self,
        amount_including_tax: Amount,
        billing_address: Address,
        category: Optional[str] = None,
    ) -> RefundBreakdown:
        """
        Split a tax-inclusive refund into pre-tax amount and GST components

        The component split is recomputed forward on the recovered pre-tax
        amount rather than scaled from the original invoice.
        """
        category = category or self.default_category
        reverse = self.reverse_calculator.calculate_reverse_gst(amount_including_tax, billing_address, category)
        forward = self.tax_calculator.calculate_gst(reverse.amount_before_tax, billing_address, category)
        return RefundBreakdown(reverse=reverse, forward=forward)

    # Rates

    def get_available_rates(self) -> Dict[str, Decimal]:
        return self.rate_table.available_rates()

    @staticmethod
    def _positive_order_amount(order_amount: Amount) -> Decimal:
        amount = to_decimal(order_amount)
        if amount <= 0:
            raise InvalidAmountError("Valid order amount is required", amount=amount)
        return amount
