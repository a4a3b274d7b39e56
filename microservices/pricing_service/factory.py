"""
Pricing Service Factory

Builds PricingService and its calculators from configuration. The rate
table is constructed once here and shared by every component.

Usage:
    from .factory import create_pricing_service
    service = create_pricing_service(config, coupon_source)
"""

import logging
from typing import Optional

from core.config import PricingConfig, get_settings

from .coupon_engine import CouponEngine
from .exemption_policy import ExemptionPolicy
from .invoice import TaxInvoiceGenerator
from .order_totals import OrderTotalsAssembler
from .pricing_service import PricingService
from .protocols import CouponSourceProtocol
from .rate_table import RateTable
from .reverse_tax import ReverseTaxCalculator
from .tax_calculator import TaxCalculator

logger = logging.getLogger(__name__)


def create_pricing_service(
    config: Optional[PricingConfig] = None,
    coupon_source: Optional[CouponSourceProtocol] = None,
    coupon_engine: Optional[CouponEngine] = None,
) -> PricingService:
    """
    Create PricingService with all components

    Args:
        config: Pricing configuration (loaded from environment if not provided)
        coupon_source: Read-only coupon store
        coupon_engine: Coupon engine override (e.g. with a fixed clock)

    Returns:
        Fully initialized PricingService instance
    """
    if config is None:
        config = get_settings()

    rate_table = RateTable.from_config(config)
    tax_calculator = TaxCalculator(rate_table)
    coupon_engine = coupon_engine or CouponEngine()
    # None disables exemptions for checkout and for check_exemption alike
    exemption_policy = ExemptionPolicy.from_config(config) if config.apply_exemptions else None

    totals_assembler = OrderTotalsAssembler(
        tax_calculator,
        coupon_engine,
        exemption_policy=exemption_policy,
        shipping_threshold=config.shipping_threshold,
        flat_shipping_fee=config.flat_shipping_fee,
    )

    logger.info("PricingService created from configuration")

    return PricingService(
        rate_table=rate_table,
        tax_calculator=tax_calculator,
        coupon_engine=coupon_engine,
        totals_assembler=totals_assembler,
        reverse_calculator=ReverseTaxCalculator(rate_table),
        invoice_generator=TaxInvoiceGenerator.from_config(rate_table, config),
        exemption_policy=exemption_policy,
        coupon_source=coupon_source,
        default_category=config.default_category,
    )


__all__ = ["create_pricing_service"]
