"""
Unit Test Fixtures for Pricing Service

Provides calculators wired the way the factory wires them, plus an
in-memory coupon source.
"""

import pytest
from typing import Dict, List, Optional

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config import PricingConfig
from microservices.pricing_service.coupon_engine import CouponEngine
from microservices.pricing_service.exemption_policy import ExemptionPolicy
from microservices.pricing_service.factory import create_pricing_service
from microservices.pricing_service.models import Coupon
from microservices.pricing_service.order_totals import OrderTotalsAssembler
from microservices.pricing_service.rate_table import RateTable
from microservices.pricing_service.reverse_tax import ReverseTaxCalculator
from microservices.pricing_service.tax_calculator import TaxCalculator
from tests.contracts.pricing.data_contract import (
    REFERENCE_NOW,
    SELLER_ADDRESS,
    SELLER_GSTIN,
    SELLER_STATE,
    PricingTestDataFactory,
)


# ====================
# Mock Coupon Source
# ====================


class InMemoryCouponSource:
    """Coupon store stand-in for unit testing"""

    def __init__(self, coupons: Optional[List[Coupon]] = None):
        self.coupons: Dict[str, Coupon] = {}
        for coupon in coupons or []:
            self.add(coupon)

    def add(self, coupon: Coupon) -> None:
        self.coupons[coupon.code] = coupon

    def get_coupon_by_code(self, code: str) -> Optional[Coupon]:
        return self.coupons.get(code.strip().upper())

    def list_active_coupons(self) -> List[Coupon]:
        return [
            c for c in self.coupons.values()
            if c.is_active and (c.valid_until is None or c.valid_until > REFERENCE_NOW)
        ]


# ====================
# Fixtures
# ====================


@pytest.fixture
def factory():
    return PricingTestDataFactory


@pytest.fixture
def pricing_config() -> PricingConfig:
    return PricingConfig(
        seller_gstin=SELLER_GSTIN,
        seller_address=SELLER_ADDRESS,
        seller_home_state=SELLER_STATE,
    )


@pytest.fixture
def rate_table() -> RateTable:
    return RateTable(seller_home_state=SELLER_STATE)


@pytest.fixture
def tax_calculator(rate_table) -> TaxCalculator:
    return TaxCalculator(rate_table)


@pytest.fixture
def reverse_calculator(rate_table) -> ReverseTaxCalculator:
    return ReverseTaxCalculator(rate_table)


@pytest.fixture
def exemption_policy() -> ExemptionPolicy:
    return ExemptionPolicy()


@pytest.fixture
def coupon_engine() -> CouponEngine:
    return CouponEngine(clock=lambda: REFERENCE_NOW)


@pytest.fixture
def assembler(tax_calculator, coupon_engine, exemption_policy) -> OrderTotalsAssembler:
    return OrderTotalsAssembler(tax_calculator, coupon_engine, exemption_policy=exemption_policy)


@pytest.fixture
def coupon_source() -> InMemoryCouponSource:
    return InMemoryCouponSource()


@pytest.fixture
def pricing_service(pricing_config, coupon_source, coupon_engine):
    return create_pricing_service(pricing_config, coupon_source=coupon_source, coupon_engine=coupon_engine)


@pytest.fixture
def intrastate(factory):
    return factory.make_intrastate_address()


@pytest.fixture
def interstate(factory):
    return factory.make_interstate_address()
