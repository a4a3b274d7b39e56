"""
Pricing Service Contracts

Test data contract for pricing_service testing.
"""

from .data_contract import (
    PricingTestDataFactory,
    REFERENCE_NOW,
    SELLER_ADDRESS,
    SELLER_GSTIN,
    SELLER_STATE,
)

__all__ = [
    "PricingTestDataFactory",
    "REFERENCE_NOW",
    "SELLER_ADDRESS",
    "SELLER_GSTIN",
    "SELLER_STATE",
]
