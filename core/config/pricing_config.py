#!/usr/bin/env python3
"""Pricing engine configuration

Seller identity (GSTIN, registered address, home state) and checkout
thresholds. Seller identity has no defaults: it must come from the
environment or be passed explicitly.
"""
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, Tuple

def _bool(val: str) -> bool:
    return val.lower() == "true"

def _decimal(val: str, default: str) -> Decimal:
    try:
        return Decimal(val) if val else Decimal(default)
    except InvalidOperation:
        return Decimal(default)

def _mapping(val: str) -> Dict[str, str]:
    # "books:4901,food:2106"; entries without a colon are skipped
    pairs = (item.split(":", 1) for item in val.split(",") if ":" in item)
    return {key.strip(): value.strip() for key, value in pairs if key.strip() and value.strip()}

def _list(val: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if not val:
        return default
    return tuple(item.strip() for item in val.split(",") if item.strip())


class ConfigurationError(Exception):
    """Required configuration is missing"""
    pass


@dataclass(frozen=True)
class PricingConfig:
    """Pricing and tax configuration"""

    # ===========================================
    # Seller identity (required)
    # ===========================================
    seller_gstin: str
    seller_address: str
    seller_home_state: str

    # ===========================================
    # Checkout defaults
    # ===========================================
    default_category: str = "gifts"
    currency: str = "INR"
    shipping_threshold: Decimal = Decimal("999")
    flat_shipping_fee: Decimal = Decimal("99")

    # ===========================================
    # Exemptions
    # ===========================================
    apply_exemptions: bool = True
    small_order_threshold: Decimal = Decimal("500")
    exempt_categories: Tuple[str, ...] = ("books",)

    # ===========================================
    # Invoice compliance
    # ===========================================
    default_hsn_code: str = "9505"
    hsn_codes: Dict[str, str] = field(default_factory=dict, hash=False)

    @classmethod
    def from_env(cls) -> 'PricingConfig':
        """Load pricing configuration from environment variables"""
        required = {
            "SELLER_GSTIN": os.getenv("SELLER_GSTIN", ""),
            "SELLER_ADDRESS": os.getenv("SELLER_ADDRESS", ""),
            "SELLER_HOME_STATE": os.getenv("SELLER_HOME_STATE", ""),
        }
        missing = [key for key, value in required.items() if not value]
        if missing:
            raise ConfigurationError(f"Missing required pricing settings: {', '.join(missing)}")

        return cls(
            seller_gstin=required["SELLER_GSTIN"],
            seller_address=required["SELLER_ADDRESS"],
            seller_home_state=required["SELLER_HOME_STATE"],
            default_category=os.getenv("PRICING_DEFAULT_CATEGORY", "gifts"),
            currency=os.getenv("PRICING_CURRENCY", "INR"),
            shipping_threshold=_decimal(os.getenv("SHIPPING_FREE_THRESHOLD", ""), "999"),
            flat_shipping_fee=_decimal(os.getenv("SHIPPING_FLAT_FEE", ""), "99"),
            apply_exemptions=_bool(os.getenv("TAX_APPLY_EXEMPTIONS", "true")),
            small_order_threshold=_decimal(os.getenv("TAX_SMALL_ORDER_THRESHOLD", ""), "500"),
            exempt_categories=_list(os.getenv("TAX_EXEMPT_CATEGORIES", ""), ("books",)),
            default_hsn_code=os.getenv("INVOICE_DEFAULT_HSN", "9505"),
            hsn_codes=_mapping(os.getenv("INVOICE_HSN_CODES", "")),
        )
