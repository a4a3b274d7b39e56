"""
GST Rate Table

Immutable category -> GST rate map, Indian state -> code map, the seller's
home state and per-category HSN codes. Built once at startup and shared by
every calculator.
"""

import logging
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .models import RateEntry
from .money import Amount, to_decimal
from .protocols import RateTableError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "default"

DEFAULT_GST_RATES: Mapping[str, Decimal] = MappingProxyType({
    "default": Decimal("18"),
    "essential": Decimal("5"),
    "luxury": Decimal("28"),
    "books": Decimal("0"),
    "food": Decimal("5"),
    "electronics": Decimal("18"),
    "clothing": Decimal("12"),
    "gifts": Decimal("18"),
})

INDIAN_STATE_CODES: Mapping[str, str] = MappingProxyType({
    "Andhra Pradesh": "AP",
    "Arunachal Pradesh": "AR",
    "Assam": "AS",
    "Bihar": "BR",
    "Chhattisgarh": "CG",
    "Goa": "GA",
    "Gujarat": "GJ",
    "Haryana": "HR",
    "Himachal Pradesh": "HP",
    "Jharkhand": "JH",
    "Karnataka": "KA",
    "Kerala": "KL",
    "Madhya Pradesh": "MP",
    "Maharashtra": "MH",
    "Manipur": "MN",
    "Meghalaya": "ML",
    "Mizoram": "MZ",
    "Nagaland": "NL",
    "Odisha": "OR",
    "Punjab": "PB",
    "Rajasthan": "RJ",
    "Sikkim": "SK",
    "Tamil Nadu": "TN",
    "Telangana": "TS",
    "Tripura": "TR",
    "Uttar Pradesh": "UP",
    "Uttarakhand": "UK",
    "West Bengal": "WB",
    "Delhi": "DL",
    "Jammu and Kashmir": "JK",
    "Ladakh": "LA",
    "Chandigarh": "CH",
    "Dadra and Nagar Haveli and Daman and Diu": "DN",
    "Lakshadweep": "LD",
    "Puducherry": "PY",
    "Andaman and Nicobar Islands": "AN",
})

# HSN 9505: festive and novelty articles (gift items)
DEFAULT_HSN_CODE = "9505"


class RateTable:
    """
    Read-only GST configuration

    Unknown categories fall back to the default rate and unknown states are
    still usable for the interstate check; both fallbacks are logged.
    """

    __slots__ = ("_rates", "_state_codes", "_hsn_codes", "_default_hsn_code", "_seller_home_state")

    def __init__(
        self,
        seller_home_state: str,
        rates: Optional[Mapping[str, Amount]] = None,
        state_codes: Optional[Mapping[str, str]] = None,
        hsn_codes: Optional[Mapping[str, str]] = None,
        default_hsn_code: str = DEFAULT_HSN_CODE,
    ):
        """
        Args:
            seller_home_state: State where the seller is GST-registered
            rates: Category -> rate percent; must contain "default"
            state_codes: State name -> two-letter code
            hsn_codes: Category -> HSN code overrides
            default_hsn_code: HSN code for categories without an override
        """
        rate_source = DEFAULT_GST_RATES if rates is None else rates
        parsed: Dict[str, Decimal] = {}
        for category, rate in rate_source.items():
            value = to_decimal(rate)
            if value < 0:
                raise RateTableError(f"GST rate for '{category}' must be >= 0, got {value}")
            parsed[category] = value
        if DEFAULT_CATEGORY not in parsed:
            raise RateTableError("Rate table must define a 'default' rate")

        object.__setattr__(self, "_rates", MappingProxyType(parsed))
        if state_codes is None:
            state_codes = INDIAN_STATE_CODES
        object.__setattr__(self, "_state_codes", MappingProxyType(dict(state_codes)))
        object.__setattr__(self, "_hsn_codes", MappingProxyType(dict(hsn_codes or {})))
        object.__setattr__(self, "_default_hsn_code", default_hsn_code)
        object.__setattr__(self, "_seller_home_state", seller_home_state)

    def __setattr__(self, name, value):
        raise AttributeError("RateTable is immutable")

    @property
    def seller_home_state(self) -> str:
        return self._seller_home_state

    @property
    def default_rate(self) -> Decimal:
        return self._rates[DEFAULT_CATEGORY]

    def rate_for(self, category: Optional[str]) -> Decimal:
        """Get the GST rate for a category, falling back to the default rate"""
        rate = self._rates.get(category) if category is not None else None
        if rate is None:
            logger.warning(
                f"Unknown product category '{category}', using default GST rate {self.default_rate}%",
                extra={"event": "gst_rate_fallback", "category": category},
            )
            return self.default_rate
        return rate

    def entries(self) -> List[RateEntry]:
        return [RateEntry(category=c, rate_percent=r) for c, r in self._rates.items()]

    def available_rates(self) -> Dict[str, Decimal]:
        """Copy of the category -> rate map"""
        return dict(self._rates)

    def state_code(self, state_name: str) -> Optional[str]:
        return self._state_codes.get(state_name)

    def is_known_state(self, state_name: str) -> bool:
        return state_name in self._state_codes

    def hsn_code_for(self, category: Optional[str]) -> str:
        """HSN code printed on invoices for a category"""
        if category is None:
            return self._default_hsn_code
        return self._hsn_codes.get(category, self._default_hsn_code)

    @classmethod
    def from_config(cls, config) -> "RateTable":
        """Build the table from a PricingConfig"""
        return cls(
            seller_home_state=config.seller_home_state,
            hsn_codes=config.hsn_codes,
            default_hsn_code=config.default_hsn_code,
        )
