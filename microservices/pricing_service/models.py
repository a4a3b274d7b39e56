"""
Pricing Service Data Models

Pydantic value objects for GST calculation, coupons, order totals,
refunds and tax invoices. All models are immutable and computed per request.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ====================
# Enum Types
# ====================

class TransactionType(str, Enum):
    """Whether the buyer's billing state differs from the seller's state"""
    INTERSTATE = "INTERSTATE"
    INTRASTATE = "INTRASTATE"


class CouponType(str, Enum):
    """Coupon discount type"""
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponErrorCode(str, Enum):
    """Coupon rejection reasons"""
    EXPIRED = "expired"
    INACTIVE = "inactive"
    USAGE_EXCEEDED = "usage_exceeded"
    MINIMUM_NOT_MET = "minimum_not_met"
    NOT_FOUND = "not_found"


class _ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


# ====================
# Tax Models
# ====================

class RateEntry(_ValueObject):
    """GST rate for a product category"""
    category: str
    rate_percent: Decimal = Field(..., ge=0)


class Address(BaseModel):
    """Billing address as captured at checkout; only state is used here"""
    model_config = ConfigDict(frozen=True, extra="allow")

    state: str
    country: str = "India"


class TaxBreakdown(_ValueObject):
    """CGST/SGST (intrastate) or IGST (interstate) split"""
    cgst: Decimal = Decimal("0.00")
    sgst: Decimal = Decimal("0.00")
    igst: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")


class TaxCalculationResult(_ValueObject):
    """Result of a GST calculation

    tax_rate_percent is 0 with is_mixed_rate set when the result aggregates
    lines of different categories; it must not be displayed as a rate then.
    """
    subtotal: Decimal
    tax_breakdown: TaxBreakdown
    tax_total: Decimal
    grand_total: Decimal
    tax_rate_percent: Decimal
    is_mixed_rate: bool = False
    transaction_type: TransactionType


class OrderLineItem(_ValueObject):
    """A cart line for multi-category tax aggregation"""
    amount: Decimal = Field(..., ge=0)
    category: str = "gifts"


class ExemptionDecision(_ValueObject):
    """Outcome of the exemption rules"""
    exempt: bool
    reason: Optional[str] = None


class ReverseTaxResult(_ValueObject):
    """Tax-exclusive amount recovered from a tax-inclusive total"""
    amount_including_tax: Decimal
    amount_before_tax: Decimal
    tax_amount: Decimal
    tax_rate_percent: Decimal


class RefundBreakdown(_ValueObject):
    """Reverse calculation plus the forward split recomputed on the pre-tax amount"""
    reverse: ReverseTaxResult
    forward: TaxCalculationResult


# ====================
# Coupon Models
# ====================

class Coupon(_ValueObject):
    """Read-only coupon snapshot; usage counters are owned by the coupon store"""
    code: str = Field(..., min_length=1)
    type: CouponType
    value: Decimal = Field(..., ge=0)
    minimum_order_amount: Optional[Decimal] = Field(None, ge=0)
    maximum_discount_amount: Optional[Decimal] = Field(None, ge=0)
    usage_limit: Optional[int] = Field(None, ge=0)
    used_count: int = Field(default=0, ge=0)
    is_active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None

    coupon_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def check_percentage_range(self) -> "Coupon":
        if self.type == CouponType.PERCENTAGE and self.value > 100:
            raise ValueError("Percentage value must be between 0 and 100")
        return self


class DiscountResult(_ValueObject):
    """Discount granted by a validated coupon"""
    coupon: Coupon
    order_amount: Decimal
    discount_amount: Decimal = Field(..., ge=0)
    final_amount: Decimal = Field(..., ge=0)


class BestCouponResult(_ValueObject):
    """Best coupon for an order, with the storefront savings message"""
    discount: DiscountResult
    savings_message: str


# ====================
# Order Totals
# ====================

class OrderTotals(_ValueObject):
    """Checkout totals: subtotal -> discount -> taxable base -> tax -> shipping"""
    subtotal: Decimal
    discount: Decimal
    coupon_code: Optional[str] = None
    coupon_error: Optional[str] = None
    taxable_base: Decimal
    tax: Decimal
    tax_breakdown: TaxBreakdown
    exemption: ExemptionDecision
    shipping: Decimal
    grand_total: Decimal


# ====================
# Invoice Models
# ====================

class InvoiceSection(_ValueObject):
    type: TransactionType
    gst_type: str
    tax_breakdown: TaxBreakdown
    subtotal: Decimal
    tax_total: Decimal
    grand_total: Decimal


class ComplianceSection(_ValueObject):
    hsn_code: str
    place_of_supply: str
    tax_rate: Decimal
    is_reverse_charge: bool = False
    exemption_reason: Optional[str] = None


class BusinessSection(_ValueObject):
    gstin: str
    state: str
    address: str


class TaxInvoice(_ValueObject):
    """Structured GST tax invoice"""
    invoice: InvoiceSection
    compliance: ComplianceSection
    business: BusinessSection
