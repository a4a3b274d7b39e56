"""
Pricing Service Protocols

Defines interfaces for the external collaborators of the pricing engine
and the exceptions it raises. NO import-time I/O dependencies.
"""

from decimal import Decimal
from typing import List, Optional, Protocol, runtime_checkable

from .models import Coupon, CouponErrorCode


# ====================
# Collaborator Protocols
# ====================


@runtime_checkable
class CouponSourceProtocol(Protocol):
    """Read-only access to coupon snapshots (persistence lives elsewhere)"""

    def get_coupon_by_code(self, code: str) -> Optional[Coupon]:
        """Get coupon by code, case-insensitive"""
        ...

    def list_active_coupons(self) -> List[Coupon]:
        """List coupons that are active and not past valid_until"""
        ...


# ====================
# Exceptions
# ====================


class PricingServiceError(Exception):
    """Base exception for pricing service errors"""
    pass


class InvalidAmountError(PricingServiceError):
    """Raised when a monetary input is negative (caller bug)"""

    def __init__(self, message: str, amount: Optional[Decimal] = None):
        super().__init__(message)
        self.amount = amount


class RateTableError(PricingServiceError):
    """Raised when a rate table is missing its default entry or has a negative rate"""
    pass


class CouponError(PricingServiceError):
    """Base class for recoverable coupon rejections"""

    code: CouponErrorCode

    def __init__(self, message: str, coupon_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.coupon_code = coupon_code


class CouponExpiredError(CouponError):
    """Raised when a coupon is past valid_until or before valid_from"""
    code = CouponErrorCode.EXPIRED


class CouponInactiveError(CouponError):
    """Raised when a coupon has been deactivated"""
    code = CouponErrorCode.INACTIVE


class CouponUsageExceededError(CouponError):
    """Raised when a coupon has reached its usage limit"""
    code = CouponErrorCode.USAGE_EXCEEDED


class CouponMinimumNotMetError(CouponError):
    """Raised when the order is below the coupon's minimum amount"""
    code = CouponErrorCode.MINIMUM_NOT_MET

    def __init__(self, message: str, coupon_code: Optional[str] = None, minimum: Optional[Decimal] = None):
        super().__init__(message, coupon_code)
        self.minimum = minimum


class CouponNotFoundError(CouponError):
    """Raised when no coupon matches the given code"""
    code = CouponErrorCode.NOT_FOUND


__all__ = [
    "CouponSourceProtocol",
    "PricingServiceError",
    "InvalidAmountError",
    "RateTableError",
    "CouponError",
    "CouponExpiredError",
    "CouponInactiveError",
    "CouponUsageExceededError",
    "CouponMinimumNotMetError",
    "CouponNotFoundError",
]
