"""
Coupon Engine

Validates coupon snapshots against an order amount and computes a bounded
discount. Never changes usage counters; recording usage is the coupon
store's job once the order is placed.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Iterable, Optional

from .models import BestCouponResult, Coupon, CouponType, DiscountResult
from .money import Amount, HUNDRED, ZERO, round_money, to_decimal
from .protocols import (
    CouponError,
    CouponExpiredError,
    CouponInactiveError,
    CouponMinimumNotMetError,
    CouponNotFoundError,
    CouponUsageExceededError,
    InvalidAmountError,
)

logger = logging.getLogger(__name__)


def _utc(value: datetime) -> datetime:
    # naive timestamps from the coupon store are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def savings_message(result: DiscountResult) -> str:
    return f"Save ₹{result.discount_amount} with code {result.coupon.code}"


class CouponEngine:
    """Coupon validation and best-coupon selection"""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            clock: Returns the current time; defaults to UTC now
        """
        self.clock = clock or _utc_now

    # Validation

    def validate(self, coupon: Coupon, order_amount: Amount, now: Optional[datetime] = None) -> DiscountResult:
        """
        Validate a coupon and compute its discount

        Checks run in order: validity window, active flag, usage limit,
        minimum order amount.

        Raises:
            CouponExpiredError, CouponInactiveError, CouponUsageExceededError,
            CouponMinimumNotMetError: coupon rejected
            InvalidAmountError: order_amount is negative
        """
        amount = to_decimal(order_amount)
        if amount < 0:
            raise InvalidAmountError(f"order_amount must be >= 0, got {amount}", amount=amount)

        current = _utc(now or self.clock())

        if coupon.valid_until is not None and _utc(coupon.valid_until) < current:
            raise CouponExpiredError("Coupon has expired", coupon.code)
        if coupon.valid_from is not None and _utc(coupon.valid_from) > current:
            raise CouponExpiredError("Coupon is not yet active", coupon.code)

        if not coupon.is_active:
            raise CouponInactiveError("Coupon is no longer active", coupon.code)

        if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
            raise CouponUsageExceededError(
                f"Coupon usage limit reached ({coupon.usage_limit} uses)", coupon.code
            )

        if coupon.minimum_order_amount is not None and amount < coupon.minimum_order_amount:
            raise CouponMinimumNotMetError(
                f"Minimum order amount of ₹{coupon.minimum_order_amount} required",
                coupon.code,
                minimum=coupon.minimum_order_amount,
            )

        discount = round_money(self._bounded_discount(coupon, amount))
        return DiscountResult(
            coupon=coupon,
            order_amount=amount,
            discount_amount=discount,
            final_amount=round_money(amount - discount),
        )

    @staticmethod
    def _bounded_discount(coupon: Coupon, amount: Decimal) -> Decimal:
        if coupon.type == CouponType.PERCENTAGE:
            discount = amount * coupon.value / HUNDRED
        else:
            discount = coupon.value

        if coupon.maximum_discount_amount is not None:
            discount = min(discount, coupon.maximum_discount_amount)
        return max(ZERO, min(discount, amount))

    # Lookup

    @staticmethod
    def find_by_code(code: str, coupons: Iterable[Coupon]) -> Coupon:
        """Case-insensitive code lookup"""
        wanted = code.strip().upper()
        for coupon in coupons:
            if coupon.code == wanted:
                return coupon
        raise CouponNotFoundError("Invalid coupon code", wanted)

    def validate_code(
        self,
        code: str,
        coupons: Iterable[Coupon],
        order_amount: Amount,
        now: Optional[datetime] = None,
    ) -> DiscountResult:
        return self.validate(self.find_by_code(code, coupons), order_amount, now)

    # Selection

    def select_best(
        self,
        candidates: Iterable[Coupon],
        order_amount: Amount,
        now: Optional[datetime] = None,
    ) -> Optional[DiscountResult]:
        """
        Pick the coupon giving the largest discount

        Ties on discount go to the lexicographically smallest code, so the
        result never depends on candidate order.

        Returns:
            Best DiscountResult, or None if nothing validates or order_amount <= 0
        """
        amount = to_decimal(order_amount)
        if amount <= 0:
            return None

        current = now or self.clock()
        best: Optional[DiscountResult] = None
        for coupon in candidates:
            try:
                result = self.validate(coupon, amount, current)
            except CouponError as e:
                logger.debug(f"Coupon {coupon.code} not eligible: {e.message}")
                continue

            if best is None or (-result.discount_amount, result.coupon.code) < (-best.discount_amount, best.coupon.code):
                best = result

        return best

    def best_for_order(
        self,
        candidates: Iterable[Coupon],
        order_amount: Amount,
        now: Optional[datetime] = None,
    ) -> Optional[BestCouponResult]:
        best = self.select_best(candidates, order_amount, now)
        if best is None:
            return None
        return BestCouponResult(discount=best, savings_message=savings_message(best))
