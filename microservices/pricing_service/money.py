"""
Monetary helpers

Every amount in the pricing engine is a Decimal rounded half-up to paise.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Amount = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWO = Decimal("2")
PAISE = Decimal("0.01")


def to_decimal(value: Amount) -> Decimal:
    """Convert an input amount to Decimal (floats go through str to avoid binary noise)"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Amount) -> Decimal:
    """Round to 2 decimal places, half-up"""
    return to_decimal(value).quantize(PAISE, rounding=ROUND_HALF_UP)
