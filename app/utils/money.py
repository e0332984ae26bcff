# app/utils/money.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[Decimal, int, str]

ONE_HUNDRED = Decimal(100)
# Money and percentages are kept at two decimal places
SCALE = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, float):
        raise TypeError("Money values must not be floats")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def quantize(value: Number) -> Decimal:
    """Round a money amount half-up to two decimal places."""
    return to_decimal(value).quantize(SCALE, rounding=ROUND_HALF_UP)


def percentage(numerator: Number, denominator: Number) -> Decimal:
    """
    Return numerator / denominator * 100 rounded half-up to two decimals.

    Raises ZeroDivisionError when the denominator is zero instead of
    returning 0 or 100.
    """
    num = to_decimal(numerator)
    den = to_decimal(denominator)
    if den == 0:
        raise ZeroDivisionError("Cannot compute a percentage of a zero amount")
    return (num * ONE_HUNDRED / den).quantize(SCALE, rounding=ROUND_HALF_UP)
