"""
Money coercion and rounding.

Every derived monetary value in the register passes through round2().
Amounts are Decimals quantized to cents with ROUND_HALF_UP, so 0.125
rounds to 0.13 (not banker's rounding) and float artifacts such as
0.1 + 0.2 never reach a total.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_safe_number(value: Any, fallback: Any = 0) -> Decimal:
    """
    Coerce a loosely-typed value to a finite Decimal.

    Accepts Decimal, int, float and numeric strings (surrounding whitespace
    allowed). Returns `fallback` (as a Decimal) for None, NaN, infinities,
    unparsable strings, or any error raised during conversion.

    Floats go through repr() so 0.1 becomes Decimal("0.1"), not its
    binary expansion.
    """
    if isinstance(fallback, float):
        fallback = repr(fallback)
    if value is None:
        return Decimal(fallback)
    try:
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, float):
            number = Decimal(repr(value))
        elif isinstance(value, (int, str)):
            number = Decimal(value.strip() if isinstance(value, str) else value)
        else:
            number = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(fallback)

    if not number.is_finite():
        return Decimal(fallback)
    return number


def round2(value: Any) -> Decimal:
    """Round to 2 decimal places, half-up. Non-numeric input rounds as 0."""
    return to_safe_number(value).quantize(CENT, rounding=ROUND_HALF_UP)


def is_falsy_amount(value: Any) -> bool:
    """
    Whether a raw amount counts as "not set".

    None, empty/blank strings, False, numeric zero and NaN are falsy.
    Non-numeric strings such as "abc" are NOT falsy; they coerce to 0
    later, in to_safe_number().
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (int, float, Decimal)):
        number = to_safe_number(value, fallback=0)
        return number == 0
    return False
