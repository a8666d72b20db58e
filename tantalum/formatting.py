"""
Magnitude Formatting
====================

Renders exact rationals without losing precision:

    105           -> "105"
    1689.8112     -> "1689.8112"   (terminating decimal, exact)
    1/3           -> "1/3"         (non-terminating, kept as a fraction)

format_magnitude(value, spec) applies a standard format spec (".2f", ".6e",
...) through a high-precision Decimal instead of a float.
"""

from decimal import Decimal, localcontext
from fractions import Fraction

# Digits carried when a format spec forces a decimal approximation
DECIMAL_PRECISION = 60


def _terminating_exponent(denominator: int):
    """Smallest k with denominator | 10**k, or None if the expansion repeats."""
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    if denominator != 1:
        return None
    return max(twos, fives)


def exact_str(value: Fraction) -> str:
    """Exact textual form of a rational."""
    if value.denominator == 1:
        return str(value.numerator)

    k = _terminating_exponent(value.denominator)
    if k is None:
        return f"{value.numerator}/{value.denominator}"

    scaled = abs(value.numerator) * 10 ** k // value.denominator
    digits = str(scaled).rjust(k + 1, '0')
    whole, frac = digits[:-k], digits[-k:].rstrip('0')
    sign = '-' if value < 0 else ''
    return f"{sign}{whole}.{frac}"


def to_decimal(value: Fraction, precision: int = DECIMAL_PRECISION) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = precision
        return Decimal(value.numerator) / Decimal(value.denominator)


def format_magnitude(value: Fraction, spec: str = "") -> str:
    if not spec:
        return exact_str(value)
    return format(to_decimal(value), spec)


def format_quantity(value: Fraction, unit_symbol: str, spec: str = "") -> str:
    text = format_magnitude(value, spec)
    return f"{text} {unit_symbol}" if unit_symbol else text


__all__ = ['DECIMAL_PRECISION', 'exact_str', 'to_decimal', 'format_magnitude',
           'format_quantity']
