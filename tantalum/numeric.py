"""
Exact Numeric Backend
=====================

Adapter over fractions.Fraction. Every magnitude and every scale factor in
tantalum passes through to_rational(), so no float ever reaches unit
arithmetic unless the caller handed one in (and then its exact binary value
is kept).
"""

from __future__ import annotations

import math
import numbers
from decimal import Decimal
from fractions import Fraction
from typing import Union

Number = Union[int, float, Fraction, Decimal, str]

ZERO = Fraction(0)
ONE = Fraction(1)


def is_number(value) -> bool:
    """True for values to_rational() accepts as a plain number (strings excluded)."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Number, Decimal))


def to_rational(value: Number) -> Fraction:
    """
    Convert a numeric value to an exact Fraction.

    Args:
        value: int, Fraction (or any numbers.Rational), Decimal, float or a
            numeric string such as "1.609344", "3/4" or "1e-3"

    Returns:
        Exact Fraction. Floats keep their exact binary value.

    Raises:
        TypeError: For booleans and non-numeric types
        ValueError: For NaN/infinity and unparseable strings
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise TypeError("Booleans are not magnitudes")
    if isinstance(value, numbers.Integral):
        return Fraction(int(value))
    if isinstance(value, numbers.Rational):
        return Fraction(int(value.numerator), int(value.denominator))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Non-finite magnitude: {value}")
        return Fraction(value)
    if isinstance(value, numbers.Real):
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Non-finite magnitude: {value}")
        return Fraction(value)
    if isinstance(value, str):
        text = value.strip().replace("_", "")
        try:
            return Fraction(text)
        except (ValueError, ZeroDivisionError):
            raise ValueError(f"Cannot parse number: '{value}'") from None
    raise TypeError(f"Cannot use {type(value).__name__} as an exact magnitude")


def ratio(numerator: int, denominator: int = 1) -> Fraction:
    """Exact fraction numerator/denominator."""
    return Fraction(numerator, denominator)


__all__ = ['Number', 'ZERO', 'ONE', 'is_number', 'to_rational', 'ratio']
