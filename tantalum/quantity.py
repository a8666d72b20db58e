"""
Quantity — Exact Magnitudes with Units
======================================

A Quantity pairs an exact rational magnitude with a Unit. The magnitude is
kept exactly as given, in the given unit; conversion rescales on demand.

Examples:
    >>> from tantalum import Q, Mile, Hour, Kilo, Meter
    >>> speed = Q(60, Mile / Hour) + Q(45, Mile / Hour)
    >>> str(speed)
    '105 mi/h'
    >>> str(speed.convert_to(Kilo * Meter / Hour))
    '168.98112 km/h'

    >>> Q("4 in").to("m")
    Fraction(127, 1250)

Addition, subtraction, conversion and ordering require identical dimension
vectors and raise IncompatibleDimensions otherwise. Multiplication and
division always compose units.
"""

from __future__ import annotations

import re
from fractions import Fraction
from typing import Optional, Union

from .dimensions import Dimensions
from .errors import DivisionByZero, IncompatibleDimensions, UnitParseError
from .formatting import exact_str, format_quantity
from .numeric import Number, is_number, to_rational
from .units import UNITLESS, PrefixDef, PrefixedUnit, Unit, UnitDef, _UnitAlgebra

UnitLike = Union[Unit, UnitDef, PrefixDef, PrefixedUnit, str, None]

_QUANTITY_STRING = re.compile(
    r'^\s*([+-]?(?:\d[\d_]*(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?(?:\s*/\s*\d+(?![\d.]))?)\s*(.*?)\s*$'
)


def _resolve_unit(unit: UnitLike, registry=None) -> Unit:
    if unit is None:
        return UNITLESS
    if isinstance(unit, _UnitAlgebra):
        return unit.as_unit()
    if isinstance(unit, str):
        if registry is None:
            from .registry import get_registry
            registry = get_registry()
        return registry.parse(unit)
    raise TypeError(f"Expected a unit or unit string, got {type(unit).__name__}")


class Quantity:
    """
    An exact magnitude with a unit.

    Args:
        value: Number (int, Fraction, Decimal, float, numeric string), or a
            string with a unit like "4.5 km/h" when unit is omitted
        unit: Unit, UnitDef, PrefixDef, unit expression string, or None for
            a dimensionless quantity

    Quantities are immutable; every operator returns a new Quantity.
    """

    __slots__ = ('magnitude', 'unit')

    def __init__(self, value: Union[Number, Quantity], unit: UnitLike = None):
        if isinstance(value, Quantity):
            if unit is not None:
                raise TypeError("Cannot pass a unit together with a Quantity")
            magnitude, resolved = value.magnitude, value.unit
        elif isinstance(value, str) and unit is None:
            parsed = Quantity.parse(value)
            magnitude, resolved = parsed.magnitude, parsed.unit
        else:
            magnitude, resolved = to_rational(value), _resolve_unit(unit)
        object.__setattr__(self, 'magnitude', magnitude)
        object.__setattr__(self, 'unit', resolved)

    @classmethod
    def from_value_with_unit(cls, magnitude: Number, unit: UnitLike) -> Quantity:
        """Quantity with the magnitude stored as given (not normalised)."""
        return cls(magnitude, unit)

    @classmethod
    def parse(cls, text: str, registry=None) -> Quantity:
        """
        Parse "4 in", "3/4 h", "60 mi/h" or "5 /s".

        The number is read exactly ("0.1" is one tenth). A missing unit
        gives a dimensionless quantity; a unit starting with "/" is a
        reciprocal ("5 /s" is 5 1/s).
        """
        match = _QUANTITY_STRING.match(text)
        if not match:
            raise UnitParseError(f"Cannot parse quantity string: '{text}'")
        number, unit_text = match.groups()
        if unit_text.startswith('/'):
            unit_text = '1' + unit_text
        return cls(to_rational(number.replace(' ', '')), _resolve_unit(unit_text, registry))

    def __setattr__(self, name, value):
        raise AttributeError("Quantity is immutable")

    def __delattr__(self, name):
        raise AttributeError("Quantity is immutable")

    def __reduce__(self):
        return (Quantity, (self.magnitude, self.unit))

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def dimensions(self) -> Dimensions:
        return self.unit.dimensions

    @property
    def si(self) -> Fraction:
        """Magnitude in coherent SI units"""
        return self.magnitude * self.unit.scale + self.unit.offset

    def is_dimensionless(self) -> bool:
        return self.unit.is_dimensionless()

    def is_compatible(self, target: UnitLike) -> bool:
        """True when conversion to target is possible"""
        other = target.unit if isinstance(target, Quantity) else _resolve_unit(target)
        return self.dimensions.is_compatible(other.dimensions)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def convert_to(self, target: UnitLike) -> Quantity:
        """
        Same quantity expressed in target units.

        Raises:
            IncompatibleDimensions: If target has different dimensions
        """
        unit = _resolve_unit(target)
        if not self.dimensions.is_compatible(unit.dimensions):
            raise IncompatibleDimensions(self.unit, unit, "convert")
        if unit == self.unit:
            return self
        source = self.unit
        if source.offset or unit.offset:
            magnitude = (self.magnitude * source.scale + source.offset - unit.offset) / unit.scale
        else:
            magnitude = self.magnitude * (source.scale / unit.scale)
        return Quantity(magnitude, unit)

    def to(self, target: UnitLike) -> Fraction:
        """Magnitude in target units"""
        return self.convert_to(target).magnitude

    def to_base(self) -> Quantity:
        """Convert to the coherent SI unit of the same dimensions"""
        from .registry import base_unit
        return self.convert_to(base_unit(self.dimensions))

    def apply_prefixes(self) -> Quantity:
        """
        Fold prefixes into the magnitude: 5 km -> 5000 m.

        Standalone prefix factors and prefixed units both lose their prefix;
        the remaining unit atoms are kept as they are.
        """
        magnitude = self.magnitude
        factors = []
        for atom, exp in self.unit.factors:
            if isinstance(atom, PrefixDef):
                magnitude *= atom.factor ** exp
            elif isinstance(atom, PrefixedUnit):
                magnitude *= atom.prefix.factor ** exp
                factors.append((atom.unit, exp))
            else:
                factors.append((atom, exp))
        return Quantity(magnitude, Unit(tuple(factors)))

    def _coerce(self, other, operation: str) -> Optional[Quantity]:
        """other as a Quantity; plain numbers only combine with dimensionless values."""
        if isinstance(other, Quantity):
            return other
        if is_number(other):
            if not self.is_dimensionless():
                raise IncompatibleDimensions(self.unit, UNITLESS, operation)
            return Quantity(other)
        return None

    # -------------------------------------------------------------------------
    # Named operations
    # -------------------------------------------------------------------------

    def add(self, other: Union[Quantity, Number]) -> Quantity:
        """
        Sum in this quantity's unit.

        Raises:
            IncompatibleDimensions: If the dimension vectors differ
        """
        other_q = self._coerce(other, "add")
        if other_q is None:
            raise TypeError(f"Cannot add Quantity and {type(other).__name__}")
        if not self.dimensions.is_compatible(other_q.dimensions):
            raise IncompatibleDimensions(self.unit, other_q.unit, "add")
        return Quantity(self.magnitude + other_q.convert_to(self.unit).magnitude, self.unit)

    def subtract(self, other: Union[Quantity, Number]) -> Quantity:
        other_q = self._coerce(other, "subtract")
        if other_q is None:
            raise TypeError(f"Cannot subtract {type(other).__name__} from Quantity")
        if not self.dimensions.is_compatible(other_q.dimensions):
            raise IncompatibleDimensions(self.unit, other_q.unit, "subtract")
        return Quantity(self.magnitude - other_q.convert_to(self.unit).magnitude, self.unit)

    def multiply(self, other: Union[Quantity, Number, Unit]) -> Quantity:
        """Product; units compose, no compatibility required."""
        if isinstance(other, Quantity):
            return Quantity(self.magnitude * other.magnitude, self.unit * other.unit)
        if isinstance(other, _UnitAlgebra):
            return Quantity(self.magnitude, self.unit * other)
        if is_number(other):
            return Quantity(self.magnitude * to_rational(other), self.unit)
        raise TypeError(f"Cannot multiply Quantity and {type(other).__name__}")

    def divide(self, other: Union[Quantity, Number, Unit]) -> Quantity:
        """
        Quotient; units compose.

        Raises:
            DivisionByZero: If other has a zero magnitude
        """
        if isinstance(other, Quantity):
            if other.magnitude == 0:
                raise DivisionByZero(self)
            return Quantity(self.magnitude / other.magnitude, self.unit / other.unit)
        if isinstance(other, _UnitAlgebra):
            return Quantity(self.magnitude, self.unit / other)
        if is_number(other):
            value = to_rational(other)
            if value == 0:
                raise DivisionByZero(self)
            return Quantity(self.magnitude / value, self.unit)
        raise TypeError(f"Cannot divide Quantity by {type(other).__name__}")

    def same_value(self, other: Quantity) -> bool:
        """Equal after conversion, e.g. 1 km and 1000 m."""
        if is_number(other):
            other_q = Quantity(other)
        elif isinstance(other, Quantity):
            other_q = other
        else:
            return False
        if not self.dimensions.is_compatible(other_q.dimensions):
            return False
        return self.si == other_q.si

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Quantity) and not is_number(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        if not is_number(other):
            return NotImplemented
        return Quantity(other).add(self)

    def __sub__(self, other):
        if not isinstance(other, Quantity) and not is_number(other):
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other):
        if not is_number(other):
            return NotImplemented
        return Quantity(other).subtract(self)

    def __mul__(self, other):
        if not isinstance(other, (Quantity, _UnitAlgebra)) and not is_number(other):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other):
        if isinstance(other, _UnitAlgebra):
            return Quantity(self.magnitude, other * self.unit)
        if not is_number(other):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other):
        if not isinstance(other, (Quantity, _UnitAlgebra)) and not is_number(other):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other):
        if isinstance(other, _UnitAlgebra):
            return Quantity(1, other).divide(self)
        if not is_number(other):
            return NotImplemented
        return Quantity(other).divide(self)

    def __pow__(self, exp: int) -> Quantity:
        if isinstance(exp, bool) or not isinstance(exp, int):
            return NotImplemented
        if exp < 0 and self.magnitude == 0:
            raise DivisionByZero(self)
        return Quantity(self.magnitude ** exp, self.unit ** exp)

    def __neg__(self) -> Quantity:
        return Quantity(-self.magnitude, self.unit)

    def __pos__(self) -> Quantity:
        return self

    def __abs__(self) -> Quantity:
        return Quantity(abs(self.magnitude), self.unit)

    def __bool__(self) -> bool:
        return self.magnitude != 0

    def __float__(self) -> float:
        if not self.is_dimensionless():
            raise IncompatibleDimensions(self.unit, UNITLESS, "convert to float")
        return float(self.to(UNITLESS))

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other):
        if isinstance(other, Quantity):
            return self.magnitude == other.magnitude and self.unit == other.unit
        if is_number(other) and self.unit.is_unitless():
            return self.magnitude == other
        return NotImplemented

    def __hash__(self) -> int:
        if self.unit.is_unitless():
            return hash(self.magnitude)
        return hash((self.magnitude, self.unit))

    def _si_pair(self, other, operation: str):
        other_q = self._coerce(other, operation)
        if other_q is None:
            return None
        if not self.dimensions.is_compatible(other_q.dimensions):
            raise IncompatibleDimensions(self.unit, other_q.unit, operation)
        return self.si, other_q.si

    def __lt__(self, other):
        pair = self._si_pair(other, "compare")
        return NotImplemented if pair is None else pair[0] < pair[1]

    def __le__(self, other):
        pair = self._si_pair(other, "compare")
        return NotImplemented if pair is None else pair[0] <= pair[1]

    def __gt__(self, other):
        pair = self._si_pair(other, "compare")
        return NotImplemented if pair is None else pair[0] > pair[1]

    def __ge__(self, other):
        pair = self._si_pair(other, "compare")
        return NotImplemented if pair is None else pair[0] >= pair[1]

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        return f"Q('{exact_str(self.magnitude)}', '{self.unit.symbol}')"

    def __str__(self) -> str:
        return format_quantity(self.magnitude, self.unit.symbol)

    def __format__(self, spec: str) -> str:
        return format_quantity(self.magnitude, self.unit.symbol, spec)


# Convenience alias
Q = Quantity


def from_value_with_unit(magnitude: Number, unit: UnitLike) -> Quantity:
    return Quantity.from_value_with_unit(magnitude, unit)


__all__ = ['Quantity', 'Q', 'from_value_with_unit']
