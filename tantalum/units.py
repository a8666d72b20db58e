"""
Units — Unit Definitions and the Unit Expression Algebra
========================================================

Atoms:
    UnitDef       a named unit (meter, mile, hour, ...)
    PrefixDef     a multiplier (kilo, milli, kibi, ...)
    PrefixedUnit  a prefix bound to a unit (kilo * meter -> km)

A Unit is a product of atoms raised to integer exponents. Its dimension
vector and scale factor are derived from those factors every time, so they
cannot drift apart from the composition:

    >>> from tantalum.registry import Kilo, Meter, Hour
    >>> speed = Kilo * Meter / Hour
    >>> speed.symbol
    'km/h'
    >>> speed.scale
    Fraction(5, 18)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from functools import cached_property
from typing import Dict, List, Tuple, Union

from .dimensions import DIMENSIONLESS, Dimensions
from .errors import DivisionByZero
from .numeric import ONE, ZERO, is_number, to_rational


# =============================================================================
# ALGEBRA MIXIN
# =============================================================================

class _UnitAlgebra:
    """Operators shared by atoms and composed units."""

    def as_unit(self) -> Unit:
        raise NotImplementedError

    def __mul__(self, other):
        if is_number(other):
            from .quantity import Quantity
            return Quantity(other, self.as_unit())
        if isinstance(other, _UnitAlgebra):
            return multiply(self, other)
        return NotImplemented

    def __rmul__(self, other):
        if is_number(other):
            from .quantity import Quantity
            return Quantity(other, self.as_unit())
        return NotImplemented

    def __truediv__(self, other):
        if is_number(other):
            from .quantity import Quantity
            value = to_rational(other)
            if value == 0:
                raise DivisionByZero(self)
            return Quantity(ONE / value, self.as_unit())
        if isinstance(other, _UnitAlgebra):
            return divide(self, other)
        return NotImplemented

    def __rtruediv__(self, other):
        if is_number(other):
            from .quantity import Quantity
            return Quantity(other, power(self, -1))
        return NotImplemented

    def __pow__(self, exp: int):
        if isinstance(exp, bool) or not isinstance(exp, int):
            return NotImplemented
        return power(self, exp)


class _Atom(_UnitAlgebra):
    """Equality and hashing for atoms, consistent with single-factor Units."""

    def _key(self) -> tuple:
        raise NotImplementedError

    def as_unit(self) -> Unit:
        return Unit(((self, 1),))

    def __eq__(self, other):
        if isinstance(other, Unit):
            return other == self
        if type(other) is type(self):
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + self._key())

    def __str__(self) -> str:
        return self.symbol


# =============================================================================
# ATOMS
# =============================================================================

@dataclass(frozen=True, eq=False)
class UnitDef(_Atom):
    """
    A named unit.

    SI value = value * scale + offset, where scale is relative to the coherent
    SI unit of the same dimensions (kilogram for mass). offset is zero for
    every unit except the affine temperature scales.
    """
    symbol: str
    name: str
    dimensions: Dimensions
    scale: Fraction = ONE
    offset: Fraction = ZERO
    aliases: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        object.__setattr__(self, 'scale', to_rational(self.scale))
        object.__setattr__(self, 'offset', to_rational(self.offset))
        object.__setattr__(self, 'aliases', tuple(self.aliases))
        if self.scale == 0:
            raise ValueError(f"Unit '{self.symbol}' has a zero scale factor")

    def _key(self) -> tuple:
        return (self.symbol, self.name, self.dimensions, self.scale, self.offset)

    def __repr__(self) -> str:
        return f"UnitDef('{self.symbol}', {self.name!r})"


@dataclass(frozen=True, eq=False)
class PrefixDef(_Atom):
    """A metric or binary prefix: a dimensionless exact multiplier."""
    symbol: str
    name: str
    factor: Fraction
    aliases: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        object.__setattr__(self, 'factor', to_rational(self.factor))
        object.__setattr__(self, 'aliases', tuple(self.aliases))
        if self.factor == 0:
            raise ValueError(f"Prefix '{self.symbol}' has a zero factor")

    @property
    def dimensions(self) -> Dimensions:
        return DIMENSIONLESS

    @property
    def scale(self) -> Fraction:
        return self.factor

    @property
    def offset(self) -> Fraction:
        return ZERO

    def _key(self) -> tuple:
        return (self.symbol, self.name, self.factor)

    def __mul__(self, other):
        target = _bindable(other)
        if target is not None:
            unit, rest = target
            return Unit(((PrefixedUnit(self, unit), 1),) + rest)
        return super().__mul__(other)

    def __repr__(self) -> str:
        return f"PrefixDef('{self.symbol}', {self.name!r})"


@dataclass(frozen=True, eq=False)
class PrefixedUnit(_Atom):
    """A prefix bound to a unit, e.g. km or MiB."""
    prefix: PrefixDef
    unit: UnitDef

    @property
    def symbol(self) -> str:
        return self.prefix.symbol + self.unit.symbol

    @property
    def name(self) -> str:
        return self.prefix.name + self.unit.name

    @property
    def dimensions(self) -> Dimensions:
        return self.unit.dimensions

    @property
    def scale(self) -> Fraction:
        return self.prefix.factor * self.unit.scale

    @property
    def offset(self) -> Fraction:
        return self.unit.offset

    def _key(self) -> tuple:
        return (self.prefix._key(), self.unit._key())

    def __repr__(self) -> str:
        return f"PrefixedUnit('{self.symbol}')"


Atom = Union[UnitDef, PrefixDef, PrefixedUnit]


def _bindable(other):
    """(unit, remaining factors) when a prefix can bind to other's leading unit."""
    if isinstance(other, UnitDef):
        return other, ()
    if isinstance(other, Unit) and other.factors:
        atom, exp = other.factors[0]
        if isinstance(atom, UnitDef) and exp == 1:
            return atom, other.factors[1:]
    return None


# =============================================================================
# UNIT EXPRESSIONS
# =============================================================================

def _merge(pairs) -> Tuple[Tuple[Atom, int], ...]:
    """Combine repeated atoms and drop cancelled ones, keeping first-seen order."""
    merged: Dict[Atom, int] = {}
    for atom, exp in pairs:
        merged[atom] = merged.get(atom, 0) + exp
    return tuple((atom, exp) for atom, exp in merged.items() if exp != 0)


def _term(atom: Atom, exp: int) -> str:
    # A standalone prefix renders by name: "m" or "T" would read as a unit
    label = atom.name if isinstance(atom, PrefixDef) else atom.symbol
    return label if exp == 1 else f"{label}^{exp}"


@dataclass(frozen=True, eq=False)
class Unit(_UnitAlgebra):
    """
    A composed unit: atoms with integer exponents.

    Every operation returns a new Unit. Units with no registered name are
    still valid; they are rendered from their factors.
    """
    factors: Tuple[Tuple[Atom, int], ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'factors', _merge(self.factors))

    def as_unit(self) -> Unit:
        return self

    @cached_property
    def dimensions(self) -> Dimensions:
        dims = DIMENSIONLESS
        for atom, exp in self.factors:
            dims = dims * atom.dimensions ** exp
        return dims

    @cached_property
    def scale(self) -> Fraction:
        """Exact factor to the coherent SI unit of the same dimensions."""
        scale = ONE
        for atom, exp in self.factors:
            scale *= atom.scale ** exp
        return scale

    @property
    def offset(self) -> Fraction:
        """Affine offset; only a bare offset unit (degC, degF) has one."""
        if len(self.factors) == 1 and self.factors[0][1] == 1:
            return self.factors[0][0].offset
        return ZERO

    @property
    def numerator(self) -> List[Tuple[Atom, int]]:
        return [(atom, exp) for atom, exp in self.factors if exp > 0]

    @property
    def denominator(self) -> List[Tuple[Atom, int]]:
        return [(atom, -exp) for atom, exp in self.factors if exp < 0]

    @cached_property
    def symbol(self) -> str:
        num = [_term(a, e) for a, e in self.numerator]
        den = [_term(a, e) for a, e in self.denominator]
        if not den:
            return '*'.join(num)
        top = '*'.join(num) or '1'
        bottom = den[0] if len(den) == 1 else f"({'*'.join(den)})"
        return f"{top}/{bottom}"

    @property
    def name(self) -> str:
        powers = {2: 'square ', 3: 'cubic '}

        def words(terms):
            return ' '.join(
                f"{powers[e]}{a.name}" if e in powers else
                (a.name if e == 1 else f"{a.name}^{e}")
                for a, e in terms
            )

        num, den = words(self.numerator), words(self.denominator)
        if den:
            return f"{num} per {den}" if num else f"per {den}"
        return num

    def is_dimensionless(self) -> bool:
        return self.dimensions.is_dimensionless()

    def is_compatible(self, other) -> bool:
        return self.dimensions.is_compatible(as_unit(other).dimensions)

    def is_unitless(self) -> bool:
        return not self.factors

    def base(self) -> Unit:
        """Coherent SI unit with the same dimensions (km/h -> m/s)."""
        from .registry import base_unit
        return base_unit(self.dimensions)

    def __eq__(self, other):
        if isinstance(other, _Atom):
            other = other.as_unit()
        if not isinstance(other, Unit):
            return NotImplemented
        return dict(self.factors) == dict(other.factors)

    def __hash__(self) -> int:
        if len(self.factors) == 1 and self.factors[0][1] == 1:
            return hash(self.factors[0][0])
        return hash(frozenset(self.factors))

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return f"Unit('{self.symbol}')"


UNITLESS = Unit()


def as_unit(value) -> Unit:
    """Coerce an atom or Unit to a Unit."""
    if isinstance(value, _UnitAlgebra):
        return value.as_unit()
    raise TypeError(f"Expected a unit, got {type(value).__name__}")


def multiply(a, b) -> Unit:
    """Product of two units: exponents add, scales multiply."""
    return Unit(as_unit(a).factors + as_unit(b).factors)


def divide(a, b) -> Unit:
    """Quotient of two units: b's exponents are negated."""
    return Unit(as_unit(a).factors + tuple((atom, -exp) for atom, exp in as_unit(b).factors))


def power(a, exp: int) -> Unit:
    """a raised to an integer exponent."""
    return Unit(tuple((atom, e * exp) for atom, e in as_unit(a).factors))


__all__ = ['UnitDef', 'PrefixDef', 'PrefixedUnit', 'Atom', 'Unit', 'UNITLESS',
           'as_unit', 'multiply', 'divide', 'power']
