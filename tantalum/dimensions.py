"""
Dimensions — Dimension Vectors over the SI Base Quantities
==========================================================

A physical dimension is an exponent vector over the 7 SI base quantities,
extended with information (bits):

    velocity = length^1 * time^-1   -> Dimensions(length=1, time=-1)
    force    = mass * length * time^-2 -> Dimensions(mass=1, length=1, time=-2)

Two units or quantities are compatible exactly when their vectors are equal.
Unit names never take part in that check.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


# =============================================================================
# DIMENSION VECTOR
# =============================================================================

BASE_DIMENSIONS: Tuple[str, ...] = (
    'length',        # L (meter)
    'mass',          # M (kilogram)
    'time',          # T (second)
    'current',       # I (ampere)
    'temperature',   # Theta (kelvin)
    'amount',        # N (mole)
    'luminosity',    # J (candela)
    'information',   # B (bit)
)

_SYMBOLS = ('L', 'M', 'T', 'I', 'Theta', 'N', 'J', 'B')


@dataclass(frozen=True)
class Dimensions:
    """
    Immutable exponent vector, one integer per base dimension.

    Unspecified dimensions default to 0.
    """
    length: int = 0
    mass: int = 0
    time: int = 0
    current: int = 0
    temperature: int = 0
    amount: int = 0
    luminosity: int = 0
    information: int = 0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, int]) -> Dimensions:
        """
        Build from a {base dimension: exponent} mapping.

        Raises:
            ValueError: If a key is not a base dimension or an exponent is not an int
        """
        unknown = [k for k in mapping if k not in BASE_DIMENSIONS]
        if unknown:
            raise ValueError(
                f"Unknown base dimension(s): {unknown}. Expected one of {list(BASE_DIMENSIONS)}"
            )
        for key, exp in mapping.items():
            if isinstance(exp, bool) or not isinstance(exp, int):
                raise ValueError(f"Exponent for '{key}' must be an int, got {exp!r}")
        return cls(**mapping)

    @property
    def exponents(self) -> Tuple[int, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))

    def as_dict(self) -> Dict[str, int]:
        """Non-zero exponents only."""
        return {name: exp for name, exp in zip(BASE_DIMENSIONS, self.exponents) if exp}

    def multiply(self, other: Dimensions) -> Dimensions:
        """Multiply quantities -> add exponents"""
        return Dimensions(*(a + b for a, b in zip(self.exponents, other.exponents)))

    def divide(self, other: Dimensions) -> Dimensions:
        """Divide quantities -> subtract exponents"""
        return Dimensions(*(a - b for a, b in zip(self.exponents, other.exponents)))

    def power(self, exp: int) -> Dimensions:
        """Raise to power -> multiply all exponents"""
        return Dimensions(*(a * exp for a in self.exponents))

    def is_compatible(self, other: Dimensions) -> bool:
        return self.exponents == other.exponents

    def is_dimensionless(self) -> bool:
        return not any(self.exponents)

    def __mul__(self, other: Dimensions) -> Dimensions:
        if not isinstance(other, Dimensions):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other: Dimensions) -> Dimensions:
        if not isinstance(other, Dimensions):
            return NotImplemented
        return self.divide(other)

    def __pow__(self, exp: int) -> Dimensions:
        if isinstance(exp, bool) or not isinstance(exp, int):
            return NotImplemented
        return self.power(exp)

    def __repr__(self) -> str:
        parts = []
        for name, val in zip(_SYMBOLS, self.exponents):
            if val == 1:
                parts.append(name)
            elif val != 0:
                parts.append(f"{name}^{val}")
        return ' * '.join(parts) if parts else '1'


def multiply(a: Dimensions, b: Dimensions) -> Dimensions:
    return a.multiply(b)


def divide(a: Dimensions, b: Dimensions) -> Dimensions:
    return a.divide(b)


def is_compatible(a: Dimensions, b: Dimensions) -> bool:
    """True iff every exponent of a equals the matching exponent of b."""
    return a.is_compatible(b)


def is_dimensionless(v: Dimensions) -> bool:
    return v.is_dimensionless()


# Base dimensions
DIMENSIONLESS = Dimensions()
LENGTH = Dimensions(length=1)
MASS = Dimensions(mass=1)
TIME = Dimensions(time=1)
CURRENT = Dimensions(current=1)
TEMPERATURE = Dimensions(temperature=1)
AMOUNT = Dimensions(amount=1)
LUMINOSITY = Dimensions(luminosity=1)
INFORMATION = Dimensions(information=1)

# Derived dimensions
AREA = Dimensions(length=2)
VOLUME = Dimensions(length=3)
VELOCITY = Dimensions(length=1, time=-1)
ACCELERATION = Dimensions(length=1, time=-2)
FREQUENCY = Dimensions(time=-1)
FORCE = Dimensions(mass=1, length=1, time=-2)
PRESSURE = Dimensions(mass=1, length=-1, time=-2)
ENERGY = Dimensions(mass=1, length=2, time=-2)
POWER = Dimensions(mass=1, length=2, time=-3)
DENSITY = Dimensions(mass=1, length=-3)
CHARGE = Dimensions(current=1, time=1)
VOLTAGE = Dimensions(mass=1, length=2, time=-3, current=-1)
RESISTANCE = Dimensions(mass=1, length=2, time=-3, current=-2)
CONDUCTANCE = Dimensions(mass=-1, length=-2, time=3, current=2)
CAPACITANCE = Dimensions(mass=-1, length=-2, time=4, current=2)
INDUCTANCE = Dimensions(mass=1, length=2, time=-2, current=-2)
MAGNETIC_FLUX = Dimensions(mass=1, length=2, time=-2, current=-1)
MAGNETIC_FIELD = Dimensions(mass=1, time=-2, current=-1)
DATA_RATE = Dimensions(information=1, time=-1)


# =============================================================================
# UNIT CATEGORIES
# =============================================================================

class UnitCategory(Enum):
    """Physical categories, keyed by dimension vector"""
    DIMENSIONLESS = "dimensionless"
    LENGTH = "length"
    MASS = "mass"
    TIME = "time"
    CURRENT = "current"
    TEMPERATURE = "temperature"
    AMOUNT = "amount"
    LUMINOSITY = "luminosity"
    INFORMATION = "information"
    AREA = "area"
    VOLUME = "volume"
    VELOCITY = "velocity"
    ACCELERATION = "acceleration"
    FREQUENCY = "frequency"
    FORCE = "force"
    PRESSURE = "pressure"
    ENERGY = "energy"
    POWER = "power"
    DENSITY = "density"
    CHARGE = "charge"
    VOLTAGE = "voltage"
    RESISTANCE = "resistance"
    CONDUCTANCE = "conductance"
    CAPACITANCE = "capacitance"
    INDUCTANCE = "inductance"
    MAGNETIC_FLUX = "magnetic_flux"
    MAGNETIC_FIELD = "magnetic_field"
    DATA_RATE = "data_rate"


CATEGORY_DIMENSIONS: Dict[UnitCategory, Dimensions] = {
    category: globals()[category.name] for category in UnitCategory
}


def get_category(dimensions: Dimensions) -> Optional[UnitCategory]:
    """Category for a dimension vector, or None if it has no common name."""
    for category, dims in CATEGORY_DIMENSIONS.items():
        if dims == dimensions:
            return category
    return None


__all__ = [
    'BASE_DIMENSIONS', 'Dimensions', 'multiply', 'divide', 'is_compatible',
    'is_dimensionless', 'UnitCategory', 'CATEGORY_DIMENSIONS', 'get_category',
    'DIMENSIONLESS', 'LENGTH', 'MASS', 'TIME', 'CURRENT', 'TEMPERATURE', 'AMOUNT',
    'LUMINOSITY', 'INFORMATION', 'AREA', 'VOLUME', 'VELOCITY', 'ACCELERATION',
    'FREQUENCY', 'FORCE', 'PRESSURE', 'ENERGY', 'POWER', 'DENSITY', 'CHARGE',
    'VOLTAGE', 'RESISTANCE', 'CONDUCTANCE', 'CAPACITANCE', 'INDUCTANCE',
    'MAGNETIC_FLUX', 'MAGNETIC_FIELD', 'DATA_RATE',
]
