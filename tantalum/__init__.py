"""
Tantalum - Unit-Aware Exact Arithmetic
======================================

Quantities with exact rational magnitudes and composable units.

    magnitude (Fraction) x unit (atoms^exponents) -> Quantity

Architecture:
    - dimensions: exponent vectors over the SI base quantities
    - units: unit/prefix atoms and the unit expression algebra
    - registry: built-in unit table, lookup and expression parser
    - quantity: Quantity arithmetic and conversion
    - config: YAML-declared extra units (TANTALUM_UNITS_FILE)

Usage:
    from tantalum import Q, Mile, Hour, Kilo, Meter

    speed = Q(60, Mile / Hour) + Q(45, Mile / Hour)
    speed.convert_to(Kilo * Meter / Hour)      # 168.98112 km/h

    Q("4 in").to("m")                          # Fraction(127, 1250)
"""

__version__ = "0.1.0"

from .errors import (
    TantalumError, UnknownUnit, UnitParseError, IncompatibleDimensions,
    DivisionByZero, ConfigurationError, UnknownConstant,
)
from .dimensions import Dimensions, UnitCategory, get_category
from .units import UnitDef, PrefixDef, PrefixedUnit, Unit, UNITLESS
from .registry import *  # noqa: F401,F403  unit and prefix constants
from .registry import __all__ as _registry_all
from .quantity import Quantity, Q
from .constants import get_constant, PHYSICAL_CONSTANTS

__all__ = [
    '__version__',
    # Errors
    'TantalumError', 'UnknownUnit', 'UnitParseError', 'IncompatibleDimensions',
    'DivisionByZero', 'ConfigurationError', 'UnknownConstant',
    # Core types
    'Dimensions', 'UnitCategory', 'get_category',
    'UnitDef', 'PrefixDef', 'PrefixedUnit', 'Unit', 'UNITLESS',
    'Quantity', 'Q',
    # Constants
    'get_constant', 'PHYSICAL_CONSTANTS',
] + list(_registry_all)
