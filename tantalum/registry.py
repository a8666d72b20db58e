"""
Unit Registry
=============

Process-wide, read-only table of units and prefixes, plus the parser that
turns unit expressions such as "km/h" or "kg*m/s^2" into Unit values.

Usage:
    >>> from tantalum.registry import lookup, parse_unit, Mile, Hour
    >>> lookup("km")
    Unit('km')
    >>> parse_unit("mi/h") == Mile / Hour
    True

The built-in table is assembled once at import. get_registry() adds any
units configured through TANTALUM_UNITS_FILE the first time it is called and
caches the result; no registry is ever mutated after construction.
"""

from __future__ import annotations

import logging
import re
import threading
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .dimensions import (
    AMOUNT, AREA, CAPACITANCE, CHARGE, CONDUCTANCE, CURRENT,
    ENERGY, FORCE, FREQUENCY, INDUCTANCE, INFORMATION, LENGTH, LUMINOSITY,
    MAGNETIC_FIELD, MAGNETIC_FLUX, MASS, POWER, PRESSURE, RESISTANCE,
    TEMPERATURE, TIME, VOLTAGE, VOLUME, BASE_DIMENSIONS, Dimensions,
)
from .errors import ConfigurationError, UnitParseError, UnknownUnit
from .numeric import ratio
from .units import UNITLESS, PrefixDef, PrefixedUnit, Unit, UnitDef, power

logger = logging.getLogger(__name__)


# =============================================================================
# PREFIXES
# =============================================================================

Quecto = PrefixDef("q", "quecto", ratio(1, 10 ** 30))
Ronto = PrefixDef("r", "ronto", ratio(1, 10 ** 27))
Yocto = PrefixDef("y", "yocto", ratio(1, 10 ** 24))
Zepto = PrefixDef("z", "zepto", ratio(1, 10 ** 21))
Atto = PrefixDef("a", "atto", ratio(1, 10 ** 18))
Femto = PrefixDef("f", "femto", ratio(1, 10 ** 15))
Pico = PrefixDef("p", "pico", ratio(1, 10 ** 12))
Nano = PrefixDef("n", "nano", ratio(1, 10 ** 9))
Micro = PrefixDef("µ", "micro", ratio(1, 10 ** 6), aliases=("u", "μ"))
Milli = PrefixDef("m", "milli", ratio(1, 10 ** 3))
Centi = PrefixDef("c", "centi", ratio(1, 100))
Deci = PrefixDef("d", "deci", ratio(1, 10))
Deca = PrefixDef("da", "deca", 10, aliases=("deka",))
Hecto = PrefixDef("h", "hecto", 100)
Kilo = PrefixDef("k", "kilo", 10 ** 3)
Mega = PrefixDef("M", "mega", 10 ** 6)
Giga = PrefixDef("G", "giga", 10 ** 9)
Tera = PrefixDef("T", "tera", 10 ** 12)
Peta = PrefixDef("P", "peta", 10 ** 15)
Exa = PrefixDef("E", "exa", 10 ** 18)
Zetta = PrefixDef("Z", "zetta", 10 ** 21)
Yotta = PrefixDef("Y", "yotta", 10 ** 24)
Ronna = PrefixDef("R", "ronna", 10 ** 27)
Quetta = PrefixDef("Q", "quetta", 10 ** 30)

# IEC binary prefixes
Kibi = PrefixDef("Ki", "kibi", 2 ** 10)
Mebi = PrefixDef("Mi", "mebi", 2 ** 20)
Gibi = PrefixDef("Gi", "gibi", 2 ** 30)
Tebi = PrefixDef("Ti", "tebi", 2 ** 40)
Pebi = PrefixDef("Pi", "pebi", 2 ** 50)
Exbi = PrefixDef("Ei", "exbi", 2 ** 60)

BUILTIN_PREFIXES: Tuple[PrefixDef, ...] = (
    Quecto, Ronto, Yocto, Zepto, Atto, Femto, Pico, Nano, Micro, Milli, Centi,
    Deci, Deca, Hecto, Kilo, Mega, Giga, Tera, Peta, Exa, Zetta, Yotta, Ronna,
    Quetta, Kibi, Mebi, Gibi, Tebi, Pebi, Exbi,
)


# =============================================================================
# UNITS
# =============================================================================
# Scales are exact, relative to the coherent SI unit (kilogram for mass).

# -----------------------------------------------------------------------------
# LENGTH
# -----------------------------------------------------------------------------
Meter = UnitDef("m", "meter", LENGTH, 1, aliases=("metre", "meters"))
AU = UnitDef("au", "astronomical unit", LENGTH, 149597870700, aliases=("ua", "astronomical_unit"))
Inch = UnitDef("in", "inch", LENGTH, ratio(127, 5000), aliases=("inches",))
Foot = UnitDef("ft", "foot", LENGTH, ratio(381, 1250), aliases=("feet",))
Yard = UnitDef("yd", "yard", LENGTH, ratio(1143, 1250), aliases=("yards",))
Mile = UnitDef("mi", "mile", LENGTH, ratio(201168, 125), aliases=("miles",))
NauticalMile = UnitDef("nmi", "nautical mile", LENGTH, 1852, aliases=("nautical_mile",))
LightYear = UnitDef("ly", "light year", LENGTH, 9460730472580800, aliases=("light_year",))
Parsec = UnitDef("pc", "parsec", LENGTH, 30856775814913673, aliases=("parsecs",))

# -----------------------------------------------------------------------------
# MASS
# -----------------------------------------------------------------------------
Gram = UnitDef("g", "gram", MASS, ratio(1, 1000), aliases=("grams", "gramme"))
Tonne = UnitDef("t", "tonne", MASS, 1000, aliases=("metric_ton",))
Dram = UnitDef("dr", "dram", MASS, ratio(17718451953, 10 ** 13))
Ounce = UnitDef("oz", "ounce", MASS, ratio(45359237, 1600000000), aliases=("ounces",))
Pound = UnitDef("lb", "pound", MASS, ratio(45359237, 100000000), aliases=("lbs", "pounds"))

# -----------------------------------------------------------------------------
# TIME
# -----------------------------------------------------------------------------
Second = UnitDef("s", "second", TIME, 1, aliases=("sec", "seconds"))
Minute = UnitDef("min", "minute", TIME, 60, aliases=("minutes",))
Hour = UnitDef("h", "hour", TIME, 3600, aliases=("hr", "hours"))
Day = UnitDef("d", "day", TIME, 86400, aliases=("days",))
Month = UnitDef("mo", "month", TIME, 2629746, aliases=("months",))
Year = UnitDef("yr", "year", TIME, 31557600, aliases=("years",))

# -----------------------------------------------------------------------------
# OTHER BASE QUANTITIES
# -----------------------------------------------------------------------------
Ampere = UnitDef("A", "ampere", CURRENT, 1, aliases=("amp", "amps"))
Kelvin = UnitDef("K", "kelvin", TEMPERATURE, 1)
Celsius = UnitDef("degC", "degree Celsius", TEMPERATURE, 1, offset=ratio(5463, 20),
                  aliases=("°C", "celsius"))
Fahrenheit = UnitDef("degF", "degree Fahrenheit", TEMPERATURE, ratio(5, 9),
                     offset=ratio(45967, 180), aliases=("°F", "fahrenheit"))
Mole = UnitDef("mol", "mole", AMOUNT, 1, aliases=("moles",))
Candela = UnitDef("cd", "candela", LUMINOSITY, 1)
Bit = UnitDef("b", "bit", INFORMATION, 1, aliases=("bits",))
Byte = UnitDef("B", "byte", INFORMATION, 8, aliases=("bytes",))

# -----------------------------------------------------------------------------
# NAMED DERIVED UNITS
# -----------------------------------------------------------------------------
Newton = UnitDef("N", "newton", FORCE, 1)
Joule = UnitDef("J", "joule", ENERGY, 1)
Watt = UnitDef("W", "watt", POWER, 1)
Pascal = UnitDef("Pa", "pascal", PRESSURE, 1)
Hertz = UnitDef("Hz", "hertz", FREQUENCY, 1)
Coulomb = UnitDef("C", "coulomb", CHARGE, 1)
Volt = UnitDef("V", "volt", VOLTAGE, 1)
Ohm = UnitDef("ohm", "ohm", RESISTANCE, 1, aliases=("Ω",))
Siemens = UnitDef("S", "siemens", CONDUCTANCE, 1)
Farad = UnitDef("F", "farad", CAPACITANCE, 1)
Henry = UnitDef("H", "henry", INDUCTANCE, 1)
Weber = UnitDef("Wb", "weber", MAGNETIC_FLUX, 1)
Tesla = UnitDef("T", "tesla", MAGNETIC_FIELD, 1)

# -----------------------------------------------------------------------------
# AREA / VOLUME
# -----------------------------------------------------------------------------
Hectare = UnitDef("ha", "hectare", AREA, 10000, aliases=("hectares",))
Liter = UnitDef("L", "liter", VOLUME, ratio(1, 1000), aliases=("l", "litre", "liters"))
CubicInch = UnitDef("in3", "cubic inch", VOLUME, ratio(2048383, 125000000000), aliases=("cubic_inch",))
CubicFoot = UnitDef("ft3", "cubic foot", VOLUME, ratio(55306341, 1953125000), aliases=("cubic_foot",))
CubicYard = UnitDef("yd3", "cubic yard", VOLUME, ratio(1493271207, 1953125000), aliases=("cubic_yard",))
Pint = UnitDef("pt", "pint", VOLUME, ratio(473176473, 10 ** 12), aliases=("pints",))
Quart = UnitDef("qt", "quart", VOLUME, ratio(473176473, 5 * 10 ** 11), aliases=("quarts",))
Gallon = UnitDef("gal", "gallon", VOLUME, ratio(473176473, 125 * 10 ** 9), aliases=("gallons",))

BUILTIN_UNITS: Tuple[UnitDef, ...] = (
    Meter, AU, Inch, Foot, Yard, Mile, NauticalMile, LightYear, Parsec,
    Gram, Tonne, Dram, Ounce, Pound,
    Second, Minute, Hour, Day, Month, Year,
    Ampere, Kelvin, Celsius, Fahrenheit, Mole, Candela, Bit, Byte,
    Newton, Joule, Watt, Pascal, Hertz, Coulomb, Volt, Ohm, Siemens, Farad,
    Henry, Weber, Tesla,
    Hectare, Liter, CubicInch, CubicFoot, CubicYard, Pint, Quart, Gallon,
)

Kilogram = Kilo * Gram
Kilometer = Kilo * Meter

# Coherent SI unit for each base dimension
BASE_UNITS: Dict[str, Unit] = {
    'length': Meter.as_unit(),
    'mass': Kilogram,
    'time': Second.as_unit(),
    'current': Ampere.as_unit(),
    'temperature': Kelvin.as_unit(),
    'amount': Mole.as_unit(),
    'luminosity': Candela.as_unit(),
    'information': Bit.as_unit(),
}


def base_unit(dimensions: Dimensions) -> Unit:
    """Coherent SI unit (scale 1) with the given dimensions, e.g. kg*m/s^2."""
    unit = UNITLESS
    for name, exp in zip(BASE_DIMENSIONS, dimensions.exponents):
        if exp:
            unit = unit * power(BASE_UNITS[name], exp)
    return unit


# =============================================================================
# REGISTRY
# =============================================================================

class UnitRegistry:
    """
    Read-only lookup table of units and prefixes.

    Symbols are case-sensitive ("Mm" is not "mm"); full names and aliases
    also match case-insensitively. A name that is not registered directly is
    split into prefix + unit ("km", "MiB", "kilometer").

    Args:
        units: Unit definitions
        prefixes: Prefix definitions

    Raises:
        ConfigurationError: If two entries claim the same symbol or alias
    """

    def __init__(self, units: Iterable[UnitDef] = BUILTIN_UNITS,
                 prefixes: Iterable[PrefixDef] = BUILTIN_PREFIXES):
        self._unit_defs: Tuple[UnitDef, ...] = tuple(units)
        self._prefix_defs: Tuple[PrefixDef, ...] = tuple(prefixes)

        units_by_key: Dict[str, UnitDef] = {}
        for unit in self._unit_defs:
            self._claim(units_by_key, unit, (unit.symbol, unit.name) + unit.aliases, "unit")

        prefixes_by_key: Dict[str, PrefixDef] = {}
        for prefix in self._prefix_defs:
            self._claim(prefixes_by_key, prefix, (prefix.symbol, prefix.name) + prefix.aliases, "prefix")

        self._units = MappingProxyType(units_by_key)
        self._prefixes = MappingProxyType(prefixes_by_key)
        self._units_folded = MappingProxyType(
            {k.lower(): u for u in self._unit_defs for k in (u.name,) + u.aliases}
        )
        self._prefixes_folded = MappingProxyType({p.name.lower(): p for p in self._prefix_defs})
        # Longest prefix first so "da" wins over "d"
        self._prefix_keys = tuple(sorted(prefixes_by_key, key=len, reverse=True))

    @staticmethod
    def _claim(table: Dict, entry, keys, kind: str) -> None:
        for key in keys:
            current = table.get(key)
            if current is not None and current != entry:
                raise ConfigurationError(
                    f"{kind.capitalize()} key '{key}' is claimed by both "
                    f"'{current.symbol}' and '{entry.symbol}'"
                )
            table[key] = entry

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def units(self) -> Mapping[str, UnitDef]:
        """Every symbol, name and alias mapped to its unit."""
        return self._units

    @property
    def prefixes(self) -> Mapping[str, PrefixDef]:
        return self._prefixes

    @property
    def unit_defs(self) -> Tuple[UnitDef, ...]:
        return self._unit_defs

    @property
    def prefix_defs(self) -> Tuple[PrefixDef, ...]:
        return self._prefix_defs

    def __len__(self) -> int:
        return len(self._unit_defs)

    def __contains__(self, name: str) -> bool:
        return self._find(name) is not None

    def __repr__(self) -> str:
        return f"UnitRegistry({len(self._unit_defs)} units, {len(self._prefix_defs)} prefixes)"

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _find_def(self, name: str) -> Optional[UnitDef]:
        if name in self._units:
            return self._units[name]
        return self._units_folded.get(name.lower())

    def _find(self, name: str) -> Optional[Union[UnitDef, PrefixedUnit]]:
        unit = self._find_def(name)
        if unit is not None:
            return unit

        for key in self._prefix_keys:
            if name.startswith(key) and len(name) > len(key):
                unit = self._find_def(name[len(key):])
                if unit is not None:
                    return PrefixedUnit(self._prefixes[key], unit)

        lowered = name.lower()
        for key, prefix in self._prefixes_folded.items():
            if lowered.startswith(key) and len(lowered) > len(key):
                unit = self._units_folded.get(lowered[len(key):])
                if unit is not None:
                    return PrefixedUnit(prefix, unit)
        return None

    def unit(self, name: str) -> Unit:
        """
        Look up a single unit name, symbol or alias.

        Raises:
            UnknownUnit: If the name is not registered (nothing is defaulted)
        """
        if not isinstance(name, str):
            raise TypeError(f"Unit name must be a string, got {type(name).__name__}")
        atom = self._find(name.strip())
        if atom is None:
            raise UnknownUnit(name)
        return atom.as_unit()

    def prefix(self, name: str) -> PrefixDef:
        if name in self._prefixes:
            return self._prefixes[name]
        prefix = self._prefixes_folded.get(name.lower())
        if prefix is None:
            raise UnknownUnit(name, "not a prefix")
        return prefix

    def parse(self, expression: str) -> Unit:
        """Parse a unit expression like "km/h", "kg*m/s^2" or "J/(mol*K)"."""
        return _UnitParser(self, expression).parse()

    def units_for(self, dimensions: Dimensions) -> List[str]:
        """Primary symbols of every unit with the given dimensions"""
        return [u.symbol for u in self._unit_defs if u.dimensions == dimensions]

    def extended(self, units: Iterable[UnitDef] = (), prefixes: Iterable[PrefixDef] = ()) -> UnitRegistry:
        """New registry holding this registry's entries plus the given ones."""
        return UnitRegistry(self._unit_defs + tuple(units), self._prefix_defs + tuple(prefixes))


# =============================================================================
# UNIT EXPRESSION PARSER
# =============================================================================

_TOKEN = re.compile(
    r"\s*(?:"
    r"(?P<pow>\*\*|\^)"
    r"|(?P<mul>[*·⋅])"
    r"|(?P<div>/)"
    r"|(?P<lpar>\()"
    r"|(?P<rpar>\))"
    r"|(?P<int>[+-]?\d+)(?![\w.])"
    r"|(?P<name>[^\s*·⋅/^()\d][^\s*·⋅/^()]*)"
    r")"
)

_TRAILING_EXPONENT = re.compile(r"^(\D+?)(\d+)$")


class _UnitParser:
    """
    Recursive-descent parser.

        expression := term (('*' | '/' | <juxtaposition>) term)*
        term       := factor (('^' | '**') INT)?
        factor     := NAME | '1' | '(' expression ')'
    """

    def __init__(self, registry: UnitRegistry, text: str):
        if not isinstance(text, str):
            raise TypeError(f"Unit expression must be a string, got {type(text).__name__}")
        self.registry = registry
        self.text = text
        self.tokens = self._tokenize(text)
        self.pos = 0

    @staticmethod
    def _tokenize(text: str) -> List[Tuple[str, str]]:
        tokens = []
        pos = 0
        text = text.rstrip()
        while pos < len(text):
            match = _TOKEN.match(text, pos)
            if not match or match.end() == pos:
                raise UnitParseError(f"Unexpected character at {pos} in unit '{text}'")
            kind = match.lastgroup
            tokens.append((kind, match.group(kind)))
            pos = match.end()
        return tokens

    def _peek(self) -> Optional[str]:
        return self.tokens[self.pos][0] if self.pos < len(self.tokens) else None

    def _take(self, kind: str) -> str:
        if self._peek() != kind:
            found = self.tokens[self.pos][1] if self.pos < len(self.tokens) else "end of input"
            raise UnitParseError(f"Expected {kind} but found '{found}' in unit '{self.text}'")
        value = self.tokens[self.pos][1]
        self.pos += 1
        return value

    def parse(self) -> Unit:
        if not self.tokens:
            return UNITLESS
        unit = self._expression()
        if self.pos != len(self.tokens):
            raise UnitParseError(f"Unexpected '{self.tokens[self.pos][1]}' in unit '{self.text}'")
        return unit

    def _expression(self) -> Unit:
        unit = self._term()
        while True:
            kind = self._peek()
            if kind == 'mul':
                self.pos += 1
                unit = unit * self._term()
            elif kind == 'div':
                self.pos += 1
                unit = unit / self._term()
            elif kind in ('name', 'lpar'):
                unit = unit * self._term()
            else:
                return unit

    def _term(self) -> Unit:
        unit = self._factor()
        if self._peek() == 'pow':
            self.pos += 1
            unit = power(unit, int(self._take('int')))
        return unit

    def _factor(self) -> Unit:
        kind = self._peek()
        if kind == 'lpar':
            self.pos += 1
            unit = self._expression()
            self._take('rpar')
            return unit
        if kind == 'int':
            value = self._take('int')
            if int(value) != 1:
                raise UnitParseError(f"Only the literal 1 may appear in unit '{self.text}'")
            return UNITLESS
        name = self._take('name')
        try:
            return self.registry.unit(name)
        except UnknownUnit:
            pass
        # "milli^2": a standalone prefix, written by name
        prefix = self.registry._prefixes_folded.get(name.lower())
        if prefix is not None:
            return prefix.as_unit()
        # "m2", "kg/m3": trailing digits as an exponent
        match = _TRAILING_EXPONENT.match(name)
        if match is None or match.group(1) not in self.registry:
            raise UnknownUnit(name)
        return power(self.registry.unit(match.group(1)), int(match.group(2)))


# =============================================================================
# PROCESS-WIDE REGISTRY
# =============================================================================

BUILTIN_REGISTRY = UnitRegistry()


_registry: Optional[UnitRegistry] = None
_registry_lock = threading.Lock()


def _build_registry() -> UnitRegistry:
    from .config import config_from_env

    config = config_from_env()
    if config is None:
        registry = BUILTIN_REGISTRY
    else:
        registry = BUILTIN_REGISTRY.extended(config.units, config.prefixes)
        logger.info(f"Loaded {len(config.units)} units and {len(config.prefixes)} "
                    f"prefixes from {config.source}")
    logger.debug(f"Unit registry ready: {registry!r}")
    return registry


def get_registry() -> UnitRegistry:
    """
    The process-wide registry: built-ins plus TANTALUM_UNITS_FILE, if set.

    Built once, on the first call from any thread; later calls return the
    same object.
    """
    global _registry
    registry = _registry
    if registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = _build_registry()
            registry = _registry
    return registry


def reset_registry() -> None:
    """Drop the process-wide registry so the next call rebuilds it."""
    global _registry
    with _registry_lock:
        _registry = None


def lookup(name: str) -> Unit:
    """Look up a unit name in the process-wide registry."""
    return get_registry().unit(name)


def parse_unit(expression: str) -> Unit:
    """Parse a unit expression against the process-wide registry."""
    return get_registry().parse(expression)


__all__ = [
    'UnitRegistry', 'BUILTIN_REGISTRY', 'BUILTIN_UNITS', 'BUILTIN_PREFIXES',
    'BASE_UNITS', 'base_unit', 'get_registry', 'reset_registry', 'lookup', 'parse_unit',
    # Prefixes
    'Quecto', 'Ronto', 'Yocto', 'Zepto', 'Atto', 'Femto', 'Pico', 'Nano', 'Micro',
    'Milli', 'Centi', 'Deci', 'Deca', 'Hecto', 'Kilo', 'Mega', 'Giga', 'Tera',
    'Peta', 'Exa', 'Zetta', 'Yotta', 'Ronna', 'Quetta',
    'Kibi', 'Mebi', 'Gibi', 'Tebi', 'Pebi', 'Exbi',
    # Units
    'Meter', 'Kilometer', 'AU', 'Inch', 'Foot', 'Yard', 'Mile', 'NauticalMile',
    'LightYear', 'Parsec', 'Gram', 'Kilogram', 'Tonne', 'Dram', 'Ounce', 'Pound',
    'Second', 'Minute', 'Hour', 'Day', 'Month', 'Year', 'Ampere', 'Kelvin',
    'Celsius', 'Fahrenheit', 'Mole', 'Candela', 'Bit', 'Byte', 'Newton', 'Joule',
    'Watt', 'Pascal', 'Hertz', 'Coulomb', 'Volt', 'Ohm', 'Siemens', 'Farad',
    'Henry', 'Weber', 'Tesla', 'Hectare', 'Liter', 'CubicInch', 'CubicFoot',
    'CubicYard', 'Pint', 'Quart', 'Gallon',
]
