"""
Test Unit Registry and Expression Parser
========================================
"""

from fractions import Fraction

import pytest


def test_lookup_by_symbol_name_and_alias():
    from tantalum.registry import Meter, Mile, lookup

    assert lookup('m') == Meter
    assert lookup('meter') == Meter
    assert lookup('metre') == Meter
    assert lookup('Miles') == Mile


def test_symbols_are_case_sensitive():
    """Mm is a megameter, mm a millimeter."""
    from tantalum.registry import Mega, Meter, Milli, lookup

    assert lookup('Mm') == Mega * Meter
    assert lookup('mm') == Milli * Meter
    assert lookup('Mm') != lookup('mm')


def test_prefix_decomposition():
    from tantalum.registry import (
        AU, Byte, Deca, Gram, Kilo, Mebi, Meter, Micro, Milli, lookup,
    )

    assert lookup('km') == Kilo * Meter
    assert lookup('kilometer') == Kilo * Meter
    assert lookup('kg') == Kilo * Gram
    assert lookup('MiB') == Mebi * Byte
    assert lookup('mau') == Milli * AU
    assert lookup('dam') == Deca * Meter
    assert lookup('um') == Micro * Meter
    assert lookup('µm') == Micro * Meter


def test_direct_entries_win_over_prefix_split():
    """min is a minute, not a milli-inch."""
    from tantalum.registry import Minute, NauticalMile, Pint, lookup

    assert lookup('min') == Minute
    assert lookup('nmi') == NauticalMile
    assert lookup('pt') == Pint


def test_unknown_unit():
    """Nothing is silently defaulted."""
    from tantalum.errors import UnknownUnit
    from tantalum.registry import lookup

    with pytest.raises(UnknownUnit, match="flurb"):
        lookup('flurb')

    # Also catchable as the builtin
    with pytest.raises(LookupError):
        lookup('kflurb')


def test_prefix_lookup():
    from tantalum.errors import UnknownUnit
    from tantalum.registry import BUILTIN_REGISTRY, Kilo, Micro

    assert BUILTIN_REGISTRY.prefix('k') is Kilo
    assert BUILTIN_REGISTRY.prefix('KILO') is Kilo
    assert BUILTIN_REGISTRY.prefix('u') is Micro

    with pytest.raises(UnknownUnit):
        BUILTIN_REGISTRY.prefix('m2')


def test_parse_expressions():
    from tantalum.registry import (
        Hour, Joule, Kelvin, Kilo, Kilogram, Meter, Mole, Newton, Second, parse_unit,
    )
    from tantalum.units import UNITLESS

    assert parse_unit('km/h') == Kilo * Meter / Hour
    assert parse_unit('kg*m/s^2') == Kilogram * Meter / Second ** 2
    assert parse_unit('kg m / s**2') == Kilogram * Meter / Second ** 2
    assert parse_unit('1/s') == Second ** -1
    assert parse_unit('s^-1') == Second ** -1
    assert parse_unit('J/(mol*K)') == Joule / (Mole * Kelvin)
    assert parse_unit('N·m') == Newton * Meter
    assert parse_unit('') == UNITLESS
    assert parse_unit('1') == UNITLESS


def test_parse_trailing_digit_exponent():
    """m2 and kg/m3 are read as powers."""
    from tantalum.registry import Centi, Kilogram, Meter, parse_unit

    assert parse_unit('m2') == Meter ** 2
    assert parse_unit('kg/m3') == Kilogram / Meter ** 3
    assert parse_unit('cm3') == (Centi * Meter) ** 3


def test_parse_errors():
    from tantalum.errors import UnitParseError, UnknownUnit
    from tantalum.registry import parse_unit

    for bad in ['km/', '(m', 'm)', 'm^', 'm^x', '2 m', '/s']:
        with pytest.raises(UnitParseError):
            parse_unit(bad)

    with pytest.raises(UnknownUnit):
        parse_unit('m/blorp')

    # UnitParseError is a ValueError
    with pytest.raises(ValueError):
        parse_unit('m^^2')


def test_exact_scales():
    """Length and mass definitions are exact rationals."""
    from tantalum.registry import Foot, Inch, Mile, Pound

    assert Inch.scale == Fraction(254, 10000)
    assert Foot.scale == 12 * Inch.scale
    assert Mile.scale == 5280 * Foot.scale
    assert Pound.scale == Fraction(45359237, 10 ** 8)


def test_registry_is_read_only():
    from tantalum.registry import BUILTIN_REGISTRY

    with pytest.raises(TypeError):
        BUILTIN_REGISTRY.units['m'] = None

    assert not hasattr(BUILTIN_REGISTRY, 'register')


def test_duplicate_symbol_rejected():
    from tantalum.dimensions import LENGTH
    from tantalum.errors import ConfigurationError
    from tantalum.registry import BUILTIN_REGISTRY
    from tantalum.units import UnitDef

    clash = UnitDef("mi", "mil", LENGTH, "0.0000254")

    with pytest.raises(ConfigurationError, match="'mi'"):
        BUILTIN_REGISTRY.extended(units=[clash])


def test_extended_returns_new_registry():
    from tantalum.dimensions import LENGTH
    from tantalum.registry import BUILTIN_REGISTRY, Kilo
    from tantalum.units import UnitDef

    furlong = UnitDef("fur", "furlong", LENGTH, "201.168")
    registry = BUILTIN_REGISTRY.extended(units=[furlong])

    assert registry is not BUILTIN_REGISTRY
    assert 'fur' in registry
    assert 'fur' not in BUILTIN_REGISTRY
    assert registry.unit('kfur') == Kilo * furlong
    assert len(registry) == len(BUILTIN_REGISTRY) + 1


def test_units_for():
    from tantalum.dimensions import TEMPERATURE
    from tantalum.registry import BUILTIN_REGISTRY

    assert BUILTIN_REGISTRY.units_for(TEMPERATURE) == ['K', 'degC', 'degF']


def test_base_unit():
    from tantalum.dimensions import FORCE
    from tantalum.registry import Kilogram, Meter, Second, base_unit

    unit = base_unit(FORCE)

    assert unit == Kilogram * Meter / Second ** 2
    assert unit.scale == 1


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
