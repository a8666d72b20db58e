"""
Test Quantity Arithmetic and Conversion
=======================================
"""

from fractions import Fraction

import pytest


# =============================================================================
# END-TO-END
# =============================================================================

def test_miles_per_hour_sum_in_km_per_hour():
    """60 mi/h + 45 mi/h is 105 mi/h, exactly 105 * 1.609344 km/h."""
    from tantalum import Q, Hour, Kilo, Meter, Mile

    total = Q(60, Mile / Hour) + Q(45, Mile / Hour)

    assert total == Q(105, Mile / Hour)
    assert str(total) == '105 mi/h'

    kmh = total.convert_to(Kilo * Meter / Hour)

    assert kmh.magnitude == 105 * Fraction('1.609344')
    assert str(kmh) == '168.98112 km/h'


def test_milli_au_per_year_in_km_per_hour():
    from tantalum import Q, AU, Hour, Kilo, Meter, Milli, Year

    speed = Q(1, Milli * AU / Year)
    expected = Fraction(149597870700, 1000) * 3600 / (31557600 * 1000)

    assert speed.to(Kilo * Meter / Hour) == expected
    assert speed.to('km/h') == expected


def test_round_trip_is_exact():
    from tantalum import Q

    q = Q('12.345', 'mi/h')

    assert q.convert_to('km/h').convert_to('mi/h') == q
    assert q.convert_to('m/s').convert_to('mi/h') == q


def test_offset_round_trip_is_exact():
    """degC -> degF -> degC goes through the affine path both ways."""
    from tantalum import Q

    for text in ['36.6', '-273.15', '0', '1/3']:
        q = Q(text, 'degC')
        assert q.convert_to('degF').convert_to('degC') == q
        assert q.convert_to('K').convert_to('degF').convert_to('degC') == q


def test_addition_commutes_up_to_conversion():
    """a + b and b + a agree once expressed in the same unit."""
    from tantalum import Q

    a = Q(60, 'mi/h')
    b = Q('100.5', 'km/h')

    assert (a + b).convert_to(a.unit) == (b + a).convert_to(a.unit)
    assert (a + b).convert_to(b.unit) == (b + a).convert_to(b.unit)


def test_product_dimensions():
    """Dimensions of a product or quotient compose from the operands."""
    from tantalum import Q
    from tantalum.dimensions import divide, multiply

    a = Q(3, 'kg*m/s^2')
    b = Q(2, 'mi/h')

    assert (a * b).dimensions == multiply(a.dimensions, b.dimensions)
    assert (a / b).dimensions == divide(a.dimensions, b.dimensions)


# =============================================================================
# CONSTRUCTION
# =============================================================================

def test_construct_from_strings():
    from tantalum import Q, Hour, Mile

    assert Q('60 mi/h') == Q(60, Mile / Hour)
    assert Q('4 in').to('m') == Fraction(127, 1250)
    assert Q('3/4 h').to('min') == 45
    assert Q('1e3 m').magnitude == 1000
    assert Q('0.1', 'm').magnitude == Fraction(1, 10)
    assert Q('7').is_dimensionless()


def test_leading_slash_unit_is_reciprocal():
    from tantalum import Q

    assert Q('5 /s') == Q('5 1/s')
    assert Q('5/s') == Q(5, '1/s')
    assert Q('3/4 /h').to('1/min') == Fraction(1, 80)


def test_float_magnitude_keeps_binary_value():
    from tantalum import Q

    assert Q(0.1, 'm').magnitude == Fraction(0.1)
    assert Q(0.1, 'm').magnitude != Fraction(1, 10)


def test_from_value_with_unit_keeps_magnitude():
    """The magnitude is stored as given, in the given unit."""
    from tantalum.quantity import Quantity, from_value_with_unit

    q = Quantity.from_value_with_unit(5, 'km')

    assert q.magnitude == 5
    assert str(q.unit) == 'km'
    assert from_value_with_unit(5, 'km') == q
    assert Quantity(q) == q

    with pytest.raises(TypeError):
        Quantity(q, 'm')


def test_parse_errors():
    from tantalum import Q
    from tantalum.errors import UnitParseError, UnknownUnit

    with pytest.raises(UnitParseError):
        Q.parse('km')

    with pytest.raises(UnknownUnit):
        Q.parse('5 furlongs')

    with pytest.raises(ValueError):
        Q('abc', 'm')


def test_quantities_are_immutable():
    from tantalum import Q

    q = Q(1, 'm')

    with pytest.raises(AttributeError):
        q.magnitude = 2

    with pytest.raises(AttributeError):
        del q.unit


def test_pickle():
    import pickle
    from tantalum import Q

    q = Q('2.5', 'kg*m/s^2')

    assert pickle.loads(pickle.dumps(q)) == q


# =============================================================================
# ADDITION / SUBTRACTION
# =============================================================================

def test_add_converts_into_left_unit():
    from tantalum import Q

    assert Q(1, 'km') + Q(250, 'm') == Q(Fraction(5, 4), 'km')
    assert Q(1, 'h') + Q(30, 'min') == Q(Fraction(3, 2), 'h')
    assert Q(250, 'm') + Q(1, 'km') == Q(1250, 'm')
    assert Q(1, 'km') - Q(250, 'm') == Q(Fraction(3, 4), 'km')


def test_decimal_strings_add_exactly():
    from tantalum import Q

    assert Q('0.1', 'm') + Q('0.2', 'm') == Q('0.3', 'm')


def test_add_incompatible_dimensions():
    from tantalum import Q
    from tantalum.dimensions import LENGTH, TIME
    from tantalum.errors import IncompatibleDimensions

    with pytest.raises(IncompatibleDimensions) as exc:
        Q(1, 'm') + Q(1, 's')

    assert exc.value.left_dimensions == LENGTH
    assert exc.value.right_dimensions == TIME
    assert exc.value.operation == 'add'

    with pytest.raises(ValueError):
        Q(1, 'm') - Q(1, 'kg')


def test_plain_numbers_only_with_dimensionless():
    from tantalum import Q
    from tantalum.errors import IncompatibleDimensions

    assert Q(2) + 3 == 5
    assert 3 + Q(2) == 5
    assert 10 - Q(4) == 6
    assert Q(10, 'km/m') - 1 == Q(Fraction(9999, 1000), 'km/m')

    with pytest.raises(IncompatibleDimensions):
        Q(2, 'm') + 3

    with pytest.raises(IncompatibleDimensions):
        3 - Q(2, 'm')


# =============================================================================
# MULTIPLICATION / DIVISION
# =============================================================================

def test_multiply_composes_units():
    from tantalum import Q, Meter, Second

    assert Q(2, 'm') * Q(3, 's') == Q(6, Meter * Second)
    assert Q(2, 'm') * 3 == Q(6, 'm')
    assert 3 * Q(2, 'm') == Q(6, 'm')
    assert Q(2, 'm') * Second == Q(2, 'm*s')
    assert Meter * Q(2, 's') == Q(2, 'm*s')


def test_divide_composes_units():
    from tantalum import Q

    assert Q(10, 'm') / Q(2, 's') == Q(5, 'm/s')
    assert Q(10, 'm') / 4 == Q(Fraction(5, 2), 'm')
    assert 1 / Q(4, 's') == Q(Fraction(1, 4), '1/s')
    assert (Q(6, 'm') / Q(3, 'm')).unit.is_unitless()


def test_division_by_zero():
    from tantalum import Q
    from tantalum.errors import DivisionByZero

    with pytest.raises(DivisionByZero):
        Q(1, 'm') / Q(0, 's')

    with pytest.raises(DivisionByZero):
        Q(1, 'm') / 0

    with pytest.raises(ZeroDivisionError):
        5 / Q(0, 'm')

    with pytest.raises(DivisionByZero):
        Q(0, 'm') ** -1


def test_power_and_unary():
    from tantalum import Q

    assert Q(3, 'm') ** 2 == Q(9, 'm^2')
    assert Q(2, 's') ** -1 == Q(Fraction(1, 2), '1/s')
    assert -Q(3, 'm') == Q(-3, 'm')
    assert +Q(3, 'm') == Q(3, 'm')
    assert abs(Q(-3, 'm')) == Q(3, 'm')
    assert not Q(0, 'm')
    assert Q(1, 'm')


# =============================================================================
# CONVERSION
# =============================================================================

def test_convert_incompatible():
    from tantalum import Q
    from tantalum.errors import IncompatibleDimensions

    with pytest.raises(IncompatibleDimensions):
        Q(1, 'm').convert_to('s')

    assert not Q(1, 'm').is_compatible('kg')
    assert Q(1, 'm').is_compatible('mi')


def test_convert_to_same_unit_returns_self():
    from tantalum import Q

    q = Q(5, 'km')

    assert q.convert_to('km') is q


def test_temperature_offsets():
    """degC and degF convert affinely when used bare."""
    from tantalum import Q

    assert Q(100, 'degC').to('degF') == 212
    assert Q(32, 'degF').to('degC') == 0
    assert Q(0, 'degC').to('K') == Fraction(27315, 100)
    assert Q(0, 'degC').si == Fraction(27315, 100)
    assert Q(-40, 'degF').to('degC') == -40


def test_offset_ignored_inside_composites():
    from tantalum import Q

    assert Q(1, 'degC/s').to('K/s') == 1
    assert Q(9, 'degF/s').to('K/s') == 5


def test_to_base():
    from tantalum import Q, Kilogram, Meter, Second

    assert Q(36, 'km/h').to_base() == Q(10, Meter / Second)
    assert Q(1, 'lb').to_base() == Q(Fraction(45359237, 10 ** 8), Kilogram)


def test_apply_prefixes():
    from tantalum import Q, Kilo, Second

    assert Q(5, 'km').apply_prefixes() == Q(5000, 'm')
    assert Q(3, Kilo * Second ** 2).apply_prefixes() == Q(3000, 's^2')
    assert Q(2, 'MiB').apply_prefixes() == Q(2 * 2 ** 20, 'B')


def test_float_only_for_dimensionless():
    from tantalum import Q
    from tantalum.errors import IncompatibleDimensions

    assert float(Q(5, 'km/m')) == 5000.0

    with pytest.raises(IncompatibleDimensions):
        float(Q(1, 'm'))


# =============================================================================
# COMPARISON
# =============================================================================

def test_equality_is_structural():
    """1 km and 1000 m are the same amount, but not equal values."""
    from tantalum import Q

    assert Q(1, 'km') != Q(1000, 'm')
    assert Q(1, 'km').same_value(Q(1000, 'm'))
    assert not Q(1, 'm').same_value(Q(1, 's'))
    assert not Q(1, 'm').same_value(1)
    assert Q(2) == 2
    assert Q(2, 'm') != 2
    assert hash(Q(2)) == hash(2)
    assert hash(Q(1, 'm*s')) == hash(Q(1, 's*m'))


def test_ordering_across_units():
    from tantalum import Q
    from tantalum.errors import IncompatibleDimensions

    assert Q(1, 'km') > Q(999, 'm')
    assert Q(1, 'mi') < Q(2, 'km')
    assert Q(1, 'km') >= Q(1000, 'm')
    assert Q(1, 'km') <= Q(1000, 'm')
    assert sorted([Q(1, 'mi'), Q(1, 'km'), Q(1, 'ft')]) == [Q(1, 'ft'), Q(1, 'km'), Q(1, 'mi')]

    with pytest.raises(IncompatibleDimensions):
        Q(1, 'm') < Q(1, 's')


# =============================================================================
# DISPLAY
# =============================================================================

def test_display():
    from tantalum import Q, Hour, Mile

    assert str(Q(Fraction(1, 3), 'm')) == '1/3 m'
    assert str(Q(Fraction(-1, 4), 's')) == '-0.25 s'
    assert str(Q(2)) == '2'
    assert repr(Q(105, Mile / Hour)) == "Q('105', 'mi/h')"
    assert format(Q(Fraction(1, 3), 'm'), '.3f') == '0.333 m'
    assert f"{Q(Fraction(2, 3), 'km/h'):.2e}" == '6.67e-1 km/h'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
