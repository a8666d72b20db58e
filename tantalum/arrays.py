"""
Array Interop
=============

Bridges exact quantities and numpy float arrays. Conversion to the common
unit happens exactly; rounding to float64 happens once, at the end.

    >>> from tantalum.arrays import magnitudes
    >>> magnitudes([Q(1, "km"), Q(250, "m")], "m")
    array([1000.,  250.])
"""

from typing import Iterable, List, Sequence

import numpy as np

from .errors import IncompatibleDimensions
from .numeric import to_rational
from .quantity import Quantity, UnitLike, _resolve_unit


def magnitudes(quantities: Iterable[Quantity], unit: UnitLike) -> np.ndarray:
    """
    Float64 array of magnitudes, all expressed in unit.

    Raises:
        IncompatibleDimensions: If any quantity cannot be converted to unit
    """
    target = _resolve_unit(unit)
    values = [float(q.to(target)) for q in quantities]
    return np.asarray(values, dtype=np.float64)


def quantities(values: Sequence, unit: UnitLike) -> List[Quantity]:
    """
    Wrap each array element as a Quantity in unit.

    Float elements keep their exact binary value.
    """
    target = _resolve_unit(unit)
    array = np.asarray(values)
    if array.dtype.kind not in 'iuf':
        raise TypeError(f"Expected a numeric array, got dtype {array.dtype}")
    return [Quantity(to_rational(v.item()), target) for v in array.ravel()]


def common_unit(items: Sequence[Quantity]):
    """
    Unit of the first quantity, after checking every other one is compatible.

    Raises:
        ValueError: If items is empty
        IncompatibleDimensions: On the first incompatible quantity
    """
    if not items:
        raise ValueError("No quantities given")
    unit = items[0].unit
    for q in items[1:]:
        if not q.dimensions.is_compatible(unit.dimensions):
            raise IncompatibleDimensions(unit, q.unit, "stack")
    return unit


def stack(items: Sequence[Quantity]):
    """(array, unit) with every quantity expressed in the first one's unit."""
    unit = common_unit(items)
    return magnitudes(items, unit), unit


__all__ = ['magnitudes', 'quantities', 'common_unit', 'stack']
