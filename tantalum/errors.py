"""
Tantalum Errors
===============

Every error raised by tantalum derives from TantalumError and from the
builtin exception a caller would naturally catch for that condition.
"""

from typing import Optional


class TantalumError(Exception):
    """Base class for all tantalum errors."""
    pass


class UnknownUnit(TantalumError, LookupError):
    """Raised when a unit or prefix name is not registered."""

    def __init__(self, name: str, hint: str = ""):
        self.name = name
        message = f"Unknown unit: '{name}'"
        if hint:
            message += f" ({hint})"
        super().__init__(message)


class UnitParseError(TantalumError, ValueError):
    """Raised when a unit expression or quantity string cannot be parsed."""
    pass


def _describe(unit) -> str:
    dims = getattr(unit, "dimensions", None)
    return f"'{unit}' [{dims}]" if dims is not None else f"'{unit}'"


class IncompatibleDimensions(TantalumError, ValueError):
    """
    Raised when an operation needs identical dimensions and gets different ones.

    Addition, subtraction, conversion and ordering all require the two
    operands to share a dimension vector.
    """

    def __init__(self, left, right, operation: str = "combine"):
        self.left = left
        self.right = right
        self.left_dimensions = getattr(left, "dimensions", None)
        self.right_dimensions = getattr(right, "dimensions", None)
        self.operation = operation
        super().__init__(f"Cannot {operation} {_describe(left)} and {_describe(right)}")


class DivisionByZero(TantalumError, ZeroDivisionError):
    """Raised when dividing by a zero-magnitude quantity."""

    def __init__(self, dividend: Optional[object] = None):
        self.dividend = dividend
        if dividend is None:
            super().__init__("Division by zero quantity")
        else:
            super().__init__(f"Cannot divide {dividend} by a zero quantity")


class ConfigurationError(TantalumError):
    """
    Raised when a unit configuration is invalid.

    Covers missing required fields in a units file, inexact scale values
    and symbols registered twice.
    """
    pass


class UnknownConstant(TantalumError, LookupError):
    """Raised when a physical constant name is not known."""
    pass


__all__ = [
    'TantalumError', 'UnknownUnit', 'UnitParseError', 'IncompatibleDimensions',
    'DivisionByZero', 'ConfigurationError', 'UnknownConstant',
]
