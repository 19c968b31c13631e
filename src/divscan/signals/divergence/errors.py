"""Exceptions raised for caller contract violations in the divergence engine.

Benign conditions (short series, no extrema, nothing passing the direction
gate) never raise; they produce an empty result.
"""

from __future__ import annotations

import numbers


class DivergenceInputError(ValueError):
    """Base class for invalid arguments passed to the divergence engine."""


class ScanParameterError(DivergenceInputError):
    """Raised when a scan parameter such as ``order`` is out of range."""

    def __init__(self, name: str, value: object, requirement: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} must be {requirement}, got {value!r}")


def check_positive_int(name: str, value: object) -> int:
    """Return ``value`` if it is a positive int, else raise ScanParameterError."""
    # bool is an int subclass; True would silently mean 1
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise ScanParameterError(name, value, "a positive integer")
    return int(value)


class DateAlignmentError(DivergenceInputError):
    """Raised when ``dates`` does not cover every scanned sample."""

    def __init__(self, required: int, actual: int) -> None:
        self.required = required
        self.actual = actual
        super().__init__(
            f"dates has {actual} labels but {required} samples are scanned; "
            "align dates with prices and indicator before scanning"
        )
