"""
Scalar values and their fixed coercion rules.

The value variant is closed: bool, int, float or str. Nothing else can enter
a data context or come out of the evaluator.

Coercions:
    to_bool:            "" / 0 / NaN / absent -> False, everything else True
    to_display_string:  numbers in canonical decimal form, booleans as
                        "true"/"false", strings unchanged
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional, Union

Value = Union[bool, int, float, str]


class ValueType(Enum):
    """Tag of a scalar value. Bool is checked before number (bool is an int subclass)."""
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"


def value_type(value: Value) -> ValueType:
    """
    Classify a scalar value.

    Raises:
        TypeError: If the value is not a supported scalar
    """
    if isinstance(value, bool):
        return ValueType.BOOL
    if isinstance(value, (int, float)):
        return ValueType.NUMBER
    if isinstance(value, str):
        return ValueType.STRING
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def is_value(value: object) -> bool:
    return isinstance(value, (bool, int, float, str))


def to_bool(value: Optional[Value]) -> bool:
    if value is None:
        return False
    kind = value_type(value)
    if kind is ValueType.BOOL:
        return value
    if kind is ValueType.NUMBER:
        return not (value == 0 or math.isnan(value))
    return value != ""


# Integers beyond this magnitude are held as doubles, like JavaScript numbers.
MAX_SAFE_INTEGER = 2 ** 53 - 1


def as_double(number: Union[int, float]) -> float:
    """Convert to a float, saturating to +/-Infinity past the float range."""
    try:
        return float(number)
    except OverflowError:
        return math.inf if number > 0 else -math.inf


def normalize_number(number: Union[int, float]) -> Union[int, float]:
    """
    Canonical numeric representation.

    Integral values within the safe integer range are ints (1 + 2 stays 3,
    not 3.0); everything else is a float.
    """
    if isinstance(number, int):
        return number if abs(number) <= MAX_SAFE_INTEGER else as_double(number)
    if number.is_integer() and abs(number) <= MAX_SAFE_INTEGER:
        return int(number)
    return number


def format_number(number: Union[int, float]) -> str:
    """
    Canonical decimal form of a number.

    Integral values drop the fractional part (3.0 -> "3"), other values use
    the shortest round-trip representation.
    """
    number = normalize_number(number)
    if isinstance(number, int):
        return str(number)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(number)


def to_display_string(value: Value) -> str:
    kind = value_type(value)
    if kind is ValueType.BOOL:
        return "true" if value else "false"
    if kind is ValueType.NUMBER:
        return format_number(value)
    return value


def values_equal(left: Value, right: Value) -> bool:
    """Strict equality: values of different tags are never equal."""
    if value_type(left) is not value_type(right):
        return False
    return left == right


__all__ = [
    "Value",
    "ValueType",
    "value_type",
    "is_value",
    "to_bool",
    "MAX_SAFE_INTEGER",
    "as_double",
    "normalize_number",
    "format_number",
    "to_display_string",
    "values_equal",
]
