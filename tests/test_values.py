"""Tests for scalar coercion rules."""

import math

import pytest
from touchml.values import (
    MAX_SAFE_INTEGER,
    ValueType,
    as_double,
    format_number,
    normalize_number,
    to_bool,
    to_display_string,
    value_type,
    values_equal,
)


class TestValueType:

    def test_bool_is_not_number(self):
        assert value_type(True) is ValueType.BOOL
        assert value_type(1) is ValueType.NUMBER
        assert value_type(1.5) is ValueType.NUMBER
        assert value_type("x") is ValueType.STRING

    def test_unsupported_type_rejected(self):
        with pytest.raises(TypeError):
            value_type([1, 2])


class TestToBool:

    @pytest.mark.parametrize("value", ["", 0, 0.0, False, None, math.nan])
    def test_falsy(self, value):
        assert to_bool(value) is False

    @pytest.mark.parametrize("value", ["a", " ", "false", 1, -1, 0.5, True])
    def test_truthy(self, value):
        assert to_bool(value) is True


class TestDisplayString:

    def test_integral_numbers_have_no_fraction(self):
        assert to_display_string(3) == "3"
        assert to_display_string(3.0) == "3"
        assert to_display_string(-0.0) == "0"

    def test_fractional_numbers(self):
        assert to_display_string(0.1) == "0.1"
        assert to_display_string(2.5) == "2.5"

    def test_special_numbers(self):
        assert format_number(math.nan) == "NaN"
        assert format_number(math.inf) == "Infinity"
        assert format_number(-math.inf) == "-Infinity"

    def test_booleans(self):
        assert to_display_string(True) == "true"
        assert to_display_string(False) == "false"

    def test_strings_pass_through(self):
        assert to_display_string("Hello") == "Hello"
        assert to_display_string("") == ""


class TestEquality:

    def test_int_and_float_equal(self):
        assert values_equal(1, 1.0)

    def test_different_tags_never_equal(self):
        assert not values_equal(True, 1)
        assert not values_equal("1", 1)


class TestNumberRange:

    def test_safe_integers_stay_exact(self):
        assert normalize_number(MAX_SAFE_INTEGER) == MAX_SAFE_INTEGER
        assert isinstance(normalize_number(3.0), int)

    def test_larger_integers_become_doubles(self):
        assert isinstance(normalize_number(MAX_SAFE_INTEGER + 2), float)

    def test_out_of_range_integer_saturates(self):
        assert as_double(10 ** 400) == math.inf
        assert as_double(-(10 ** 400)) == -math.inf

    def test_display_of_huge_integer(self):
        assert format_number(10 ** 5000) == "Infinity"
        assert format_number(10 ** 20) == "100000000000000000000"
