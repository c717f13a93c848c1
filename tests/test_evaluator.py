"""
Tests for ExpressionEvaluator.

These tests verify:
    - Variable lookup and literals
    - Arithmetic, comparison and logic semantics
    - Whitelisted pure methods
    - Each error kind of the closed taxonomy
"""

import math

import pytest
from touchml.config import RenderConfig
from touchml.context import DataContext
from touchml.errors import (
    DisallowedOperationError,
    ErrorKind,
    ExpressionSyntaxError,
    TypeMismatchError,
    UnknownVariableError,
)
from touchml.evaluator import MAX_REPEAT_LENGTH, ExpressionEvaluator


@pytest.fixture
def evaluator():
    return ExpressionEvaluator(DataContext({
        "username": "Anand",
        "empty": "",
        "count": 3,
        "price": 2.5,
        "premium": True,
        "guest": False,
    }))


class TestLookup:

    def test_variable(self, evaluator):
        assert evaluator.evaluate("username") == "Anand"
        assert evaluator.evaluate("premium") is True

    def test_unknown_variable(self, evaluator):
        with pytest.raises(UnknownVariableError) as exc:
            evaluator.evaluate("nickname")
        assert exc.value.name == "nickname"
        assert exc.value.kind is ErrorKind.UNKNOWN_VARIABLE
        assert exc.value.expression == "nickname"
        assert "username" in exc.value.available

    def test_null_is_not_a_value(self, evaluator):
        with pytest.raises(UnknownVariableError):
            evaluator.evaluate("null")


class TestArithmetic:

    def test_integer_arithmetic_stays_integral(self, evaluator):
        assert evaluator.evaluate("1 + 2") == 3
        assert isinstance(evaluator.evaluate("1 + 2"), int)
        assert evaluator.evaluate("count * 2 - 1") == 5

    def test_division(self, evaluator):
        assert evaluator.evaluate("10 / 4") == 2.5
        assert evaluator.evaluate("9 / 3") == 3

    def test_modulo_keeps_dividend_sign(self, evaluator):
        assert evaluator.evaluate("7 % 3") == 1
        assert evaluator.evaluate("-7 % 3") == -1

    def test_division_by_zero(self, evaluator):
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("count / 0")
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("count % 0")

    def test_unary_minus(self, evaluator):
        assert evaluator.evaluate("-count") == -3
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("-username")

    def test_string_concatenation(self, evaluator):
        assert evaluator.evaluate("'Hi ' + username") == "Hi Anand"
        assert evaluator.evaluate("'n=' + count") == "n=3"
        assert evaluator.evaluate("'p=' + price") == "p=2.5"
        assert evaluator.evaluate("premium + '!'") == "true!"

    def test_arithmetic_on_booleans_rejected(self, evaluator):
        with pytest.raises(TypeMismatchError) as exc:
            evaluator.evaluate("premium + 1")
        assert exc.value.kind is ErrorKind.TYPE_MISMATCH

    def test_subtracting_strings_rejected(self, evaluator):
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("username - 1")


class TestComparison:

    def test_numbers(self, evaluator):
        assert evaluator.evaluate("count > 2") is True
        assert evaluator.evaluate("price <= 2") is False

    def test_strings(self, evaluator):
        assert evaluator.evaluate("'a' < 'b'") is True

    def test_mixed_types_rejected(self, evaluator):
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("username > 1")
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("premium > guest")

    def test_strict_equality(self, evaluator):
        assert evaluator.evaluate("count == 3") is True
        assert evaluator.evaluate("count == 3.0") is True
        assert evaluator.evaluate("count == '3'") is False
        assert evaluator.evaluate("premium == 1") is False
        assert evaluator.evaluate("username != 'Bob'") is True


class TestLogic:

    def test_and_or_yield_operands(self, evaluator):
        assert evaluator.evaluate("empty || username") == "Anand"
        assert evaluator.evaluate("count && username") == "Anand"
        assert evaluator.evaluate("empty && username") == ""

    def test_short_circuit_skips_errors(self, evaluator):
        assert evaluator.evaluate("guest && missing") is False
        assert evaluator.evaluate("premium || missing") is True

    def test_not(self, evaluator):
        assert evaluator.evaluate("!empty") is True
        assert evaluator.evaluate("not premium") is False

    def test_ternary(self, evaluator):
        assert evaluator.evaluate("count > 1 ? 'items' : 'item'") == "items"
        assert evaluator.evaluate("guest ? missing : 'ok'") == "ok"


class TestPureMethods:

    def test_length(self, evaluator):
        assert evaluator.evaluate("username.length") == 5
        assert evaluator.evaluate("username.length > 0") is True

    def test_case_conversion(self, evaluator):
        assert evaluator.evaluate("username.toUpperCase()") == "ANAND"
        assert evaluator.evaluate("username.toLowerCase()") == "anand"

    def test_search_methods(self, evaluator):
        assert evaluator.evaluate("username.includes('na')") is True
        assert evaluator.evaluate("username.startsWith('An')") is True
        assert evaluator.evaluate("username.endsWith('x')") is False
        assert evaluator.evaluate("username.indexOf('n')") == 1
        assert evaluator.evaluate("username.indexOf('z')") == -1

    def test_slicing(self, evaluator):
        assert evaluator.evaluate("username.slice(1, 3)") == "na"
        assert evaluator.evaluate("username.slice(-2)") == "nd"
        assert evaluator.evaluate("username.charAt(0)") == "A"
        assert evaluator.evaluate("username.charAt(99)") == ""

    def test_trim_and_repeat(self, evaluator):
        assert evaluator.evaluate("'  x '.trim()") == "x"
        assert evaluator.evaluate("'ab'.repeat(3)") == "ababab"

    def test_repeat_is_bounded(self, evaluator):
        with pytest.raises(DisallowedOperationError):
            evaluator.evaluate(f"'ab'.repeat({MAX_REPEAT_LENGTH})")

    def test_number_methods(self, evaluator):
        assert evaluator.evaluate("price.toFixed(2)") == "2.50"
        assert evaluator.evaluate("count.toString()") == "3"
        assert evaluator.evaluate("premium.toString()") == "true"

    def test_argument_types_checked(self, evaluator):
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("username.includes(1)")
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("username.slice(1.5)")

    def test_argument_count_checked(self, evaluator):
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("username.toUpperCase(1)")


class TestSandbox:

    @pytest.mark.parametrize("source", [
        "username.constructor",
        "username.split(',')",
        "count.length",
        "premium.toUpperCase()",
        "username.valueOf()",
    ])
    def test_non_whitelisted_members(self, evaluator, source):
        with pytest.raises(DisallowedOperationError) as exc:
            evaluator.evaluate(source)
        assert exc.value.kind is ErrorKind.DISALLOWED_OPERATION

    def test_host_calls_rejected(self, evaluator):
        with pytest.raises(DisallowedOperationError):
            evaluator.evaluate("greetAction()")

    def test_context_cannot_be_written(self, evaluator):
        with pytest.raises(DisallowedOperationError):
            evaluator.evaluate("username = 'x'")
        assert evaluator.evaluate("username") == "Anand"

    def test_expression_length_limit(self):
        evaluator = ExpressionEvaluator(DataContext({"a": 1}), RenderConfig(max_expression_length=10))
        with pytest.raises(DisallowedOperationError):
            evaluator.evaluate("a + a + a + a")

    def test_long_flat_chain_is_rejected_not_crashed(self):
        evaluator = ExpressionEvaluator(DataContext({"a": 1}), RenderConfig(max_expression_length=20000))
        source = " + ".join(["a"] * 4000)
        with pytest.raises(DisallowedOperationError):
            evaluator.evaluate(source)

    def test_syntax_error_kind(self, evaluator):
        with pytest.raises(ExpressionSyntaxError) as exc:
            evaluator.evaluate("count >")
        assert exc.value.kind is ErrorKind.SYNTAX


class TestStatelessness:

    def test_repeated_evaluation_is_stable(self, evaluator):
        results = {evaluator.evaluate("username.toUpperCase() + count") for _ in range(5)}
        assert results == {"ANAND3"}


class TestNumericExtremes:
    """Numbers past the double range saturate instead of raising Python errors."""

    def test_long_integer_literal_becomes_double(self, evaluator):
        result = evaluator.evaluate("99999999999999999999 * 17")
        assert isinstance(result, float)
        assert result == pytest.approx(1.7e21)

    def test_very_long_literal_parses_to_infinity(self):
        evaluator = ExpressionEvaluator(DataContext({}), RenderConfig(max_expression_length=20000))
        assert evaluator.evaluate("1" * 5000) == math.inf

    def test_product_overflows_to_infinity(self, evaluator):
        assert evaluator.evaluate("1e300 * 1e300") == math.inf

    def test_huge_context_integer_is_held_as_double(self):
        evaluator = ExpressionEvaluator(DataContext({"n": 10 ** 400}))
        assert evaluator.evaluate("n * n") == math.inf
        assert evaluator.evaluate("n > 1") is True

    def test_remainder_of_infinity_is_nan(self):
        evaluator = ExpressionEvaluator(DataContext({"n": 10 ** 400, "count": 3}))
        assert math.isnan(evaluator.evaluate("n % 7"))
        assert evaluator.evaluate("count % n") == 3

    def test_to_fixed_keeps_exponent_for_large_values(self, evaluator):
        assert evaluator.evaluate("(1e300).toFixed(2)") == "1e+300"
        assert evaluator.evaluate("(1e300 * 1e300).toFixed(2)") == "Infinity"

    def test_infinite_slice_index_is_type_mismatch(self):
        evaluator = ExpressionEvaluator(DataContext({"s": "abc", "n": 10 ** 400}))
        with pytest.raises(TypeMismatchError):
            evaluator.evaluate("s.slice(n)")
