"""
Expression evaluator: walks an Expression AST against a DataContext.

The evaluator is stateless apart from its bound context and config. It can
read variables and apply the whitelisted pure operations below, nothing else.
It holds no reference to actions, views or any host object.

Pure members and methods:
    string:  length, toUpperCase(), toLowerCase(), trim(), includes(s),
             startsWith(s), endsWith(s), indexOf(s), slice(start[, end]),
             charAt(i), repeat(n), toString()
    number:  toFixed(digits), toString()
    bool:    toString()
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Sequence

from touchml.config import RenderConfig
from touchml.context import DataContext
from touchml.errors import (
    DisallowedOperationError,
    ExpressionError,
    TypeMismatchError,
    UnknownVariableError,
)
from touchml.expressions import (
    BinaryExpression,
    BinaryOperator,
    ConditionalExpression,
    Expression,
    Literal,
    MemberAccess,
    MethodCall,
    UnaryExpression,
    UnaryOperator,
    VariableReference,
)
from touchml.parser import parse_expression
from touchml.values import (
    Value,
    ValueType,
    format_number,
    normalize_number,
    to_bool,
    to_display_string,
    value_type,
    values_equal,
)

# Upper bound on String.repeat output, so a short expression cannot build a huge string.
MAX_REPEAT_LENGTH = 10_000


def _as_int(value: Value, what: str) -> int:
    if value_type(value) is not ValueType.NUMBER:
        raise TypeMismatchError(f"{what} must be an integer, got {to_display_string(value)!r}")
    value = normalize_number(value)
    if not float(value).is_integer():
        raise TypeMismatchError(f"{what} must be an integer, got {to_display_string(value)!r}")
    return int(value)


def _as_str(value: Value, what: str) -> str:
    if value_type(value) is not ValueType.STRING:
        raise TypeMismatchError(f"{what} must be a string")
    return value


def _slice(s: str, args: Sequence[Value]) -> str:
    start = _as_int(args[0], "slice start") if args else 0
    end = _as_int(args[1], "slice end") if len(args) > 1 else len(s)
    return s[start:end]


def _char_at(s: str, args: Sequence[Value]) -> str:
    index = _as_int(args[0], "charAt index") if args else 0
    return s[index] if 0 <= index < len(s) else ""


def _repeat(s: str, args: Sequence[Value]) -> str:
    count = _as_int(args[0], "repeat count") if args else 0
    if count < 0:
        raise TypeMismatchError("repeat count must be non-negative")
    if len(s) * count > MAX_REPEAT_LENGTH:
        raise DisallowedOperationError(f"repeat result exceeds {MAX_REPEAT_LENGTH} characters")
    return s * count


def _to_fixed(n: float, args: Sequence[Value]) -> str:
    digits = _as_int(args[0], "toFixed digits") if args else 0
    if not 0 <= digits <= 100:
        raise TypeMismatchError("toFixed digits must be between 0 and 100")
    # Like JavaScript, magnitudes from 1e21 up keep exponent notation.
    if math.isnan(n) or math.isinf(n) or abs(n) >= 1e21:
        return format_number(n)
    return f"{n:.{digits}f}"


# name -> (min args, max args, implementation)
_STRING_METHODS: Dict[str, tuple] = {
    "toUpperCase": (0, 0, lambda s, a: s.upper()),
    "toLowerCase": (0, 0, lambda s, a: s.lower()),
    "trim": (0, 0, lambda s, a: s.strip()),
    "toString": (0, 0, lambda s, a: s),
    "includes": (1, 1, lambda s, a: _as_str(a[0], "includes argument") in s),
    "startsWith": (1, 1, lambda s, a: s.startswith(_as_str(a[0], "startsWith argument"))),
    "endsWith": (1, 1, lambda s, a: s.endswith(_as_str(a[0], "endsWith argument"))),
    "indexOf": (1, 1, lambda s, a: s.find(_as_str(a[0], "indexOf argument"))),
    "slice": (0, 2, _slice),
    "charAt": (0, 1, _char_at),
    "repeat": (1, 1, _repeat),
}

_NUMBER_METHODS: Dict[str, tuple] = {
    "toFixed": (0, 1, _to_fixed),
    "toString": (0, 0, lambda n, a: format_number(n)),
}

_BOOL_METHODS: Dict[str, tuple] = {
    "toString": (0, 0, lambda b, a: to_display_string(b)),
}

_METHODS_BY_TYPE = {
    ValueType.STRING: _STRING_METHODS,
    ValueType.NUMBER: _NUMBER_METHODS,
    ValueType.BOOL: _BOOL_METHODS,
}


def _check_number(value: Value, operator: BinaryOperator) -> float:
    if value_type(value) is not ValueType.NUMBER:
        raise TypeMismatchError(
            f"Operator '{operator.value}' requires numbers, got {value_type(value).value}"
        )
    return value


class ExpressionEvaluator:
    """
    Evaluates expressions against one immutable DataContext.

    evaluate() raises ExpressionError subclasses; callers decide the fallback.
    """

    def __init__(self, context: DataContext, config: Optional[RenderConfig] = None) -> None:
        self.context = context
        self.config = config or RenderConfig()

    def evaluate(self, expression: str) -> Value:
        """
        Parse and evaluate an expression.

        Args:
            expression: Expression text, e.g. "count + 1"

        Returns:
            The resulting scalar value

        Raises:
            ExpressionSyntaxError, UnknownVariableError, TypeMismatchError,
            DisallowedOperationError
        """
        if len(expression) > self.config.max_expression_length:
            raise DisallowedOperationError(
                f"Expression longer than {self.config.max_expression_length} characters",
                expression=expression[:80],
            )
        try:
            ast = parse_expression(expression)
            return self.evaluate_ast(ast)
        except ExpressionError as e:
            if e.expression is None:
                e.expression = expression
            raise
        except RecursionError:
            raise DisallowedOperationError("Expression is too deeply nested", expression=expression)
        except (OverflowError, ValueError) as e:
            raise TypeMismatchError(f"Numeric error: {e}", expression=expression)

    def evaluate_ast(self, expr: Expression) -> Value:
        if isinstance(expr, Literal):
            value = expr.value
            return normalize_number(value) if value_type(value) is ValueType.NUMBER else value

        if isinstance(expr, VariableReference):
            if expr.name not in self.context:
                raise UnknownVariableError(expr.name, available=self.context.keys())
            value = self.context[expr.name]
            return normalize_number(value) if value_type(value) is ValueType.NUMBER else value

        if isinstance(expr, UnaryExpression):
            return self._evaluate_unary(expr)

        if isinstance(expr, BinaryExpression):
            return self._evaluate_binary(expr)

        if isinstance(expr, ConditionalExpression):
            if to_bool(self.evaluate_ast(expr.condition)):
                return self.evaluate_ast(expr.when_true)
            return self.evaluate_ast(expr.when_false)

        if isinstance(expr, MemberAccess):
            return self._evaluate_member(expr)

        if isinstance(expr, MethodCall):
            return self._evaluate_method(expr)

        raise DisallowedOperationError(f"Unsupported expression node: {type(expr).__name__}")

    def _evaluate_unary(self, expr: UnaryExpression) -> Value:
        operand = self.evaluate_ast(expr.operand)
        if expr.operator is UnaryOperator.NOT:
            return not to_bool(operand)
        if value_type(operand) is not ValueType.NUMBER:
            raise TypeMismatchError(
                f"Unary '{expr.operator.value}' requires a number, got {value_type(operand).value}"
            )
        if expr.operator is UnaryOperator.NEGATE:
            return -operand
        return operand

    def _evaluate_binary(self, expr: BinaryExpression) -> Value:
        op = expr.operator

        # Short-circuit: yield the deciding operand.
        if op is BinaryOperator.AND:
            left = self.evaluate_ast(expr.left)
            return self.evaluate_ast(expr.right) if to_bool(left) else left
        if op is BinaryOperator.OR:
            left = self.evaluate_ast(expr.left)
            return left if to_bool(left) else self.evaluate_ast(expr.right)

        left = self.evaluate_ast(expr.left)
        right = self.evaluate_ast(expr.right)

        if op is BinaryOperator.EQUALS:
            return values_equal(left, right)
        if op is BinaryOperator.NOT_EQUALS:
            return not values_equal(left, right)

        if op in (
            BinaryOperator.LESS_THAN,
            BinaryOperator.LESS_EQUAL,
            BinaryOperator.GREATER_THAN,
            BinaryOperator.GREATER_EQUAL,
        ):
            return self._compare(op, left, right)

        if op is BinaryOperator.ADD and (
            value_type(left) is ValueType.STRING or value_type(right) is ValueType.STRING
        ):
            return to_display_string(left) + to_display_string(right)

        a = _check_number(left, op)
        b = _check_number(right, op)
        if op is BinaryOperator.ADD:
            return normalize_number(a + b)
        if op is BinaryOperator.SUBTRACT:
            return normalize_number(a - b)
        if op is BinaryOperator.MULTIPLY:
            return normalize_number(a * b)
        if b == 0:
            raise TypeMismatchError(f"Operator '{op.value}' with a zero divisor")
        if op is BinaryOperator.DIVIDE:
            return normalize_number(a / b)
        # JavaScript remainder keeps the sign of the dividend.
        if math.isinf(a) or math.isnan(a) or math.isnan(b):
            return math.nan
        if math.isinf(b):
            return a
        return normalize_number(math.fmod(a, b))

    def _compare(self, op: BinaryOperator, left: Value, right: Value) -> bool:
        left_type = value_type(left)
        if left_type is not value_type(right) or left_type is ValueType.BOOL:
            raise TypeMismatchError(
                f"Operator '{op.value}' cannot compare {left_type.value} "
                f"with {value_type(right).value}"
            )
        if op is BinaryOperator.LESS_THAN:
            return left < right
        if op is BinaryOperator.LESS_EQUAL:
            return left <= right
        if op is BinaryOperator.GREATER_THAN:
            return left > right
        return left >= right

    def _evaluate_member(self, expr: MemberAccess) -> Value:
        target = self.evaluate_ast(expr.target)
        if expr.name == "length" and value_type(target) is ValueType.STRING:
            return len(target)
        raise DisallowedOperationError(
            f"Member '{expr.name}' is not available on {value_type(target).value} values"
        )

    def _evaluate_method(self, expr: MethodCall) -> Value:
        target = self.evaluate_ast(expr.target)
        methods = _METHODS_BY_TYPE[value_type(target)]
        if expr.name not in methods:
            raise DisallowedOperationError(
                f"Method '{expr.name}' is not available on {value_type(target).value} values"
            )
        min_args, max_args, impl = methods[expr.name]
        if not min_args <= len(expr.arguments) <= max_args:
            raise TypeMismatchError(
                f"Method '{expr.name}' takes {min_args}..{max_args} arguments, "
                f"got {len(expr.arguments)}"
            )
        args = [self.evaluate_ast(arg) for arg in expr.arguments]
        return impl(target, args)


__all__ = ["ExpressionEvaluator", "MAX_REPEAT_LENGTH"]
