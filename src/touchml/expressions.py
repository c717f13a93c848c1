"""
Expression AST for TouchML

Visibility predicates and template spans are parsed into these nodes before
evaluation. Nodes are structure only: the parser builds them, the evaluator
walks them, the analyzer inspects them.

ARCHITECTURAL RULE:
    No node type can express an effect.
    There is no assignment, no bare call, no host object access.
    The only calls are MethodCall nodes, whitelisted by the evaluator.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class Expression(ABC):
    """
    Base class for all AST expressions.

    This class is structure only.
    Evaluation belongs in touchml.evaluator.
    """
    pass


class BinaryOperator(Enum):
    """
    Binary operators supported by the expression language.

    Logical operators short-circuit and yield the deciding operand.
    """

    # Logical operators
    AND = "&&"
    OR = "||"

    # Equality (strict, no cross-type coercion)
    EQUALS = "=="
    NOT_EQUALS = "!="

    # Ordering
    GREATER_THAN = ">"
    GREATER_EQUAL = ">="
    LESS_THAN = "<"
    LESS_EQUAL = "<="

    # Arithmetic / concatenation
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    A binary logical, comparison or arithmetic expression.

    Example:
        score >= 10 && premium

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.AND,
            left=BinaryExpression(
                operator=BinaryOperator.GREATER_EQUAL,
                left=VariableReference("score"),
                right=Literal(10)
            ),
            right=VariableReference("premium")
        )
    """

    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class VariableReference(Expression):
    """
    References a data context variable by name.

    Existence is not checked here; the evaluator raises UnknownVariableError.
    """

    name: str


@dataclass(frozen=True)
class Literal(Expression):
    """
    A literal scalar constant: 1, 2.5, "Yes", true.
    """

    value: Union[int, float, str, bool]


class UnaryOperator(Enum):
    """Unary prefix operators."""
    NOT = "!"
    NEGATE = "-"
    PLUS = "+"


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    A unary prefix operation.

    Example:
        !premium  ->  UnaryExpression(UnaryOperator.NOT, VariableReference("premium"))
    """

    operator: UnaryOperator
    operand: Expression


@dataclass(frozen=True)
class MemberAccess(Expression):
    """
    Property read on a value, e.g. username.length.

    Only whitelisted pure members evaluate; everything else is disallowed.
    """

    target: Expression
    name: str


@dataclass(frozen=True)
class MethodCall(Expression):
    """
    Method call on a value, e.g. username.toUpperCase().

    The language has no free function calls.
    """

    target: Expression
    name: str
    arguments: Tuple[Expression, ...] = ()


@dataclass(frozen=True)
class ConditionalExpression(Expression):
    """
    Ternary selection: count > 1 ? "items" : "item"
    """

    condition: Expression
    when_true: Expression
    when_false: Expression


__all__ = [
    "Expression",
    "BinaryOperator",
    "BinaryExpression",
    "VariableReference",
    "Literal",
    "UnaryOperator",
    "UnaryExpression",
    "MemberAccess",
    "MethodCall",
    "ConditionalExpression",
]
