"""
Error types for TouchML.

Expression errors are recoverable: the LogicEngine catches every
ExpressionError and degrades to "hidden" or "empty text". They exist so the
evaluator can say precisely what went wrong, and so the analyzer can report it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


class TouchMLError(Exception):
    """Base exception for all TouchML errors."""
    pass


class ErrorKind(Enum):
    """Closed taxonomy of expression failures."""
    SYNTAX = "syntax"
    UNKNOWN_VARIABLE = "unknown_variable"
    TYPE_MISMATCH = "type_mismatch"
    DISALLOWED_OPERATION = "disallowed_operation"


class ExpressionError(TouchMLError):
    """
    Base exception for expression parsing and evaluation.

    Attributes:
        expression: The expression that failed (if known)
        kind: ErrorKind classifying the failure
    """

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(self, message: str, expression: Optional[str] = None) -> None:
        self.message = message
        self.expression = expression
        super().__init__(message)


class ExpressionSyntaxError(ExpressionError):
    """
    Raised when an expression cannot be parsed.

    The message carries a caret line pointing at the offending position
    when one is known.
    """

    kind = ErrorKind.SYNTAX

    def __init__(self, message: str, expression: str, position: int = 0) -> None:
        self.position = position
        if position > 0 and expression:
            full_message = f"{message} at position {position}:\n{expression}\n{' ' * position}^"
        else:
            full_message = f"{message}: {expression}"
        super().__init__(full_message, expression=expression)


class UnknownVariableError(ExpressionError):
    """Raised when an expression references a name absent from the data context."""

    kind = ErrorKind.UNKNOWN_VARIABLE

    def __init__(
        self,
        name: str,
        expression: Optional[str] = None,
        available: Iterable[str] = (),
    ) -> None:
        self.name = name
        self.available: Tuple[str, ...] = tuple(sorted(available))
        message = f"Unknown variable '{name}'"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message, expression=expression)


class TypeMismatchError(ExpressionError):
    """Raised when an operator is applied to incompatible scalar types."""

    kind = ErrorKind.TYPE_MISMATCH


class DisallowedOperationError(ExpressionError):
    """
    Raised when an expression reaches outside the read-only sandbox.

    Examples: bare function calls, assignment, non-whitelisted methods,
    private member names.
    """

    kind = ErrorKind.DISALLOWED_OPERATION


class LayoutDecodeError(TouchMLError):
    """Raised when a layout payload cannot be decoded into an element tree."""
    pass


@dataclass(frozen=True)
class ExpressionErrorInfo:
    """
    Immutable record of an expression failure, used in analysis reports.

    Attributes:
        expression: The expression that failed
        kind: ErrorKind of the failure
        message: Human-readable error message
    """

    expression: str
    kind: ErrorKind
    message: str

    @classmethod
    def from_error(cls, expression: str, error: ExpressionError) -> "ExpressionErrorInfo":
        return cls(expression=expression, kind=error.kind, message=error.message)


__all__ = [
    "TouchMLError",
    "ErrorKind",
    "ExpressionError",
    "ExpressionSyntaxError",
    "UnknownVariableError",
    "TypeMismatchError",
    "DisallowedOperationError",
    "LayoutDecodeError",
    "ExpressionErrorInfo",
]
