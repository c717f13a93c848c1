"""
Expression parser for TouchML (text -> Expression AST).

Grammar, lowest precedence first:

    ternary         cond ? a : b
    or              a || b          (also: a or b)
    and             a && b          (also: a and b)
    equality        == != === !==
    comparison      < <= > >=
    additive        + -
    multiplicative  * / %
    unary           ! - +           (also: not a)
    postfix         value.member    value.method(args)
    primary         number, 'string', "string", true, false, name, ( expr )

Sandbox rules enforced at parse time:
    - Assignment, increment and statement separators are rejected
    - Bare calls like alert(1) are rejected: only value.method() exists
    - Reserved words that imply effects (new, function, eval, ...) are rejected

All failures raise ExpressionSyntaxError or DisallowedOperationError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

from touchml.errors import DisallowedOperationError, ExpressionSyntaxError
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
from touchml.values import MAX_SAFE_INTEGER

# Parenthesis / unary / ternary nesting limit, keeps recursion well inside the
# interpreter stack.
MAX_NESTING = 32

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
  | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
  | (?P<ident>[A-Za-z_$][A-Za-z0-9_$]*)
  | (?P<op>===|!==|==|!=|<=|>=|&&|\|\||\+\+|--|\+=|-=|\*=|/=|%=|=>|[-+*/%<>!?:().,=;])
    """,
    re.VERBOSE,
)

# Tokens that only make sense in a language with effects.
_DISALLOWED_OPS = {"=", "++", "--", "+=", "-=", "*=", "/=", "%=", "=>", ";"}

_DISALLOWED_WORDS = {
    "new", "function", "this", "eval", "delete", "typeof", "void", "import",
    "var", "let", "const", "return", "class", "throw", "await", "yield",
    "globalThis", "window", "self", "constructor", "prototype",
}

_EQUALITY_OPS = {
    "==": BinaryOperator.EQUALS,
    "===": BinaryOperator.EQUALS,
    "!=": BinaryOperator.NOT_EQUALS,
    "!==": BinaryOperator.NOT_EQUALS,
}

_COMPARISON_OPS = {
    "<": BinaryOperator.LESS_THAN,
    "<=": BinaryOperator.LESS_EQUAL,
    ">": BinaryOperator.GREATER_THAN,
    ">=": BinaryOperator.GREATER_EQUAL,
}

_ADDITIVE_OPS = {"+": BinaryOperator.ADD, "-": BinaryOperator.SUBTRACT}

_MULTIPLICATIVE_OPS = {
    "*": BinaryOperator.MULTIPLY,
    "/": BinaryOperator.DIVIDE,
    "%": BinaryOperator.MODULO,
}

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


@dataclass(frozen=True)
class Token:
    """A lexical token with its character offset in the source."""
    kind: str  # number | string | ident | op | eof
    text: str
    position: int


def _unescape(body: str) -> str:
    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            if nxt == "u" and re.match(r"[0-9a-fA-F]{4}", body[i + 2:i + 6]):
                out.append(chr(int(body[i + 2:i + 6], 16)))
                i += 6
                continue
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def tokenize(source: str) -> List[Token]:
    """
    Split an expression into tokens, ending with an eof token.

    Raises:
        ExpressionSyntaxError: On characters outside the language
        DisallowedOperationError: On assignment-like or statement tokens
    """
    tokens: List[Token] = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            raise ExpressionSyntaxError(f"Unexpected character {source[pos]!r}", source, pos)
        kind = match.lastgroup
        text = match.group()
        if kind == "op" and text in _DISALLOWED_OPS:
            raise DisallowedOperationError(
                f"Operator '{text}' is not permitted in expressions", expression=source
            )
        if kind != "ws":
            tokens.append(Token(kind, text, pos))
        pos = match.end()
    tokens.append(Token("eof", "", len(source)))
    return tokens


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens = tokenize(source)
        self.pos = 0
        self.depth = 0

    # -- token helpers ------------------------------------------------------

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _at_op(self, *texts: str) -> bool:
        token = self._peek()
        return token.kind == "op" and token.text in texts

    def _at_word(self, *words: str) -> bool:
        token = self._peek()
        return token.kind == "ident" and token.text in words

    def _expect_op(self, text: str) -> Token:
        if not self._at_op(text):
            self._fail(f"Expected '{text}'")
        return self._advance()

    def _fail(self, message: str, token: Optional[Token] = None):
        token = token or self._peek()
        if token.kind == "eof":
            raise ExpressionSyntaxError(f"{message}, found end of expression", self.source, token.position)
        raise ExpressionSyntaxError(f"{message}, found '{token.text}'", self.source, token.position)

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise DisallowedOperationError(
                f"Expression nesting exceeds {MAX_NESTING} levels", expression=self.source
            )

    def _leave(self) -> None:
        self.depth -= 1

    # -- grammar -------------------------------------------------------------

    def parse(self) -> Expression:
        if self._peek().kind == "eof":
            raise ExpressionSyntaxError("Empty expression", self.source)
        expr = self._parse_ternary_expression()
        if self._peek().kind != "eof":
            self._fail("Unexpected token after expression")
        return expr

    def _parse_ternary_expression(self) -> Expression:
        """Parse cond ? a : b (right-associative)."""
        self._enter()
        condition = self._parse_or_expression()
        if self._at_op("?"):
            self._advance()
            when_true = self._parse_ternary_expression()
            self._expect_op(":")
            when_false = self._parse_ternary_expression()
            condition = ConditionalExpression(condition, when_true, when_false)
        self._leave()
        return condition

    def _parse_or_expression(self) -> Expression:
        left = self._parse_and_expression()
        while self._at_op("||") or self._at_word("or"):
            self._advance()
            right = self._parse_and_expression()
            left = BinaryExpression(BinaryOperator.OR, left, right)
        return left

    def _parse_and_expression(self) -> Expression:
        left = self._parse_equality_expression()
        while self._at_op("&&") or self._at_word("and"):
            self._advance()
            right = self._parse_equality_expression()
            left = BinaryExpression(BinaryOperator.AND, left, right)
        return left

    def _parse_equality_expression(self) -> Expression:
        left = self._parse_comparison_expression()
        while self._at_op(*_EQUALITY_OPS):
            op = _EQUALITY_OPS[self._advance().text]
            right = self._parse_comparison_expression()
            left = BinaryExpression(op, left, right)
        return left

    def _parse_comparison_expression(self) -> Expression:
        left = self._parse_additive_expression()
        while self._at_op(*_COMPARISON_OPS):
            op = _COMPARISON_OPS[self._advance().text]
            right = self._parse_additive_expression()
            left = BinaryExpression(op, left, right)
        return left

    def _parse_additive_expression(self) -> Expression:
        left = self._parse_multiplicative_expression()
        while self._at_op(*_ADDITIVE_OPS):
            op = _ADDITIVE_OPS[self._advance().text]
            right = self._parse_multiplicative_expression()
            left = BinaryExpression(op, left, right)
        return left

    def _parse_multiplicative_expression(self) -> Expression:
        left = self._parse_unary_expression()
        while self._at_op(*_MULTIPLICATIVE_OPS):
            op = _MULTIPLICATIVE_OPS[self._advance().text]
            right = self._parse_unary_expression()
            left = BinaryExpression(op, left, right)
        return left

    def _parse_unary_expression(self) -> Expression:
        if self._at_op("!") or self._at_word("not"):
            operator = UnaryOperator.NOT
        elif self._at_op("-"):
            operator = UnaryOperator.NEGATE
        elif self._at_op("+"):
            operator = UnaryOperator.PLUS
        else:
            return self._parse_postfix_expression()
        self._advance()
        self._enter()
        operand = self._parse_unary_expression()
        self._leave()
        return UnaryExpression(operator, operand)

    def _parse_postfix_expression(self) -> Expression:
        expr = self._parse_primary_expression()
        while True:
            if self._at_op("."):
                self._advance()
                name_token = self._peek()
                if name_token.kind != "ident":
                    self._fail("Expected member name after '.'")
                self._advance()
                if name_token.text in _DISALLOWED_WORDS or name_token.text.startswith("_"):
                    raise DisallowedOperationError(
                        f"Access to member '{name_token.text}' is not permitted",
                        expression=self.source,
                    )
                if self._at_op("("):
                    arguments = self._parse_arguments()
                    expr = MethodCall(expr, name_token.text, arguments)
                else:
                    expr = MemberAccess(expr, name_token.text)
            elif self._at_op("("):
                raise DisallowedOperationError(
                    "Function calls are not permitted; only value methods such as name.toUpperCase()",
                    expression=self.source,
                )
            else:
                return expr

    def _parse_arguments(self) -> Tuple[Expression, ...]:
        self._expect_op("(")
        arguments = []
        if not self._at_op(")"):
            while True:
                arguments.append(self._parse_ternary_expression())
                if self._at_op(")"):
                    break
                self._expect_op(",")
        self._expect_op(")")
        return tuple(arguments)

    def _parse_primary_expression(self) -> Expression:
        token = self._peek()

        if token.kind == "number":
            self._advance()
            # Long digit runs become doubles before int() could reject them.
            if re.fullmatch(r"\d{1,16}", token.text) and int(token.text) <= MAX_SAFE_INTEGER:
                return Literal(int(token.text))
            return Literal(float(token.text))

        if token.kind == "string":
            self._advance()
            return Literal(_unescape(token.text[1:-1]))

        if token.kind == "ident":
            if token.text in _DISALLOWED_WORDS:
                raise DisallowedOperationError(
                    f"'{token.text}' is not permitted in expressions", expression=self.source
                )
            if token.text in ("and", "or", "not"):
                self._fail("Unexpected operator")
            self._advance()
            if token.text == "true":
                return Literal(True)
            if token.text == "false":
                return Literal(False)
            return VariableReference(token.text)

        if self._at_op("("):
            self._advance()
            expr = self._parse_ternary_expression()
            self._expect_op(")")
            return expr

        self._fail("Unexpected token")


@lru_cache(maxsize=512)
def parse_expression(source: str) -> Expression:
    """
    Parse an expression string into an AST.

    Results are cached by source text; ASTs are immutable so sharing is safe.

    Args:
        source: Expression text, e.g. "username.length > 0"

    Returns:
        Expression AST

    Raises:
        ExpressionSyntaxError: If the text is not a valid expression
        DisallowedOperationError: If the text uses a construct outside the sandbox
    """
    return _Parser(source.strip()).parse()


__all__ = ["Token", "tokenize", "parse_expression", "MAX_NESTING"]
