"""Recursive-descent parser producing an expression tree.

Grammar, lowest to highest precedence::

    expression := term (('+' | '-') term)*
    term       := factor (('*' | '/' | '%') factor)*
    factor     := primary ('^' factor)?
    primary    := NUMBER | '(' expression ')' | '-' term

Binary operators are left-associative except ``^``, which is right-associative.
Unary minus takes a whole term as its operand, so it binds looser than ``^``
(``-5^2 == -25``) but stops before a sibling ``+``/``-`` (``-5+5 == 0``).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TypeAlias

from calcline.errors import CalcIncompleteError, CalcSyntaxError
from calcline.lexer import Lexer, Token, TokenKind

UNEXPECTED_TOKEN = "not expected here"
TOO_DEEP = "too deeply nested"

# Combined depth of parentheses, unary minus and right-nested powers. Each
# level costs up to five interpreter stack frames.
MAX_NESTING = 100


class Operator(enum.Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"
    NEG = "neg"


@dataclass(frozen=True, slots=True)
class Number:
    value: float


@dataclass(frozen=True, slots=True)
class Unary:
    op: Operator
    operand: Expr


@dataclass(frozen=True, slots=True)
class Binary:
    op: Operator
    left: Expr
    right: Expr


Expr: TypeAlias = "Number | Unary | Binary"

_ADDITIVE: dict[TokenKind, Operator] = {
    TokenKind.PLUS: Operator.ADD,
    TokenKind.DASH: Operator.SUB,
}

_MULTIPLICATIVE: dict[TokenKind, Operator] = {
    TokenKind.STAR: Operator.MUL,
    TokenKind.SLASH: Operator.DIV,
    TokenKind.PERCENT: Operator.MOD,
}


def _unexpected(token: Token) -> CalcSyntaxError:
    return CalcSyntaxError(token.position, UNEXPECTED_TOKEN)


class Parser:
    """Parses a single expression from ``text``.

    A parser is single-use: it owns a fresh lexer over the input.
    """

    def __init__(self, text: str) -> None:
        self._lexer = Lexer(text)
        self._depth = 0

    def parse(self) -> Expr:
        """Parse one full expression and require the input to be exhausted."""

        expr = self._expression()
        leftover = self._lexer.next()
        if leftover is not None:
            raise _unexpected(leftover)
        return expr

    def _descend(self, token: Token) -> None:
        if self._depth >= MAX_NESTING:
            raise CalcSyntaxError(token.position, TOO_DEEP)
        self._depth += 1

    def _expression(self) -> Expr:
        expr = self._term()
        while True:
            token = self._lexer.peek()
            if token is None or token.kind not in _ADDITIVE:
                return expr
            self._lexer.next()
            expr = Binary(_ADDITIVE[token.kind], expr, self._term())

    def _term(self) -> Expr:
        expr = self._factor()
        while True:
            token = self._lexer.peek()
            if token is None or token.kind not in _MULTIPLICATIVE:
                return expr
            self._lexer.next()
            expr = Binary(_MULTIPLICATIVE[token.kind], expr, self._factor())

    def _factor(self) -> Expr:
        base = self._primary()
        token = self._lexer.peek()
        if token is None or token.kind is not TokenKind.CARET:
            return base
        self._lexer.next()
        self._descend(token)
        try:
            # Recurse into factor, not primary: a^b^c == a^(b^c).
            exponent = self._factor()
        finally:
            self._depth -= 1
        return Binary(Operator.POW, base, exponent)

    def _primary(self) -> Expr:
        token = self._lexer.next()
        if token is None:
            raise CalcIncompleteError()
        if token.kind is TokenKind.NUMBER:
            assert token.value is not None
            return Number(token.value)
        if token.kind not in (TokenKind.LPAREN, TokenKind.DASH):
            raise _unexpected(token)
        self._descend(token)
        try:
            if token.kind is TokenKind.LPAREN:
                return self._parenthesised()
            return Unary(Operator.NEG, self._term())
        finally:
            self._depth -= 1

    def _parenthesised(self) -> Expr:
        expr = self._expression()
        token = self._lexer.next()
        if token is None:
            raise CalcIncompleteError("missing closing parenthesis")
        if token.kind is not TokenKind.RPAREN:
            raise _unexpected(token)
        return expr


def parse(text: str) -> Expr:
    """Parse ``text`` into an expression tree.

    Raises ``CalcSyntaxError`` for malformed input or nesting deeper than
    ``MAX_NESTING``, and ``CalcIncompleteError`` when the input ends before the
    expression does.
    """

    return Parser(text).parse()
