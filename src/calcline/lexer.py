"""Position-tracking tokenizer for arithmetic expressions.

Tokens are produced lazily, one character class at a time, so the parser only
lexes as far as its lookahead needs.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass

from calcline.errors import CalcSyntaxError

UNKNOWN_SYMBOL = "unknown symbol"


class TokenKind(enum.Enum):
    LPAREN = "("
    RPAREN = ")"
    PLUS = "+"
    DASH = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    CARET = "^"
    NUMBER = "number"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    position: int
    value: float | None = None


_SINGLE_CHAR: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "+": TokenKind.PLUS,
    "-": TokenKind.DASH,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "^": TokenKind.CARET,
}

_DIGITS = frozenset("0123456789")

# Unicode White_Space. str.isspace() also accepts the \x1c-\x1f separators.
_WHITESPACE = frozenset(
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


def _read_number(text: str, start: int) -> tuple[Token, int]:
    """Scan a decimal literal starting at ``start``.

    Consumes ASCII digits and at most one ``.``; a second dot ends the literal
    without being consumed. Returns the token and the index just past it.
    """

    i = start
    found_dot = False
    while i < len(text):
        c = text[i]
        if c == ".":
            if found_dot:
                break
            found_dot = True
        elif c not in _DIGITS:
            break
        i += 1

    try:
        value = float(text[start:i])
    except ValueError:
        raise CalcSyntaxError(start, UNKNOWN_SYMBOL) from None
    return Token(TokenKind.NUMBER, start, value), i


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of ``text`` in order.

    Whitespace is skipped. An unrecognised run raises ``CalcSyntaxError`` at
    the run's starting offset, which also ends iteration.
    """

    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c in _WHITESPACE:
            i += 1
            continue
        kind = _SINGLE_CHAR.get(c)
        if kind is not None:
            yield Token(kind, i)
            i += 1
            continue
        token, i = _read_number(text, i)
        yield token


class Lexer:
    """Token stream with one token of lookahead.

    ``peek`` and ``next`` return ``None`` at end of input. After a lexical
    error the lexer is failed and every further call raises the same error.
    """

    def __init__(self, text: str) -> None:
        self._tokens = tokenize(text)
        self._lookahead: Token | None = None
        self._has_lookahead = False
        self._error: CalcSyntaxError | None = None

    def _pull(self) -> Token | None:
        if self._error is not None:
            raise self._error
        try:
            return next(self._tokens, None)
        except CalcSyntaxError as e:
            self._error = e
            raise

    def peek(self) -> Token | None:
        if not self._has_lookahead:
            self._lookahead = self._pull()
            self._has_lookahead = True
        return self._lookahead

    def next(self) -> Token | None:
        token = self.peek()
        self._has_lookahead = False
        self._lookahead = None
        return token
