"""Calcline exception hierarchy.

Keep this module small and dependency-free: it is imported by the lexer,
parser and driver layers, and by tests.
"""

from __future__ import annotations


class CalcError(Exception):
    """Base exception for all calcline errors."""


class CalcSyntaxError(CalcError):
    """Raised for lexical or syntactic problems in an expression.

    ``position`` is a 0-based character offset into the original input, usable
    to draw a caret under the offending character.
    """

    def __init__(self, position: int, message: str) -> None:
        super().__init__(message)
        self.position = position
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.position!r}, {self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalcSyntaxError):
            return NotImplemented
        return (self.position, self.message) == (other.position, other.message)

    def __hash__(self) -> int:
        return hash((self.position, self.message))


class CalcIncompleteError(CalcError):
    """Raised when the input ended before the grammar was satisfied.

    Not a user-facing failure: the driver keeps accumulating lines and retries.
    """

    def __init__(self, message: str = "expression is incomplete") -> None:
        super().__init__(message)


class CalcConfigError(CalcError):
    """Raised for invalid user configuration."""
