"""Error formatting and actionable hints for calcline output.

Keep this module small and dependency-light: it is imported by the REPL and CLI
layers and only depends on the error hierarchy.
"""

from __future__ import annotations

from calcline.config import CONFIG_FILENAME
from calcline.errors import CalcConfigError, CalcIncompleteError, CalcSyntaxError
from calcline.lexer import UNKNOWN_SYMBOL
from calcline.parser import UNEXPECTED_TOKEN


def flatten(text: str) -> str:
    """Render a (possibly multi-line) buffer on one line, keeping offsets."""
    return text.replace("\r", " ").replace("\n", " ")


def caret_lines(text: str, position: int, indent: int = 2) -> tuple[str, str]:
    """Return the indented input line and a caret line pointing at ``position``."""
    pad = " " * max(0, indent)
    source = pad + flatten(text).rstrip()
    pointer = " " * (max(0, position) + max(0, indent)) + "^ "
    return source, pointer


def format_caret(text: str, err: CalcSyntaxError, indent: int = 2) -> str:
    """Format a syntax error as source line, caret and message."""
    source, pointer = caret_lines(text, err.position, indent)
    return f"{source}\n{pointer}{err.message}"


def format_hint(exc: BaseException) -> str | None:
    """Return an actionable hint for a known error, or None."""
    if isinstance(exc, CalcSyntaxError):
        if exc.message == UNKNOWN_SYMBOL:
            return "only numbers and the operators + - * / % ^ ( ) are supported"
        if exc.message == UNEXPECTED_TOKEN:
            return "expected a number, '(' or '-' before this point"
        return None

    if isinstance(exc, CalcIncompleteError):
        return "finish the expression or close any open parentheses"

    if isinstance(exc, CalcConfigError):
        msg = str(exc)
        if msg.startswith(f"Missing {CONFIG_FILENAME}"):
            return "check the path passed to --config"
        if "version = 1" in msg:
            return f"add `version = 1` at the top of {CONFIG_FILENAME}"
        return None

    return None


def format_error_with_hint(exc: BaseException) -> str:
    """Format error message + optional hint for stderr output."""
    msg = (str(exc) or repr(exc)).strip()
    if isinstance(exc, CalcSyntaxError):
        msg = f"{msg} (at offset {exc.position})"

    result = f"error: {msg}"
    hint = format_hint(exc)
    if hint:
        result += f"\nhint: {hint}"
    return result
