from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from calcline.errors import (
    CalcConfigError,
    CalcError,
    CalcIncompleteError,
    CalcSyntaxError,
)
from calcline.evaluator import evaluate, evaluate_expr
from calcline.parser import parse


def _package_version() -> str:
    try:
        return version("calcline")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "CalcConfigError",
    "CalcError",
    "CalcIncompleteError",
    "CalcSyntaxError",
    "__version__",
    "evaluate",
    "evaluate_expr",
    "parse",
]
