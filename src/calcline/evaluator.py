"""Expression tree evaluation with IEEE-754 float semantics.

Python raises where IEEE-754 arithmetic produces ``inf`` or ``nan`` (division
by zero, ``math.fmod`` by zero, domain and range errors in ``math.pow``).
The helpers below map those cases back to the float result.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from calcline.parser import Binary, Expr, Number, Operator, Unary, parse


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def _add(a: float, b: float) -> float:
    return a + b


def _sub(a: float, b: float) -> float:
    return a - b


def _mul(a: float, b: float) -> float:
    return a * b


def _div(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _mod(a: float, b: float) -> float:
    # fmod keeps the sign of the dividend; Python's % follows the divisor.
    try:
        return math.fmod(a, b)
    except ValueError:
        # x % 0 and inf % y
        return math.nan


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0:
            # Zero raised to a negative power.
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        # Negative base with a fractional exponent.
        return math.nan


_BINARY_OPS: dict[Operator, Callable[[float, float], float]] = {
    Operator.ADD: _add,
    Operator.SUB: _sub,
    Operator.MUL: _mul,
    Operator.DIV: _div,
    Operator.MOD: _mod,
    Operator.POW: _pow,
}


def evaluate_expr(expr: Expr) -> float:
    """Fold an expression tree to a single float.

    Walks the tree post-order with an explicit stack: a chain like
    ``1+1+...+1`` parses into a left-deep tree as deep as the chain is long.
    """

    values: list[float] = []
    # (node, operands_done) pairs; a node is revisited once its operands are on `values`.
    pending: list[tuple[Expr, bool]] = [(expr, False)]
    while pending:
        node, operands_done = pending.pop()

        if isinstance(node, Number):
            values.append(node.value)
            continue

        if isinstance(node, Unary):
            if node.op is not Operator.NEG:
                raise ValueError(f"Unsupported unary operator: {node.op.name}")
            if operands_done:
                values.append(-values.pop())
            else:
                pending.append((node, True))
                pending.append((node.operand, False))
            continue

        if isinstance(node, Binary):
            fn = _BINARY_OPS.get(node.op)
            if fn is None:
                raise ValueError(f"Unsupported binary operator: {node.op.name}")
            if operands_done:
                right = values.pop()
                left = values.pop()
                values.append(fn(left, right))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
            continue

        raise TypeError(f"Unsupported expression: {type(node).__name__}")

    return values.pop()


def evaluate(text: str) -> float:
    """Parse and evaluate ``text``.

    Raises ``CalcSyntaxError`` for malformed input and ``CalcIncompleteError``
    when more input is needed.
    """

    return evaluate_expr(parse(text))
