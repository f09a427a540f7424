"""
Left-to-right expression model for the keypad.

An expression is always exactly one of three shapes. Each transition below
handles every shape and raises TypeError for anything else, so a new shape
cannot be introduced without updating all of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from keycalc.services.errors import ConsecutiveOperatorError
from keycalc.services.symbols import Digit, Equals, Operator, Token


@dataclass(frozen=True)
class Value:
    value: int


@dataclass(frozen=True)
class PendingOp:
    left: int
    op: Operator


@dataclass(frozen=True)
class Binary:
    left: int
    op: Operator
    right: int


Expression = Union[Value, PendingOp, Binary]

EMPTY_EXPRESSION = Value(0)


def evaluate(left: int, op: Operator, right: int) -> int:
    return op.apply(left, right)


def _extend(current: int, digit: Digit) -> int:
    return current * 10 + digit.value


def apply_digit(expression: Expression, digit: Digit) -> Expression:
    if isinstance(expression, Value):
        return Value(_extend(expression.value, digit))
    if isinstance(expression, PendingOp):
        return Binary(expression.left, expression.op, digit.value)
    if isinstance(expression, Binary):
        return Binary(expression.left, expression.op, _extend(expression.right, digit))
    raise TypeError(f"Unsupported expression shape: {expression!r}")


def apply_operator(expression: Expression, op: Operator) -> Expression:
    if isinstance(expression, Value):
        return PendingOp(expression.value, op)
    if isinstance(expression, PendingOp):
        raise ConsecutiveOperatorError(expression.op, op)
    if isinstance(expression, Binary):
        # Eager: collapse the pending pair before the new operator takes over.
        return PendingOp(evaluate(expression.left, expression.op, expression.right), op)
    raise TypeError(f"Unsupported expression shape: {expression!r}")


def apply_equals(expression: Expression) -> Value:
    if isinstance(expression, Value):
        return expression
    if isinstance(expression, PendingOp):
        return Value(evaluate(expression.left, expression.op, 0))
    if isinstance(expression, Binary):
        return Value(evaluate(expression.left, expression.op, expression.right))
    raise TypeError(f"Unsupported expression shape: {expression!r}")


def advance(expression: Expression, token: Token) -> Expression:
    """Return the expression that follows ``token``; only operators can fail."""
    if isinstance(token, Digit):
        return apply_digit(expression, token)
    if isinstance(token, Operator):
        return apply_operator(expression, token)
    if isinstance(token, Equals):
        return apply_equals(expression)
    raise TypeError(f"Unsupported token: {token!r}")
