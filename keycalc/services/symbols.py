from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from keycalc.services.errors import ParseError


class Operator(str, Enum):
    plus = "+"
    minus = "-"

    def apply(self, left: int, right: int) -> int:
        return _OPERATOR_FUNCTIONS[self](left, right)

    @property
    def text(self) -> str:
        return self.value


_OPERATOR_FUNCTIONS: dict[Operator, Callable[[int, int], int]] = {
    Operator.plus: operator.add,
    Operator.minus: operator.sub,
}


@dataclass(frozen=True)
class Digit:
    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 9:
            raise ValueError(f"Digit must be between 0 and 9, got {self.value}.")

    @property
    def text(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Equals:
    @property
    def text(self) -> str:
        return "="


Token = Union[Digit, Operator, Equals]

EQUALS = Equals()

_KEYWORD_TOKENS: dict[str, Token] = {
    Operator.plus.value: Operator.plus,
    Operator.minus.value: Operator.minus,
    "=": EQUALS,
}


def classify(key: str) -> Token:
    """Map a single pressed character to its token, raising ParseError otherwise."""
    if len(key) != 1:
        raise ParseError(key)

    token = _KEYWORD_TOKENS.get(key)
    if token is not None:
        return token

    try:
        value = int(key)
    except ValueError as exc:
        raise ParseError(key) from exc
    return Digit(value)
