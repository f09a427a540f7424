from __future__ import annotations

import logging
from dataclasses import dataclass, field

from keycalc.services import display as renderer
from keycalc.services.errors import CalculatorError
from keycalc.services.expression import EMPTY_EXPRESSION, Expression, advance, apply_equals
from keycalc.services.symbols import Equals, classify

logger = logging.getLogger("keycalc.calculator")


@dataclass(frozen=True)
class CalculatorState:
    expression: Expression
    display: str

    @classmethod
    def empty(cls) -> "CalculatorState":
        return cls(EMPTY_EXPRESSION, "")

    @classmethod
    def errored(cls) -> "CalculatorState":
        return cls(EMPTY_EXPRESSION, renderer.ERROR_DISPLAY)

    @property
    def is_error(self) -> bool:
        return self.display == renderer.ERROR_DISPLAY


def transition(state: CalculatorState, key: str) -> CalculatorState:
    """
    Derive the state that follows pressing ``key``.

    Raises CalculatorError when the key cannot be classified or breaks the
    expression structure; ``state`` is never touched either way.
    """
    token = classify(key)
    if isinstance(token, Equals):
        result = apply_equals(state.expression)
        return CalculatorState(result, renderer.result(result.value))
    return CalculatorState(advance(state.expression, token), renderer.append(state.display, token))


@dataclass(frozen=True)
class Calculator:
    """
    Immutable keypad calculator.

    ``press`` never mutates the receiver; it returns the calculator that
    results from the key. Any rejected key yields a calculator showing ERROR
    with an empty expression, and the next key starts over from scratch.
    """

    state: CalculatorState = field(default_factory=CalculatorState.empty)

    def press(self, key: str) -> "Calculator":
        current = CalculatorState.empty() if self.state.is_error else self.state
        try:
            next_state = transition(current, key)
        except CalculatorError as exc:
            logger.debug("calculator.rejected", extra={"error_type": exc.error_type, "key": key})
            return Calculator(CalculatorState.errored())
        return Calculator(next_state)

    def press_keys(self, keys: str) -> "Calculator":
        calculator = self
        for key in keys:
            calculator = calculator.press(key)
        return calculator

    def screen(self) -> str:
        return self.state.display

    @property
    def errored(self) -> bool:
        return self.state.is_error


class CalculatorSession:
    """
    Mutable façade over :class:`Calculator`.

    Holds one current calculator and swaps it for the next one on every key,
    returning itself so presses can be chained.
    """

    def __init__(self, calculator: Calculator | None = None) -> None:
        self._calculator = calculator or Calculator()

    @property
    def calculator(self) -> Calculator:
        return self._calculator

    @property
    def errored(self) -> bool:
        return self._calculator.errored

    def press(self, key: str) -> "CalculatorSession":
        self._calculator = self._calculator.press(key)
        return self

    def press_keys(self, keys: str) -> "CalculatorSession":
        self._calculator = self._calculator.press_keys(keys)
        return self

    def screen(self) -> str:
        return self._calculator.screen()

    def clear(self) -> None:
        self._calculator = Calculator()
