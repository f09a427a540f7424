from __future__ import annotations

from typing import TYPE_CHECKING

from keycalc.core.exceptions import AppError

if TYPE_CHECKING:
    from keycalc.services.symbols import Operator


class CalculatorError(AppError):
    status_code = 400
    error_type = "CALCULATOR_ERROR"


class ParseError(CalculatorError):
    error_type = "PARSE_ERROR"

    def __init__(self, key: str) -> None:
        super().__init__(f"Unsupported key {key!r}.", details={"key": key})
        self.key = key


class ConsecutiveOperatorError(CalculatorError):
    error_type = "CONSECUTIVE_OPERATOR_ERROR"

    def __init__(self, previous: "Operator", next: "Operator") -> None:
        super().__init__(
            f"Operator {next.value!r} follows pending operator {previous.value!r}.",
            details={"previous": previous.value, "next": next.value},
        )
        self.previous = previous
        self.next = next
