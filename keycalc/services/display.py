from __future__ import annotations

from keycalc.services.symbols import Digit, Operator

ERROR_DISPLAY = "ERROR"


def append(display: str, token: Digit | Operator) -> str:
    """Return the display with the accepted token's literal text appended."""
    return display + token.text


def result(value: int) -> str:
    return str(value)
