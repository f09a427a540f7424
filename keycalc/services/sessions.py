from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import NamedTuple, Optional

from keycalc.core.config import get_settings
from keycalc.core.exceptions import AppError
from keycalc.services.calculator import Calculator

logger = logging.getLogger("keycalc.sessions")


class SessionNotFoundError(AppError):
    status_code = 404
    error_type = "SESSION_NOT_FOUND"


class PressOutcome(NamedTuple):
    calculator: Calculator
    evicted: tuple[str, ...] = ()


class KeypadSessionStore:
    """
    In-memory keypad store keyed by sessionId.

    Every press runs under one lock, so concurrent requests against the same
    session are applied one after another. The least recently used session is
    evicted once ``max_sessions`` is exceeded; ``press`` reports the evicted
    ids so their event channels can be dropped as well.
    """

    def __init__(self, max_sessions: int = 1000) -> None:
        self._lock = threading.RLock()
        self._sessions: OrderedDict[str, Calculator] = OrderedDict()
        self._max_sessions = max_sessions

    def get(self, session_id: str) -> Optional[Calculator]:
        with self._lock:
            return self._sessions.get(session_id)

    def require(self, session_id: str) -> Calculator:
        calculator = self.get(session_id)
        if calculator is None:
            raise SessionNotFoundError(
                f"Keypad session '{session_id}' does not exist.",
                details={"sessionId": session_id},
            )
        return calculator

    def press(self, session_id: str, key: str) -> PressOutcome:
        with self._lock:
            current = self._sessions.get(session_id) or Calculator()
            pressed = current.press(key)
            return PressOutcome(pressed, self._save(session_id, pressed))

    def clear(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _save(self, session_id: str, calculator: Calculator) -> tuple[str, ...]:
        self._sessions[session_id] = calculator
        self._sessions.move_to_end(session_id)
        evicted: list[str] = []
        while len(self._sessions) > self._max_sessions:
            oldest, _ = self._sessions.popitem(last=False)
            logger.info("session.evicted", extra={"session_id": oldest})
            evicted.append(oldest)
        return tuple(evicted)


session_store = KeypadSessionStore(max_sessions=get_settings().max_sessions)
