from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from keycalc.core.config import get_settings
from keycalc.core.exceptions import AppError
from keycalc.models.calculator import ScreenResponse


class RemoteCalculatorError(AppError):
    status_code = 502
    error_type = "REMOTE_CALCULATOR_ERROR"


@dataclass
class RemoteCalculator:
    """
    Keypad session hosted by a keycalc server.

    Mirrors the local calculator contract: ``press`` sends one key and
    returns this client, ``screen`` returns the display from the most recent
    server response without touching the network.

    Keys are classified by the server, so a key that is not a single known
    character shows ERROR exactly as it does locally. Keys longer than the
    server accepts (``MAX_KEY_LENGTH``) raise RemoteCalculatorError instead.
    """

    base_url: str
    session_id: str
    timeout: float = 5.0
    _screen: str = field(default="", repr=False)

    @classmethod
    def from_settings(cls, session_id: str) -> "RemoteCalculator":
        settings = get_settings()
        if not settings.keycalc_http_base_url:
            raise RemoteCalculatorError("KEYCALC_HTTP_BASE_URL is not configured.")
        return cls(
            base_url=settings.keycalc_http_base_url.rstrip("/"),
            session_id=session_id,
            timeout=float(settings.keycalc_http_timeout_sec),
        )

    @property
    def session_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/calc/sessions/{self.session_id}"

    def press(self, key: str) -> "RemoteCalculator":
        payload = self._request("POST", f"{self.session_url}/keys", json={"key": key})
        self._screen = self._read_screen(payload)
        return self

    def press_keys(self, keys: str) -> "RemoteCalculator":
        for key in keys:
            self.press(key)
        return self

    def screen(self) -> str:
        return self._screen

    def refresh(self) -> str:
        payload = self._request("GET", self.session_url)
        self._screen = self._read_screen(payload)
        return self._screen

    def reset(self) -> None:
        self._request("DELETE", self.session_url)
        self._screen = ""

    def _read_screen(self, payload: dict[str, Any] | None) -> str:
        try:
            return ScreenResponse.model_validate(payload).screen
        except ValidationError as exc:
            raise RemoteCalculatorError("Calculator response did not contain a screen.") from exc

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any] | None:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            raise RemoteCalculatorError("Calculator service is unavailable.") from exc

        if response.status_code == 204:
            return None

        if response.status_code != 200:
            message = "Calculator request failed."
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                error = payload.get("error")
                if isinstance(error, dict):
                    message = error.get("message", message)
            raise RemoteCalculatorError(message, details={"statusCode": response.status_code})

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteCalculatorError("Calculator response was not valid JSON.") from exc
