"""
Screen updates for keypad sessions, buffered until a listener reads them.

A channel lives exactly as long as its keypad session: the first key press
opens it, and deleting or evicting the session discards it. A channel that
has a listener attached survives a delete so the listener sees the reset.
"""

from __future__ import annotations

import asyncio
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict

from keycalc.core.config import get_settings
from keycalc.services.calculator import Calculator

KeypadEvent = dict[str, Any]


def keypress_event(session_id: str, key: str, calculator: Calculator) -> KeypadEvent:
    return {
        "type": "keypress",
        "sessionId": session_id,
        "key": key,
        "screen": calculator.screen(),
        "errored": calculator.errored,
    }


def reset_event(session_id: str) -> KeypadEvent:
    return {"type": "reset", "sessionId": session_id, "screen": ""}


@dataclass
class KeypadChannel:
    session_id: str
    events: Deque[KeypadEvent]
    wakeup: asyncio.Event | None = field(default=None, repr=False)
    loop: asyncio.AbstractEventLoop | None = field(default=None, repr=False)

    @property
    def listening(self) -> bool:
        return self.wakeup is not None and self.loop is not None

    def notify(self) -> None:
        if self.listening and self.loop.is_running():
            self.loop.call_soon_threadsafe(self.wakeup.set)


class KeypadEventBroker:
    def __init__(self, max_backlog: int = 200) -> None:
        self._lock = threading.RLock()
        self._channels: Dict[str, KeypadChannel] = {}
        self._max_backlog = max_backlog

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._channels

    def subscribe(self, session_id: str) -> KeypadChannel:
        """Attach the running event loop as the listener for ``session_id``."""
        loop = asyncio.get_running_loop()
        with self._lock:
            channel = self._open(session_id)
            channel.wakeup = asyncio.Event()
            channel.loop = loop
            return channel

    def unsubscribe(self, channel: KeypadChannel) -> None:
        with self._lock:
            channel.wakeup = None
            channel.loop = None
            # Nothing left to replay, and a key press reopens the channel.
            if not channel.events and self._channels.get(channel.session_id) is channel:
                del self._channels[channel.session_id]

    def backlog(self, session_id: str) -> list[KeypadEvent]:
        with self._lock:
            channel = self._channels.get(session_id)
            return list(channel.events) if channel else []

    def publish(self, session_id: str, event: KeypadEvent) -> None:
        with self._lock:
            channel = self._open(session_id)
            channel.events.append(event)
            channel.notify()

    def reset(self, session_id: str) -> None:
        """
        Forget everything queued for a deleted session.

        A listening channel is kept and receives a single reset event; an idle
        one is dropped.
        """
        with self._lock:
            channel = self._channels.get(session_id)
            if channel is None or not channel.listening:
                self._channels.pop(session_id, None)
                return
            channel.events.clear()
            channel.events.append(reset_event(session_id))
            channel.notify()

    def discard(self, session_id: str) -> None:
        """Drop the channel of an evicted session, telling any listener it is gone."""
        with self._lock:
            channel = self._channels.pop(session_id, None)
            if channel is None or not channel.listening:
                return
            channel.events.clear()
            channel.events.append(reset_event(session_id))
            channel.notify()

    async def next_event(self, channel: KeypadChannel, *, timeout: float | None = None) -> KeypadEvent:
        while True:
            with self._lock:
                if channel.events:
                    return channel.events.popleft()
                wakeup = channel.wakeup
                if wakeup is None:
                    raise asyncio.TimeoutError("Channel has no listener.")
                wakeup.clear()

            if timeout is None:
                await wakeup.wait()
            else:
                await asyncio.wait_for(wakeup.wait(), timeout=timeout)

    def _open(self, session_id: str) -> KeypadChannel:
        channel = self._channels.get(session_id)
        if channel is None:
            channel = KeypadChannel(session_id=session_id, events=deque(maxlen=self._max_backlog))
            self._channels[session_id] = channel
        return channel


event_broker = KeypadEventBroker(max_backlog=get_settings().event_backlog)
