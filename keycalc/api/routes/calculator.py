from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from keycalc.models.calculator import KeyPressRequest, ReplayRequest, ReplayResponse, ScreenResponse
from keycalc.services.calculator import Calculator
from keycalc.services.events import KeypadEventBroker, event_broker, keypress_event
from keycalc.services.sessions import KeypadSessionStore, session_store

router = APIRouter(prefix="/calc", tags=["calculator"])


def get_session_store() -> KeypadSessionStore:
    return session_store


def get_event_broker() -> KeypadEventBroker:
    return event_broker


def _screen_response(session_id: str, calculator: Calculator) -> ScreenResponse:
    return ScreenResponse(sessionId=session_id, screen=calculator.screen(), errored=calculator.errored)


@router.post("/sessions/{session_id}/keys", response_model=ScreenResponse)
async def press_key(
    session_id: str,
    request: KeyPressRequest,
    store: KeypadSessionStore = Depends(get_session_store),
    broker: KeypadEventBroker = Depends(get_event_broker),
) -> ScreenResponse:
    calculator, evicted = store.press(session_id, request.key)
    for evicted_id in evicted:
        broker.discard(evicted_id)
    broker.publish(session_id, keypress_event(session_id, request.key, calculator))
    return _screen_response(session_id, calculator)


@router.get("/sessions/{session_id}", response_model=ScreenResponse)
async def read_screen(
    session_id: str,
    store: KeypadSessionStore = Depends(get_session_store),
) -> ScreenResponse:
    return _screen_response(session_id, store.require(session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def reset_session(
    session_id: str,
    store: KeypadSessionStore = Depends(get_session_store),
    broker: KeypadEventBroker = Depends(get_event_broker),
) -> Response:
    store.clear(session_id)
    broker.reset(session_id)
    return Response(status_code=204)


@router.post("/replay", response_model=ReplayResponse)
async def replay_keys(request: ReplayRequest) -> ReplayResponse:
    calculator = Calculator().press_keys(request.keys)
    return ReplayResponse(keys=request.keys, screen=calculator.screen(), errored=calculator.errored)
