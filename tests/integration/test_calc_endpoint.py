from fastapi.testclient import TestClient

from keycalc.api.routes.calculator import get_event_broker, get_session_store
from keycalc.main import create_app
from keycalc.models.calculator import MAX_KEY_LENGTH
from keycalc.services.calculator import Calculator
from keycalc.services.events import KeypadEventBroker
from keycalc.services.sessions import KeypadSessionStore, session_store


def create_test_client() -> TestClient:
    app = create_app()
    return TestClient(app)


def press(client: TestClient, session_id: str, keys: str):
    response = None
    for key in keys:
        response = client.post(f"/calc/sessions/{session_id}/keys", json={"key": key})
        assert response.status_code == 200
    return response


def test_press_keys_returns_screen() -> None:
    client = create_test_client()
    session_id = "calc-endpoint-sum"
    session_store.clear(session_id)

    response = press(client, session_id, "3+2=")

    assert response.json() == {"sessionId": session_id, "screen": "5", "errored": False}
    assert response.headers["X-Request-ID"]


def test_screen_shows_expression_in_progress() -> None:
    client = create_test_client()
    session_id = "calc-endpoint-progress"
    session_store.clear(session_id)
    press(client, session_id, "2+")

    response = client.get(f"/calc/sessions/{session_id}")

    assert response.status_code == 200
    assert response.json()["screen"] == "2+"


def test_invalid_key_shows_error_then_recovers() -> None:
    client = create_test_client()
    session_id = "calc-endpoint-error"
    session_store.clear(session_id)

    errored = press(client, session_id, "2++")
    recovered = press(client, session_id, "4")

    assert errored.json() == {"sessionId": session_id, "screen": "ERROR", "errored": True}
    assert recovered.json()["screen"] == "4"


def test_multi_character_key_shows_error_like_local_keypad() -> None:
    client = create_test_client()
    session_id = "calc-endpoint-multi"
    session_store.clear(session_id)
    press(client, session_id, "3")

    response = client.post(f"/calc/sessions/{session_id}/keys", json={"key": "12"})

    assert response.status_code == 200
    assert response.json() == {"sessionId": session_id, "screen": "ERROR", "errored": True}
    assert Calculator().press("3").press("12").screen() == "ERROR"


def test_oversized_key_is_rejected_by_validation() -> None:
    client = create_test_client()

    response = client.post("/calc/sessions/calc-endpoint-invalid/keys", json={"key": "1" * (MAX_KEY_LENGTH + 1)})

    assert response.status_code == 422
    assert session_store.get("calc-endpoint-invalid") is None


def test_unknown_session_returns_not_found() -> None:
    client = create_test_client()

    response = client.get("/calc/sessions/never-used")

    assert response.status_code == 404
    payload = response.json()
    assert payload["error"]["type"] == "SESSION_NOT_FOUND"
    assert payload["error"]["details"] == {"sessionId": "never-used"}
    assert payload["error"]["traceId"] == response.headers["X-Request-ID"]


def test_replay_presses_keys_on_fresh_keypad() -> None:
    client = create_test_client()

    response = client.post("/calc/replay", json={"keys": "5+30="})

    assert response.status_code == 200
    assert response.json() == {"keys": "5+30=", "screen": "35", "errored": False}


def test_replay_reports_error() -> None:
    client = create_test_client()

    response = client.post("/calc/replay", json={"keys": "a"})

    assert response.json()["errored"] is True
    assert response.json()["screen"] == "ERROR"


def test_replay_limits_key_count() -> None:
    client = create_test_client()

    response = client.post("/calc/replay", json={"keys": "1" * 201})

    assert response.status_code == 422


def test_event_channels_stay_bounded_by_session_limit() -> None:
    app = create_app()
    store = KeypadSessionStore(max_sessions=2)
    broker = KeypadEventBroker()
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_event_broker] = lambda: broker
    client = TestClient(app)

    for index in range(50):
        client.post(f"/calc/sessions/bounded-{index}/keys", json={"key": "1"})
    for index in range(50):
        assert client.delete(f"/calc/sessions/unknown-{index}").status_code == 204

    assert len(store) == 2
    assert len(broker) <= 2
    assert "bounded-49" in broker
    assert "bounded-0" not in broker


def test_delete_drops_idle_event_channel() -> None:
    app = create_app()
    store = KeypadSessionStore()
    broker = KeypadEventBroker()
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_event_broker] = lambda: broker
    client = TestClient(app)
    client.post("/calc/sessions/idle/keys", json={"key": "4"})

    client.delete("/calc/sessions/idle")

    assert len(broker) == 0
    assert store.get("idle") is None
