import logging

from keycalc.core.context import get_request_id, request_scope
from keycalc.core.logging import RequestContextFilter, _build_logging_config


def _record() -> logging.LogRecord:
    return logging.LogRecord("keycalc.test", logging.INFO, __file__, 1, "message", None, None)


def test_filter_stamps_placeholder_outside_request() -> None:
    record = _record()

    assert RequestContextFilter().filter(record) is True
    assert record.request_id == "-"


def test_filter_stamps_current_request_id() -> None:
    record = _record()

    with request_scope("req-123"):
        RequestContextFilter().filter(record)

    assert record.request_id == "req-123"
    assert get_request_id() is None


def test_request_scope_generates_id() -> None:
    with request_scope() as request_id:
        assert request_id
        assert get_request_id() == request_id


def test_logging_config_uses_requested_level() -> None:
    config = _build_logging_config("debug")

    assert config["loggers"]["keycalc"]["level"] == "DEBUG"
    assert config["handlers"]["default"]["filters"] == ["request_context"]
