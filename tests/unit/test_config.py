from __future__ import annotations

from keycalc.core.config import AppSettings


def clear_env(monkeypatch) -> None:
    for name in ("CORS_ORIGINS", "FRONTEND_ORIGIN", "MAX_SESSIONS", "KEYCALC_HTTP_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch) -> None:
    clear_env(monkeypatch)

    settings = AppSettings(_env_file=None)

    assert settings.enable_sse is True
    assert settings.max_sessions == 1000
    assert settings.keycalc_http_base_url is None


def test_reads_environment(monkeypatch) -> None:
    clear_env(monkeypatch)
    monkeypatch.setenv("MAX_SESSIONS", "5")
    monkeypatch.setenv("KEYCALC_HTTP_BASE_URL", "http://keypad.local")

    settings = AppSettings(_env_file=None)

    assert settings.max_sessions == 5
    assert settings.keycalc_http_base_url == "http://keypad.local"


def test_resolved_cors_origins_appends_frontend_origin(monkeypatch) -> None:
    clear_env(monkeypatch)
    frontend_origin = "https://keypad.example.com"
    monkeypatch.setenv("FRONTEND_ORIGIN", frontend_origin)

    settings = AppSettings(_env_file=None)

    origins = settings.resolved_cors_origins
    assert "http://localhost:5173" in origins
    assert frontend_origin in origins


def test_resolved_cors_origins_deduplicates(monkeypatch) -> None:
    clear_env(monkeypatch)
    frontend_origin = "https://keypad.example.com"
    monkeypatch.setenv(
        "CORS_ORIGINS",
        '["http://localhost:5173", "https://keypad.example.com"]',
    )
    monkeypatch.setenv("FRONTEND_ORIGIN", f"{frontend_origin}/")

    settings = AppSettings(_env_file=None)

    origins = settings.resolved_cors_origins
    assert origins.count(frontend_origin) == 1
