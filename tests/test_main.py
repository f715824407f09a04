"""애플리케이션 진입점 최소 동작 테스트."""

from __future__ import annotations

import importlib
import logging
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_places_service
from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging


def _set_required_env(monkeypatch, **overrides: str) -> None:
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "test-maps-key")
    monkeypatch.setenv("DOCS_MODE", "disabled")
    for key, value in overrides.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()


def _load_main_module():
    import app.main as main_module

    return importlib.reload(main_module)


def test_health_check_endpoint(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Places relay server is running"}


def test_lifespan_startup_completes(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    with TestClient(main_module.app) as client:
        assert client.get("/").status_code == 200


def test_missing_api_key_terminates_startup(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY")
    get_settings.cache_clear()

    with pytest.raises(SystemExit) as exc_info:
        main_module.load_settings()

    assert exc_info.value.code == 1
    get_settings.cache_clear()


def test_blank_api_key_terminates_startup(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "   ")
    get_settings.cache_clear()

    with pytest.raises(SystemExit):
        main_module.create_app()

    get_settings.cache_clear()


def test_docs_disabled_by_default(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)

    assert client.get("/docs").status_code == 404
    assert client.get("/redoc").status_code == 404
    assert client.get("/openapi.json").status_code == 404


def test_docs_public_mode_exposes_places_routes(monkeypatch) -> None:
    _set_required_env(monkeypatch, DOCS_MODE="public")
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    schema = client.get("/openapi.json").json()

    assert "/api/places/nearby" in schema["paths"]
    assert "/api/places/details/{place_id}" in schema["paths"]
    assert "/api/places/photo/{photo_reference}" in schema["paths"]
    assert "/api/places/search" in schema["paths"]


def test_security_headers_are_attached(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["referrer-policy"] == "no-referrer"


def test_cors_allows_configured_frontend_with_credentials(monkeypatch) -> None:
    _set_required_env(monkeypatch, FRONTEND_URL="https://app.example.com")
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/", headers={"Origin": "https://app.example.com"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://app.example.com"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_cors_rejects_other_origins(monkeypatch) -> None:
    _set_required_env(monkeypatch, FRONTEND_URL="https://app.example.com")
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/", headers={"Origin": "https://evil.example.com"})

    assert "access-control-allow-origin" not in response.headers


def test_cors_defaults_to_local_frontend(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    monkeypatch.delenv("FRONTEND_URL", raising=False)
    get_settings.cache_clear()
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/", headers={"Origin": "http://localhost:3000"})

    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_injected_settings_reach_places_service(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    app = main_module.create_app(settings=Settings(GOOGLE_MAPS_API_KEY="injected-key", RATE_LIMIT_ENABLED=False))
    response = TestClient(app).get("/api/places/photo/abc")

    assert response.status_code == 200
    query = parse_qs(urlparse(response.json()["url"]).query)
    assert query["key"] == ["injected-key"]


def test_create_app_applies_configured_log_level(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    try:
        main_module.create_app(settings=Settings(GOOGLE_MAPS_API_KEY="k", LOG_LEVEL="debug"))

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("app").level == logging.DEBUG
    finally:
        configure_logging("INFO")


def test_unexpected_errors_keep_cors_and_security_headers(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()
    app = main_module.create_app(
        settings=Settings(
            GOOGLE_MAPS_API_KEY="k",
            FRONTEND_URL="https://app.example.com",
            RATE_LIMIT_ENABLED=False,
        )
    )

    def _broken_service():
        raise RuntimeError("service unavailable")

    app.dependency_overrides[get_places_service] = _broken_service
    response = TestClient(app).get("/api/places/photo/abc", headers={"Origin": "https://app.example.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert response.headers["access-control-allow-origin"] == "https://app.example.com"
    assert response.headers["x-content-type-options"] == "nosniff"
