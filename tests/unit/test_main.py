"""
Tests for application assembly and lifespan.
"""

from fastapi.testclient import TestClient

from assistant_gateway.api import deps
from assistant_gateway.core.config import get_settings
from assistant_gateway.main import create_app
from assistant_gateway.observability.logging import reset_logging
from assistant_gateway.services.assistant import AssistantGateway


class TestLifespan:
    def test_lifespan_installs_and_clears_gateway(self, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "gm-key")
        get_settings.cache_clear()
        app = create_app()

        try:
            with TestClient(app) as client:
                gateway = deps.get_assistant_gateway()
                assert isinstance(gateway, AssistantGateway)
                assert gateway.providers.secondary_enabled is True
                assert app.state.initialized is True

                response = client.get("/health/ready")
                assert response.status_code == 200
                assert response.json()["checks"] == {"deepseek": False, "gemini": True}
        finally:
            reset_logging()

        assert app.state.initialized is False
        assert deps._assistant_gateway is None

    def test_unconfigured_service_starts_but_reports_missing_key(self) -> None:
        app = create_app()

        try:
            with TestClient(app) as client:
                ready = client.get("/health/ready")
                reply = client.post("/api/assistant", json={"message": "Hi"})
        finally:
            reset_logging()

        assert ready.status_code == 503
        assert reply.status_code == 500
        assert reply.json()["code"] == "MISSING_API_KEY"


class TestCreateApp:
    def test_routes_registered(self) -> None:
        paths = {route.path for route in create_app().routes}

        assert {"/", "/health", "/health/ready", "/metrics", "/api/assistant"} <= paths

    def test_docs_disabled_in_production(self, monkeypatch) -> None:
        monkeypatch.setenv("ASSISTANT_GATEWAY_ENVIRONMENT", "production")
        get_settings.cache_clear()

        client = TestClient(create_app())

        assert client.get("/docs").status_code == 404
        assert client.get("/").json()["docs"] == "disabled"
