"""
Pytest configuration for the Assistant Gateway test suite.

This configuration sets up:
- Test markers for categorization
- Isolation from the developer's provider credentials
- ScriptedProvider, a duck-typed fake following the FakeRepository pattern
- Settings, gateway and API client fixtures
"""

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Union

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Add project root to Python path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from assistant_gateway.core.config import ProviderSettings, Settings  # noqa: E402
from assistant_gateway.models.domain import ConversationTurn  # noqa: E402
from assistant_gateway.providers.base import AssistantProvider  # noqa: E402

PROVIDER_ENV_VARS = (
    "DEEPSEEK_API_KEY",
    "GEMINI_API_KEY",
    "ASSISTANT_GATEWAY_DEEPSEEK_API_KEY",
    "ASSISTANT_GATEWAY_GEMINI_API_KEY",
    "ASSISTANT_GATEWAY_GEMINI_MODELS",
    "ASSISTANT_GATEWAY_ENVIRONMENT",
    "ASSISTANT_GATEWAY_HISTORY_WINDOW",
)


# =============================================================================
# Test Markers
# =============================================================================


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for service interactions")


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """
    Remove provider credentials from the environment and reset the
    settings and gateway singletons around every test.
    """
    from assistant_gateway.api.deps import set_assistant_gateway
    from assistant_gateway.core.config import get_settings

    for var in PROVIDER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    set_assistant_gateway(None)
    yield
    get_settings.cache_clear()
    set_assistant_gateway(None)
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Fake Provider
# =============================================================================

ScriptStep = Union[str, Exception]


class ScriptedProvider(AssistantProvider):
    """
    Fake provider that replays a script of replies/errors.

    ``script`` maps a model name (or None for the default model) to either
    a reply string or an exception to raise. Every call is recorded in
    ``calls`` as (message, history, model).
    """

    def __init__(self, name: str, script: dict[Optional[str], ScriptStep]) -> None:
        self.name = name
        self._script = script
        self.calls: list[tuple[str, tuple[ConversationTurn, ...], Optional[str]]] = []
        self.closed = False

    async def generate(
        self,
        message: str,
        history: Sequence[ConversationTurn],
        *,
        model: Optional[str] = None,
    ) -> str:
        self.calls.append((message, tuple(history), model))
        step = self._script.get(model, "")
        if isinstance(step, Exception):
            raise step
        return step

    async def aclose(self) -> None:
        self.closed = True

    @property
    def called_models(self) -> list[Optional[str]]:
        return [call[2] for call in self.calls]


@pytest.fixture
def scripted_provider():
    """Factory fixture for ScriptedProvider instances."""
    return ScriptedProvider


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings with both providers configured and fake keys."""
    return Settings(
        service_name="assistant-gateway-test",
        environment="development",
        deepseek_api_key="test-deepseek-key",
        gemini_api_key="test-gemini-key",
        gemini_models=["m1", "m2", "m3"],
        history_window=10,
    )


@pytest.fixture
def both_providers() -> ProviderSettings:
    return ProviderSettings(
        deepseek_api_key="test-deepseek-key",
        gemini_api_key="test-gemini-key",
        gemini_models=("m1", "m2", "m3"),
    )


@pytest.fixture
def secondary_only() -> ProviderSettings:
    return ProviderSettings(
        deepseek_api_key=None,
        gemini_api_key="test-gemini-key",
        gemini_models=("m1", "m2", "m3"),
    )


@pytest.fixture
def primary_only() -> ProviderSettings:
    return ProviderSettings(
        deepseek_api_key="test-deepseek-key",
        gemini_api_key=None,
        gemini_models=("m1", "m2", "m3"),
    )


@pytest.fixture
def no_providers() -> ProviderSettings:
    return ProviderSettings(deepseek_api_key=None, gemini_api_key=None)


# =============================================================================
# Sample Conversation Fixtures
# =============================================================================


@pytest.fixture
def sample_history() -> list[ConversationTurn]:
    return [
        ConversationTurn(role="user", content="Hello"),
        ConversationTurn(role="assistant", content="Hi! How can I help?"),
    ]


# =============================================================================
# Test Client Fixtures
# =============================================================================


@pytest.fixture
def app() -> FastAPI:
    """The full application built fresh for each test."""
    from assistant_gateway.main import create_app

    return create_app()


@pytest.fixture
def make_client(app: FastAPI, test_settings: Settings):
    """
    Build a TestClient whose gateway dependency is replaced.

    Usage: ``client = make_client(gateway)``
    """
    from assistant_gateway.api.deps import get_assistant_gateway, get_settings

    def _make(gateway, settings: Optional[Settings] = None) -> TestClient:
        app.dependency_overrides[get_assistant_gateway] = lambda: gateway
        app.dependency_overrides[get_settings] = lambda: settings or test_settings
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
