"""
Tests for POST /api/assistant.

The gateway dependency is replaced with a real AssistantGateway wired to
ScriptedProvider fakes, or a MagicMock when only the error translation
is under test.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from assistant_gateway.core.config import ProviderSettings
from assistant_gateway.core.exceptions import (
    AllProvidersExhaustedError,
    InvalidCredentialError,
    NotConfiguredError,
    ProviderCallError,
    RateLimitedError,
    TransportError,
)
from assistant_gateway.services.assistant import APOLOGY_TEXT, AssistantGateway

MESSAGE_REQUIRED = "Message is required and must be a string"


def failing_gateway(error: Exception) -> MagicMock:
    gateway = MagicMock(spec=AssistantGateway)
    gateway.respond = AsyncMock(side_effect=error)
    return gateway


@pytest.fixture
def secondary_gateway(secondary_only, scripted_provider):
    secondary = scripted_provider("gemini", {"m1": "Here are today's events."})
    return AssistantGateway(secondary_only, secondary=secondary), secondary


class TestAssistantSuccess:
    def test_returns_reply(self, make_client, secondary_gateway) -> None:
        gateway, _ = secondary_gateway
        client = make_client(gateway)

        response = client.post("/api/assistant", json={"message": "What's on?"})

        assert response.status_code == 200
        assert response.json() == {"response": "Here are today's events."}

    def test_history_forwarded_in_order(self, make_client, secondary_gateway) -> None:
        gateway, secondary = secondary_gateway
        client = make_client(gateway)

        client.post(
            "/api/assistant",
            json={
                "message": "And tomorrow?",
                "conversationHistory": [
                    {"role": "user", "content": "What's on?"},
                    {"role": "assistant", "content": "A concert."},
                ],
            },
        )

        message, history, model = secondary.calls[0]
        assert message == "And tomorrow?"
        assert [(t.role, t.content) for t in history] == [
            ("user", "What's on?"),
            ("assistant", "A concert."),
        ]
        assert model == "m1"

    def test_history_truncated_to_window(
        self, make_client, secondary_gateway, test_settings
    ) -> None:
        gateway, secondary = secondary_gateway
        settings = test_settings.model_copy(update={"history_window": 3})
        client = make_client(gateway, settings=settings)
        history = [{"role": "user", "content": f"turn {i}"} for i in range(8)]

        client.post("/api/assistant", json={"message": "Hi", "conversationHistory": history})

        forwarded = secondary.calls[0][1]
        assert [t.content for t in forwarded] == ["turn 5", "turn 6", "turn 7"]

    def test_empty_reply_is_apology(self, make_client, secondary_only, scripted_provider) -> None:
        gateway = AssistantGateway(
            secondary_only, secondary=scripted_provider("gemini", {"m1": ""})
        )
        client = make_client(gateway)

        response = client.post("/api/assistant", json={"message": "Hi"})

        assert response.status_code == 200
        assert response.json() == {"response": APOLOGY_TEXT}


class TestAssistantValidation:
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"message": ""},
            {"message": 123},
            {"message": None},
            ["Hi"],
        ],
    )
    def test_invalid_message_is_400(self, make_client, secondary_gateway, body) -> None:
        gateway, secondary = secondary_gateway
        client = make_client(gateway)

        response = client.post("/api/assistant", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": MESSAGE_REQUIRED}
        assert secondary.calls == []

    def test_whitespace_message_is_accepted(self, make_client, secondary_gateway) -> None:
        gateway, secondary = secondary_gateway
        client = make_client(gateway)

        response = client.post("/api/assistant", json={"message": "   "})

        assert response.status_code == 200
        assert response.json() == {"response": "Here are today's events."}
        assert secondary.calls[0][0] == "   "

    def test_malformed_json_is_400(self, make_client, secondary_gateway) -> None:
        gateway, _ = secondary_gateway
        client = make_client(gateway)

        response = client.post(
            "/api/assistant",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": MESSAGE_REQUIRED}

    def test_malformed_history_is_400(self, make_client, secondary_gateway) -> None:
        gateway, _ = secondary_gateway
        client = make_client(gateway)

        response = client.post(
            "/api/assistant",
            json={"message": "Hi", "conversationHistory": [{"role": "user"}]},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid conversationHistory")


class TestAssistantErrors:
    def test_not_configured(self, make_client) -> None:
        gateway = AssistantGateway(ProviderSettings(deepseek_api_key=None, gemini_api_key=None))
        client = make_client(gateway)

        response = client.post("/api/assistant", json={"message": "Hi"})

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "MISSING_API_KEY"
        assert "retryAfter" not in body

    def test_rate_limited_includes_retry_after(
        self, make_client, secondary_only, scripted_provider
    ) -> None:
        secondary = scripted_provider(
            "gemini",
            {
                "m1": ProviderCallError(
                    "[429] quota exceeded",
                    provider="gemini",
                    model="m1",
                    status_code=429,
                    retry_after=25,
                )
            },
        )
        client = make_client(AssistantGateway(secondary_only, secondary=secondary))

        response = client.post("/api/assistant", json={"message": "Hi"})

        assert response.status_code == 429
        assert response.json() == {
            "error": "API quota exceeded. Please wait a moment and try again.",
            "code": "QUOTA_EXCEEDED",
            "retryAfter": 25,
        }

    @pytest.mark.parametrize(
        "error,status_code,code",
        [
            (NotConfiguredError(), 500, "MISSING_API_KEY"),
            (InvalidCredentialError("key rejected", provider="gemini"), 500, "INVALID_API_KEY"),
            (AllProvidersExhaustedError("[500] boom"), 500, "ALL_PROVIDERS_EXHAUSTED"),
            (TransportError("refused"), 500, "TRANSPORT_ERROR"),
        ],
    )
    def test_error_kind_mapping(self, make_client, error, status_code, code) -> None:
        client = make_client(failing_gateway(error))

        response = client.post("/api/assistant", json={"message": "Hi"})

        assert response.status_code == status_code
        assert response.json() == {"error": error.message, "code": code}

    def test_rate_limited_defaults_retry_after(self, make_client) -> None:
        client = make_client(failing_gateway(RateLimitedError("slow down", provider="gemini")))

        response = client.post("/api/assistant", json={"message": "Hi"})

        assert response.status_code == 429
        assert response.json()["retryAfter"] == 60

    def test_unexpected_error_is_generic_500(self, make_client) -> None:
        client = make_client(failing_gateway(RuntimeError("kaboom")))

        response = client.post("/api/assistant", json={"message": "Hi"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get response from assistant"}
