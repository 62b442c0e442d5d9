"""
Tests for assistant Prometheus metrics.
"""

import pytest
from prometheus_client import REGISTRY

from assistant_gateway.core.exceptions import ProviderCallError
from assistant_gateway.observability.metrics import (
    METRIC_PROVIDER_ATTEMPTS,
    METRIC_RESPONSES,
    generate_metrics,
    record_provider_attempt,
    record_response,
)
from assistant_gateway.services.assistant import AssistantGateway


def sample(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_record_provider_attempt_increments() -> None:
    labels = {"provider": "gemini", "model": "metrics-model", "outcome": "skip"}
    before = sample(METRIC_PROVIDER_ATTEMPTS, **labels)

    record_provider_attempt("gemini", "metrics-model", "skip")

    assert sample(METRIC_PROVIDER_ATTEMPTS, **labels) == before + 1


def test_missing_model_recorded_as_empty_label() -> None:
    labels = {"provider": "deepseek", "model": "", "outcome": "fatal"}
    before = sample(METRIC_PROVIDER_ATTEMPTS, **labels)

    record_provider_attempt("deepseek", None, "fatal")

    assert sample(METRIC_PROVIDER_ATTEMPTS, **labels) == before + 1


def test_record_response_increments() -> None:
    before = sample(METRIC_RESPONSES, status="TRANSPORT_ERROR")
    record_response("TRANSPORT_ERROR")
    assert sample(METRIC_RESPONSES, status="TRANSPORT_ERROR") == before + 1


def test_generate_metrics_exposes_counters() -> None:
    record_response("success")
    text = generate_metrics()
    assert METRIC_RESPONSES in text
    assert METRIC_PROVIDER_ATTEMPTS in text


@pytest.mark.asyncio
async def test_gateway_records_attempts_and_response(secondary_only, scripted_provider) -> None:
    secondary = scripted_provider(
        "gemini",
        {
            "m1": ProviderCallError("m1 not found", provider="gemini", model="m1"),
            "m2": "ok",
        },
    )
    gateway = AssistantGateway(secondary_only, secondary=secondary)
    skip = {"provider": "gemini", "model": "m1", "outcome": "skip"}
    success = {"provider": "gemini", "model": "m2", "outcome": "success"}
    skip_before = sample(METRIC_PROVIDER_ATTEMPTS, **skip)
    success_before = sample(METRIC_PROVIDER_ATTEMPTS, **success)
    responses_before = sample(METRIC_RESPONSES, status="success")

    await gateway.respond("Hi")

    assert sample(METRIC_PROVIDER_ATTEMPTS, **skip) == skip_before + 1
    assert sample(METRIC_PROVIDER_ATTEMPTS, **success) == success_before + 1
    assert sample(METRIC_RESPONSES, status="success") == responses_before + 1


def test_exposition_content_type_comes_from_prometheus_client() -> None:
    import prometheus_client

    from assistant_gateway.observability import metrics

    assert metrics.CONTENT_TYPE_LATEST is prometheus_client.CONTENT_TYPE_LATEST
