"""
Assistant Metrics

Prometheus counters for the provider fallback chain.

Metrics Provided:
- Provider attempts by provider, model and outcome (counter)
- Assistant responses by final status (counter)

Anti-Pattern Compliance:
- Metric names as constants
"""

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, generate_latest

METRIC_PROVIDER_ATTEMPTS = "assistant_gateway_provider_attempts_total"
METRIC_RESPONSES = "assistant_gateway_responses_total"


PROVIDER_ATTEMPTS = Counter(
    name=METRIC_PROVIDER_ATTEMPTS,
    documentation="Total number of assistant provider/model attempts",
    labelnames=["provider", "model", "outcome"],
)

RESPONSES = Counter(
    name=METRIC_RESPONSES,
    documentation="Total number of assistant responses by final status",
    labelnames=["status"],
)


def record_provider_attempt(provider: str, model: str | None, outcome: str) -> None:
    """
    Record one provider attempt.

    Args:
        provider: Provider name (deepseek, gemini)
        model: Model identifier ("" when not applicable)
        outcome: success, skip or fatal
    """
    PROVIDER_ATTEMPTS.labels(
        provider=provider,
        model=model or "",
        outcome=outcome,
    ).inc()


def record_response(status: str) -> None:
    """
    Record the final status of an assistant request.

    Args:
        status: "success" or an ErrorKind tag
    """
    RESPONSES.labels(status=status).inc()


def generate_metrics() -> str:
    """Render the default registry in Prometheus text format."""
    return generate_latest(REGISTRY).decode("utf-8")
