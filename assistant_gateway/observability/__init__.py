"""
Observability Package

This package provides observability infrastructure:
- Structured JSON logging
- Prometheus metrics for the provider fallback chain
"""

from assistant_gateway.observability.logging import (
    configure_logging,
    get_correlation_id,
    get_logger,
    request_context,
)
from assistant_gateway.observability.metrics import (
    generate_metrics,
    record_provider_attempt,
    record_response,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "request_context",
    # Metrics
    "generate_metrics",
    "record_provider_attempt",
    "record_response",
]
