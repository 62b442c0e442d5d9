"""
Health Router - health, readiness and metrics endpoints.

Readiness reflects configuration, not provider reachability: the service
is ready when at least one provider credential is present.

Anti-Patterns Avoided:
- No unused parameters
"""

import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from assistant_gateway.api.deps import get_assistant_gateway
from assistant_gateway.models.responses import HealthResponse, ReadinessResponse
from assistant_gateway.observability.metrics import CONTENT_TYPE_LATEST, generate_metrics
from assistant_gateway.services.assistant import AssistantGateway

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        HealthResponse: {"status": "healthy", "version": ...}
    """
    return HealthResponse(status="healthy", version=APP_VERSION)


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(
    response: Response,
    gateway: AssistantGateway = Depends(get_assistant_gateway),
) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Returns 503 with status "not_ready" when no provider is configured.
    """
    providers = gateway.providers
    checks = {
        "deepseek": providers.primary_enabled,
        "gemini": providers.secondary_enabled,
    }

    if not providers.any_enabled:
        logger.warning("Readiness check failed: no assistant provider configured")
        response.status_code = 503

    return ReadinessResponse(
        status="ready" if providers.any_enabled else "not_ready",
        checks=checks,
    )


@router.get("/metrics")
async def metrics() -> PlainTextResponse:
    """Prometheus metrics endpoint."""
    return PlainTextResponse(content=generate_metrics(), media_type=CONTENT_TYPE_LATEST)
