"""Models Package - domain entities and HTTP request/response models."""

from assistant_gateway.models.domain import (
    AttemptOutcome,
    ConversationTurn,
    ProviderAttempt,
)
from assistant_gateway.models.requests import AssistantRequest, HistoryMessage
from assistant_gateway.models.responses import (
    AssistantErrorResponse,
    AssistantResponse,
    HealthResponse,
    ReadinessResponse,
)

__all__ = [
    # Domain
    "AttemptOutcome",
    "ConversationTurn",
    "ProviderAttempt",
    # Requests
    "AssistantRequest",
    "HistoryMessage",
    # Responses
    "AssistantErrorResponse",
    "AssistantResponse",
    "HealthResponse",
    "ReadinessResponse",
]
