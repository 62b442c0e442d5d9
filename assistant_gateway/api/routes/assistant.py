"""
Assistant Router - POST /api/assistant

The HTTP collaborator of the AssistantGateway. It validates the JSON
body, truncates the conversation history to the configured window,
invokes the gateway, and translates each ErrorKind into a status code and
machine-readable tag for the kiosk UI.

Anti-Patterns Avoided:
- No bare except clauses
- Error translation happens here only; the service raises typed errors
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from assistant_gateway.api.deps import get_assistant_gateway, get_settings
from assistant_gateway.core.config import Settings
from assistant_gateway.core.exceptions import (
    AssistantGatewayError,
    ErrorKind,
    GatewayValidationError,
    RateLimitedError,
)
from assistant_gateway.models.requests import AssistantRequest
from assistant_gateway.models.responses import (
    AssistantErrorResponse,
    AssistantResponse,
)
from assistant_gateway.observability.logging import get_correlation_id
from assistant_gateway.providers.classification import DEFAULT_RETRY_AFTER_SECONDS
from assistant_gateway.services.assistant import AssistantGateway

logger = logging.getLogger(__name__)

MESSAGE_REQUIRED = "Message is required and must be a string"
GENERIC_FAILURE = "Failed to get response from assistant"

ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_CONFIGURED: 500,
    ErrorKind.INVALID_CREDENTIAL: 500,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.ALL_PROVIDERS_EXHAUSTED: 500,
    ErrorKind.TRANSPORT: 500,
}

router = APIRouter(prefix="/api", tags=["Assistant"])


def _error(status_code: int, body: AssistantErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def _validation_message(error: ValidationError) -> str:
    """Pick the client-facing message for a body validation failure."""
    for detail in error.errors():
        if detail.get("loc", ())[:1] == ("message",):
            return MESSAGE_REQUIRED
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"Invalid {location}: {first.get('msg', 'invalid value')}"


def error_response(error: AssistantGatewayError) -> JSONResponse:
    """
    Translate a gateway error into its JSON response.

    Args:
        error: Typed gateway error.

    Returns:
        JSONResponse with {error, code, retryAfter?}.
    """
    if isinstance(error, GatewayValidationError) or error.kind is None:
        return _error(400, AssistantErrorResponse(error=error.message))

    retry_after = None
    if isinstance(error, RateLimitedError):
        retry_after = error.retry_after or DEFAULT_RETRY_AFTER_SECONDS

    return _error(
        ERROR_STATUS_CODES.get(error.kind, 500),
        AssistantErrorResponse(
            error=error.message,
            code=error.error_code,
            retry_after=retry_after,
        ),
    )


@router.post("/assistant", response_model=None)
async def ask_assistant(
    request: Request,
    gateway: AssistantGateway = Depends(get_assistant_gateway),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Answer a user message.

    Body: ``{"message": str, "conversationHistory"?: [{"role", "content"}]}``

    Returns:
        200 {"response"} on success; 400 for invalid bodies; 429 or 500
        {"error", "code", "retryAfter"?} for gateway failures.
    """
    try:
        body: Any = await request.json()
    except ValueError:
        return _error(400, AssistantErrorResponse(error=MESSAGE_REQUIRED))

    if not isinstance(body, dict):
        return _error(400, AssistantErrorResponse(error=MESSAGE_REQUIRED))

    try:
        payload = AssistantRequest.model_validate(body)
    except ValidationError as e:
        return _error(400, AssistantErrorResponse(error=_validation_message(e)))

    history = payload.history_turns(settings.history_window)
    logger.debug(
        f"Assistant request: history_turns={len(history)} "
        f"(received {len(payload.conversation_history)})"
    )

    try:
        reply = await gateway.respond(payload.message, history)
    except AssistantGatewayError as e:
        logger.error(
            f"Assistant request failed: code={e.error_code}, message={e.message}, "
            f"request_id={get_correlation_id()}"
        )
        return error_response(e)
    except Exception as e:
        logger.exception(
            f"Unexpected assistant failure: {type(e).__name__}: {e}, "
            f"request_id={get_correlation_id()}"
        )
        return _error(500, AssistantErrorResponse(error=GENERIC_FAILURE))

    return JSONResponse(content=AssistantResponse(response=reply).model_dump())
