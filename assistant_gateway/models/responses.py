"""
Response Models - assistant reply and error envelopes.

Field names follow the kiosk UI's camelCase contract (retryAfter).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AssistantResponse(BaseModel):
    """Successful assistant reply."""

    response: str


class AssistantErrorResponse(BaseModel):
    """
    Error envelope returned for failed assistant requests.

    Attributes:
        error: Human-readable message.
        code: ErrorKind tag (omitted for validation errors).
        retry_after: Seconds to wait, only for rate-limit errors.
    """

    model_config = ConfigDict(populate_by_name=True)

    error: str
    code: Optional[str] = None
    retry_after: Optional[int] = Field(default=None, alias="retryAfter")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    checks: dict[str, bool]
