"""
Custom exceptions for the Assistant Gateway.

This module provides the caller-facing error taxonomy of the assistant.
Every failure the gateway surfaces carries an ErrorKind, which the HTTP
layer maps to a status code and a machine-readable tag so the kiosk UI can
render targeted guidance (e.g. prompting for a different API key).

Provider adapters never raise these directly; they raise ProviderCallError,
which the gateway classifies and converts.

Anti-Patterns Avoided:
- No bare except clauses; always capture with 'as e'
- Specific exception types per failure mode
"""

from enum import Enum
from typing import Any


# =============================================================================
# Error Kinds
# =============================================================================


class ErrorKind(str, Enum):
    """
    Caller-facing classification of why the assistant failed to reply.

    The enum value is the tag returned to clients in the ``code`` field.
    NOT_CONFIGURED and RATE_LIMITED keep the tags the kiosk UI already
    understands (MISSING_API_KEY, QUOTA_EXCEEDED).
    """

    NOT_CONFIGURED = "MISSING_API_KEY"
    INVALID_CREDENTIAL = "INVALID_API_KEY"
    RATE_LIMITED = "QUOTA_EXCEEDED"
    ALL_PROVIDERS_EXHAUSTED = "ALL_PROVIDERS_EXHAUSTED"
    TRANSPORT = "TRANSPORT_ERROR"


VALIDATION_ERROR_CODE = "VALIDATION_ERROR"


# =============================================================================
# Base Exception
# =============================================================================


class AssistantGatewayError(Exception):
    """
    Base exception for all Assistant Gateway errors.

    Attributes:
        message: Human-readable error message.
        kind: ErrorKind classification (None for request validation errors).
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            kind: Caller-facing error classification.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.kind = kind

        for key, value in kwargs.items():
            setattr(self, key, value)

    @property
    def error_code(self) -> str:
        """Machine-readable tag for API responses."""
        return self.kind.value if self.kind is not None else VALIDATION_ERROR_CODE


# =============================================================================
# ErrorKind Exceptions
# =============================================================================


class NotConfiguredError(AssistantGatewayError):
    """Raised when no provider credential is configured."""

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            message
            or "Neither DEEPSEEK_API_KEY nor GEMINI_API_KEY is configured. "
            "Please set at least one in the environment.",
            ErrorKind.NOT_CONFIGURED,
            **kwargs,
        )


class InvalidCredentialError(AssistantGatewayError):
    """
    Raised when a provider rejects the configured credential.

    Attributes:
        provider: Name of the provider that rejected the key.
    """

    def __init__(self, message: str, provider: str, **kwargs: Any) -> None:
        super().__init__(message, ErrorKind.INVALID_CREDENTIAL, **kwargs)
        self.provider = provider


class RateLimitedError(AssistantGatewayError):
    """
    Raised when a provider reports quota exhaustion or rate limiting.

    Attributes:
        provider: Name of the provider that rate limited the request.
        retry_after: Seconds the client should wait before retrying.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        retry_after: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, ErrorKind.RATE_LIMITED, **kwargs)
        self.provider = provider
        self.retry_after = retry_after


class AllProvidersExhaustedError(AssistantGatewayError):
    """
    Raised when every configured provider/model failed non-fatally.

    Attributes:
        last_error: Message of the last underlying provider error.
        attempts: The ProviderAttempt records of the request.
    """

    def __init__(
        self,
        last_error: str,
        attempts: list[Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"All assistant providers failed. Last error: {last_error}",
            ErrorKind.ALL_PROVIDERS_EXHAUSTED,
            **kwargs,
        )
        self.last_error = last_error
        self.attempts = attempts or []


class TransportError(AssistantGatewayError):
    """
    Raised when no provider could be reached at the network level.

    Attributes:
        last_error: Message of the last transport failure.
        attempts: The ProviderAttempt records of the request.
    """

    def __init__(
        self,
        last_error: str,
        attempts: list[Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Could not reach any assistant provider: {last_error}",
            ErrorKind.TRANSPORT,
            **kwargs,
        )
        self.last_error = last_error
        self.attempts = attempts or []


class GatewayValidationError(AssistantGatewayError):
    """
    Raised when the inbound request is invalid (maps to HTTP 400).

    Named GatewayValidationError to avoid conflict with
    pydantic.ValidationError.

    Attributes:
        field: Name of the field that failed validation.
    """

    def __init__(self, message: str, field: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, None, **kwargs)
        self.field = field


# =============================================================================
# Provider-level Error
# =============================================================================


class ProviderCallError(Exception):
    """
    A single provider call failed.

    Adapters raise this with whatever structured information the transport
    exposed; the gateway's classifier decides what it means.

    Attributes:
        provider: Provider name (e.g. "deepseek", "gemini").
        model: Model identifier the call targeted, if any.
        message: Provider error text.
        status_code: HTTP status returned by the provider API.
        error_code: Provider-specific error status (e.g. "RESOURCE_EXHAUSTED").
        retry_after: Retry hint in seconds, when the provider sent one.
        transport: True when the request never got an HTTP response.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        model: str | None = None,
        status_code: int | None = None,
        error_code: str | None = None,
        retry_after: int | None = None,
        transport: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.model = model
        self.status_code = status_code
        self.error_code = error_code
        self.retry_after = retry_after
        self.transport = transport

    def __repr__(self) -> str:
        return (
            f"ProviderCallError(provider={self.provider!r}, model={self.model!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )
