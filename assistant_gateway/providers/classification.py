"""
Provider Error Classification

Decides what a failed provider call means for the fallback chain:
skip to the next model, or stop and surface the error.

Structured signals (HTTP status, provider error status) are consulted
first. Free-text matching over the error message is the last resort; its
rules live in CLASSIFICATION_RULES so they can be versioned and unit
tested independently of the control flow.

Anti-Pattern Compliance:
- Constants for status codes and default retry window
- Rule table as data, not inline conditionals
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from assistant_gateway.core.exceptions import ProviderCallError

CLASSIFICATION_RULES_VERSION = "2"

DEFAULT_RETRY_AFTER_SECONDS = 60

_RETRY_HINT = re.compile(r"retry in ([\d.]+)\s*s", re.IGNORECASE)


class ErrorClass(str, Enum):
    """What a provider failure means for the fallback loop."""

    MODEL_UNAVAILABLE = "model_unavailable"
    RATE_LIMITED = "rate_limited"
    INVALID_CREDENTIAL = "invalid_credential"
    UNKNOWN = "unknown"


# =============================================================================
# Structured Signals
# =============================================================================

STATUS_CODE_CLASSES: dict[int, ErrorClass] = {
    429: ErrorClass.RATE_LIMITED,
    401: ErrorClass.INVALID_CREDENTIAL,
    403: ErrorClass.MODEL_UNAVAILABLE,
    404: ErrorClass.MODEL_UNAVAILABLE,
}

PROVIDER_STATUS_CLASSES: dict[str, ErrorClass] = {
    "RESOURCE_EXHAUSTED": ErrorClass.RATE_LIMITED,
    "UNAUTHENTICATED": ErrorClass.INVALID_CREDENTIAL,
    "API_KEY_INVALID": ErrorClass.INVALID_CREDENTIAL,
    "NOT_FOUND": ErrorClass.MODEL_UNAVAILABLE,
    "PERMISSION_DENIED": ErrorClass.MODEL_UNAVAILABLE,
}


# =============================================================================
# Message Rules (last resort)
# =============================================================================


@dataclass(frozen=True)
class ClassificationRule:
    """A regular expression over the lower-cased error message."""

    error_class: ErrorClass
    pattern: str

    def matches(self, text: str) -> bool:
        return re.search(self.pattern, text) is not None


# Evaluated in order; first match wins. Rate limiting and credential
# problems are checked before availability so that e.g. "quota exceeded
# for model X" never reads as a missing model.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(ErrorClass.RATE_LIMITED, r"\b429\b"),
    ClassificationRule(ErrorClass.RATE_LIMITED, r"quota"),
    ClassificationRule(ErrorClass.RATE_LIMITED, r"rate limit"),
    ClassificationRule(ErrorClass.RATE_LIMITED, r"too many requests"),
    ClassificationRule(ErrorClass.INVALID_CREDENTIAL, r"api key not valid"),
    ClassificationRule(ErrorClass.INVALID_CREDENTIAL, r"invalid api key"),
    ClassificationRule(ErrorClass.INVALID_CREDENTIAL, r"invalid.*api[ _]key"),
    ClassificationRule(ErrorClass.INVALID_CREDENTIAL, r"unauthori[sz]ed"),
    ClassificationRule(ErrorClass.INVALID_CREDENTIAL, r"unauthenticated"),
    ClassificationRule(ErrorClass.MODEL_UNAVAILABLE, r"not available"),
    ClassificationRule(ErrorClass.MODEL_UNAVAILABLE, r"\b404\b"),
    ClassificationRule(ErrorClass.MODEL_UNAVAILABLE, r"not found"),
    ClassificationRule(ErrorClass.MODEL_UNAVAILABLE, r"permission denied"),
    ClassificationRule(ErrorClass.MODEL_UNAVAILABLE, r"selected ai model"),
    ClassificationRule(ErrorClass.MODEL_UNAVAILABLE, r"model.*\b(not|invalid)\b"),
)


def classify_message(message: str) -> ErrorClass:
    """
    Classify an error purely from its message text.

    Args:
        message: Provider error text.

    Returns:
        The first matching rule's class, or UNKNOWN.
    """
    text = (message or "").lower()
    for rule in CLASSIFICATION_RULES:
        if rule.matches(text):
            return rule.error_class
    return ErrorClass.UNKNOWN


def classify_provider_error(error: ProviderCallError) -> ErrorClass:
    """
    Classify a failed provider call.

    Order: HTTP status, provider error status, then message rules.
    Transport failures carry no status and fall through to the rules,
    which normally yield UNKNOWN.

    Args:
        error: The failed call.

    Returns:
        ErrorClass for the fallback loop.
    """
    if error.status_code in STATUS_CODE_CLASSES:
        return STATUS_CODE_CLASSES[error.status_code]

    if error.error_code:
        structured = PROVIDER_STATUS_CLASSES.get(error.error_code.upper())
        if structured is not None:
            return structured

    return classify_message(error.message)


def parse_retry_after(error: ProviderCallError) -> int:
    """
    Seconds a client should wait after a rate-limit error.

    Uses the provider's structured hint if present, else a "retry in Ns"
    phrase in the message, else DEFAULT_RETRY_AFTER_SECONDS.
    """
    if error.retry_after is not None and error.retry_after > 0:
        return error.retry_after

    match = _RETRY_HINT.search(error.message or "")
    if match:
        try:
            return max(1, math.ceil(float(match.group(1))))
        except ValueError:
            pass

    return DEFAULT_RETRY_AFTER_SECONDS


def parse_retry_after_header(value: Optional[str]) -> Optional[int]:
    """Parse an HTTP Retry-After header given in seconds."""
    if not value:
        return None
    try:
        return max(1, math.ceil(float(value)))
    except ValueError:
        return None
