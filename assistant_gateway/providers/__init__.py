"""
Providers Package - Assistant Provider Adapters

This package contains the abstract provider interface, the DeepSeek
(primary) and Gemini (secondary) adapters, and the error classifier that
drives the fallback chain.
"""

from assistant_gateway.providers.base import AssistantProvider
from assistant_gateway.providers.classification import (
    CLASSIFICATION_RULES,
    CLASSIFICATION_RULES_VERSION,
    ErrorClass,
    classify_provider_error,
    parse_retry_after,
)
from assistant_gateway.providers.deepseek import DeepSeekProvider
from assistant_gateway.providers.gemini import GeminiProvider

__all__ = [
    "AssistantProvider",
    "DeepSeekProvider",
    "GeminiProvider",
    "CLASSIFICATION_RULES",
    "CLASSIFICATION_RULES_VERSION",
    "ErrorClass",
    "classify_provider_error",
    "parse_retry_after",
]
