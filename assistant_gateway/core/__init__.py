"""
Core module for the Assistant Gateway.

This module contains configuration and the error taxonomy.
"""

from assistant_gateway.core.config import ProviderSettings, Settings, get_settings
from assistant_gateway.core.exceptions import (
    AllProvidersExhaustedError,
    AssistantGatewayError,
    ErrorKind,
    GatewayValidationError,
    InvalidCredentialError,
    NotConfiguredError,
    ProviderCallError,
    RateLimitedError,
    TransportError,
)

__all__ = [
    # Config
    "ProviderSettings",
    "Settings",
    "get_settings",
    # Exceptions
    "ErrorKind",
    "AssistantGatewayError",
    "NotConfiguredError",
    "InvalidCredentialError",
    "RateLimitedError",
    "AllProvidersExhaustedError",
    "TransportError",
    "GatewayValidationError",
    "ProviderCallError",
]
