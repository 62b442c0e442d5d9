"""
API Dependencies

FastAPI dependency injection functions for the API layer. Every
dependency is a factory that tests can replace through
``app.dependency_overrides``.
"""

import logging
from typing import Optional

from assistant_gateway.core.config import Settings, get_settings as _get_settings
from assistant_gateway.services.assistant import (
    AssistantGateway,
    create_assistant_gateway,
)

logger = logging.getLogger(__name__)

# Set by the application lifespan; lazily created otherwise
_assistant_gateway: Optional[AssistantGateway] = None


def get_settings() -> Settings:
    """
    Get application settings.

    Pattern: Singleton with @lru_cache (from core.config)
    """
    return _get_settings()


def get_assistant_gateway() -> AssistantGateway:
    """
    Get the AssistantGateway instance.

    Returns:
        AssistantGateway: The process-wide gateway
    """
    global _assistant_gateway
    if _assistant_gateway is None:
        logger.info("Creating assistant gateway outside application lifespan")
        _assistant_gateway = create_assistant_gateway(get_settings())
    return _assistant_gateway


def set_assistant_gateway(gateway: Optional[AssistantGateway]) -> None:
    """Install (or clear, with None) the process-wide gateway."""
    global _assistant_gateway
    _assistant_gateway = gateway


__all__ = [
    "get_settings",
    "get_assistant_gateway",
    "set_assistant_gateway",
]
