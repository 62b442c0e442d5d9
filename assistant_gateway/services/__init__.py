"""
Services Package

This package provides the business logic of the Assistant Gateway: the
provider fallback chain behind the assistant endpoint.
"""

from assistant_gateway.services.assistant import (
    APOLOGY_TEXT,
    AssistantGateway,
    create_assistant_gateway,
)

__all__ = ["APOLOGY_TEXT", "AssistantGateway", "create_assistant_gateway"]
