"""
Provider Base Interface - Abstract Assistant Provider

This module defines the abstract base class for the language-model
providers the assistant can call, plus the prompt and generation
parameters shared by every provider.

Design Pattern:
- Ports and Adapters (Hexagonal Architecture)
- AssistantProvider serves as the "port" (interface)
- Concrete providers (deepseek.py, gemini.py) serve as "adapters"
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

from assistant_gateway.models.domain import ConversationTurn

# =============================================================================
# Shared Prompt and Generation Parameters
# =============================================================================

SYSTEM_INSTRUCTION = (
    "You are a helpful AI assistant for a kiosk event management system. "
    "You help users with questions about events, bookings, and general "
    "inquiries. Be friendly, concise, and helpful. If you don't know "
    "something, admit it politely. Keep responses clear and to the point."
)

PRIMING_ACKNOWLEDGEMENT = (
    "I understand. I'm ready to help with questions about events, bookings, "
    "and the kiosk management system."
)

TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 1024


class AssistantProvider(ABC):
    """
    Abstract base class for assistant provider adapters.

    Each adapter owns its request shaping and response parsing. Failures
    are raised as ProviderCallError carrying whatever structured status the
    transport exposed; adapters do not retry and do not classify.

    Example:
        >>> provider = DeepSeekProvider(api_key="sk-...")
        >>> text = await provider.generate("Hi", [])
    """

    #: Provider identifier used in logs, metrics and attempt records.
    name: str = ""

    @abstractmethod
    async def generate(
        self,
        message: str,
        history: Sequence[ConversationTurn],
        *,
        model: Optional[str] = None,
    ) -> str:
        """
        Produce a reply to ``message`` given prior ``history``.

        Args:
            message: The new user message.
            history: Prior turns, oldest first. Never mutated.
            model: Model identifier; None selects the adapter's default.

        Returns:
            The reply text (may be empty; the gateway handles that).

        Raises:
            ProviderCallError: If the provider call fails for any reason.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
        return None
