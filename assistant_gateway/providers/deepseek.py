"""
DeepSeek Provider - Primary Assistant Adapter

DeepSeek's API is OpenAI-compatible, so the adapter drives it with the
OpenAI client pointed at the DeepSeek base URL.

Reference:
- https://api-docs.deepseek.com/

Design Patterns:
- Ports and Adapters: DeepSeekProvider implements AssistantProvider
- SDK retries are disabled; the gateway's fallback chain is the only retry
"""

import logging
from collections.abc import Sequence
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from assistant_gateway.core.exceptions import ProviderCallError
from assistant_gateway.models.domain import ConversationTurn
from assistant_gateway.providers.base import (
    MAX_OUTPUT_TOKENS,
    SYSTEM_INSTRUCTION,
    TEMPERATURE,
    AssistantProvider,
)
from assistant_gateway.providers.classification import parse_retry_after_header

logger = logging.getLogger(__name__)

# =============================================================================
# DeepSeek Configuration
# =============================================================================

DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_MODEL = "deepseek-chat"
PROVIDER_NAME = "deepseek"


class DeepSeekProvider(AssistantProvider):
    """
    DeepSeek provider adapter.

    Sends a chat-completion request of the form
    ``[system, *history, user]`` with fixed generation parameters.

    Args:
        api_key: DeepSeek API key.
        base_url: API base URL (default: DeepSeek public endpoint).
        model: Model used when generate() is not given one.
        timeout: Transport timeout in seconds.

    Example:
        >>> provider = DeepSeekProvider(api_key="sk-...")
        >>> text = await provider.generate("What events are on?", [])
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        api_key: str,
        base_url: str = DEEPSEEK_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
    ) -> None:
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def aclose(self) -> None:
        await self._client.close()

    def build_messages(
        self,
        message: str,
        history: Sequence[ConversationTurn],
    ) -> list[dict[str, str]]:
        """
        Build the chat-completion message list.

        Returns a new list; ``history`` is only read.
        """
        messages = [{"role": "system", "content": SYSTEM_INSTRUCTION}]
        messages.extend({"role": turn.role, "content": turn.content} for turn in history)
        messages.append({"role": "user", "content": message})
        return messages

    async def generate(
        self,
        message: str,
        history: Sequence[ConversationTurn],
        *,
        model: Optional[str] = None,
    ) -> str:
        """
        Execute a chat completion and return the reply text.

        Raises:
            ProviderCallError: On API, transport or empty-choice errors.
        """
        model_name = model or self._model
        params: dict[str, Any] = {
            "model": model_name,
            "messages": self.build_messages(message, history),
            "temperature": TEMPERATURE,
            "max_tokens": MAX_OUTPUT_TOKENS,
        }
        logger.debug(f"DeepSeek completion: model={model_name}, history_turns={len(history)}")

        try:
            response = await self._client.chat.completions.create(**params)
        except openai.APIStatusError as e:
            raise ProviderCallError(
                message=f"DeepSeek API error ({e.status_code}): {e.message}",
                provider=PROVIDER_NAME,
                model=model_name,
                status_code=e.status_code,
                retry_after=parse_retry_after_header(
                    e.response.headers.get("retry-after")
                ),
            ) from e
        except openai.APIConnectionError as e:
            raise ProviderCallError(
                message=f"DeepSeek connection error: {e}",
                provider=PROVIDER_NAME,
                model=model_name,
                transport=True,
            ) from e

        if not response.choices:
            raise ProviderCallError(
                message="No response from DeepSeek API",
                provider=PROVIDER_NAME,
                model=model_name,
            )

        return response.choices[0].message.content or ""
