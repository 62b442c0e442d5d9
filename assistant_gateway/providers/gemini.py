"""
Gemini Provider - Secondary Assistant Adapter

This module implements the Google Gemini adapter over the REST
``generateContent`` endpoint. Each call sends a multi-turn chat session:
a priming exchange (system instruction + canned acknowledgement), the
caller's history, and the new message.

Reference:
- Google Generative AI API Docs: https://ai.google.dev/api

Design Patterns:
- Ports and Adapters: GeminiProvider implements AssistantProvider
- Adapter: Transforms conversation turns to Gemini "contents" format
"""

import logging
from collections.abc import Sequence
from typing import Any, Optional

import httpx

from assistant_gateway.core.config import DEFAULT_GEMINI_MODELS
from assistant_gateway.core.exceptions import ProviderCallError
from assistant_gateway.models.domain import ConversationTurn
from assistant_gateway.providers.base import (
    MAX_OUTPUT_TOKENS,
    PRIMING_ACKNOWLEDGEMENT,
    SYSTEM_INSTRUCTION,
    TEMPERATURE,
    AssistantProvider,
)
from assistant_gateway.providers.classification import parse_retry_after_header

logger = logging.getLogger(__name__)

# =============================================================================
# Gemini Configuration
# =============================================================================

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
PROVIDER_NAME = "gemini"

DEFAULT_MODELS = DEFAULT_GEMINI_MODELS

_RETRY_INFO_TYPE = "type.googleapis.com/google.rpc.RetryInfo"


class GeminiProvider(AssistantProvider):
    """
    Google Gemini provider adapter.

    Args:
        api_key: Google AI API key (GEMINI_API_KEY).
        models: Model list; the first entry is used when generate() gets none.
        api_base: Base URL for Gemini API.
        timeout: Transport timeout in seconds.
        http_client: Optional pre-built client (closed by its owner).

    Example:
        >>> provider = GeminiProvider(api_key="AIza...")
        >>> text = await provider.generate("Hi", [], model="gemini-1.5-flash")
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        api_key: str,
        models: Optional[Sequence[str]] = None,
        api_base: str = GEMINI_API_BASE,
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._models = list(models) if models else list(DEFAULT_MODELS)
        self._api_base = api_base.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "GeminiProvider":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # =========================================================================
    # Request Shaping
    # =========================================================================

    def build_payload(
        self,
        message: str,
        history: Sequence[ConversationTurn],
    ) -> dict[str, Any]:
        """
        Build the generateContent payload.

        Gemini names the assistant role "model". The priming exchange
        precedes the caller's history so that models without native
        systemInstruction support still see the instruction.
        """
        contents: list[dict[str, Any]] = [
            {"role": "user", "parts": [{"text": SYSTEM_INSTRUCTION}]},
            {"role": "model", "parts": [{"text": PRIMING_ACKNOWLEDGEMENT}]},
        ]
        for turn in history:
            contents.append(
                {
                    "role": "model" if turn.role == "assistant" else "user",
                    "parts": [{"text": turn.content}],
                }
            )
        contents.append({"role": "user", "parts": [{"text": message}]})

        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": contents,
            "generationConfig": {
                "temperature": TEMPERATURE,
                "maxOutputTokens": MAX_OUTPUT_TOKENS,
            },
        }

    # =========================================================================
    # generate()
    # =========================================================================

    async def generate(
        self,
        message: str,
        history: Sequence[ConversationTurn],
        *,
        model: Optional[str] = None,
    ) -> str:
        """
        Send the chat session to ``model`` and return the reply text.

        Raises:
            ProviderCallError: On non-200 responses, transport failures or
                an unparseable reply body.
        """
        model_name = model or self._models[0]
        url = f"{self._api_base}/models/{model_name}:generateContent"
        payload = self.build_payload(message, history)

        try:
            response = await self._client.post(
                url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self._api_key,
                },
            )
        except httpx.TransportError as e:
            raise ProviderCallError(
                message=f"Gemini connection error: {e}",
                provider=PROVIDER_NAME,
                model=model_name,
                transport=True,
            ) from e

        if response.status_code != 200:
            raise self._error_from_response(response, model_name)

        try:
            return self.extract_text(response.json())
        except (ValueError, AttributeError, TypeError) as e:
            raise ProviderCallError(
                message=f"Malformed Gemini response: {type(e).__name__}: {e}",
                provider=PROVIDER_NAME,
                model=model_name,
                status_code=response.status_code,
            ) from e

    # =========================================================================
    # Response Parsing
    # =========================================================================

    @staticmethod
    def extract_text(response_data: dict[str, Any]) -> str:
        """
        Concatenate the text parts of the first candidate.

        Blocked prompts come back without candidates and yield "".
        """
        candidates = response_data.get("candidates") or []
        if not candidates:
            return ""

        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    def _error_from_response(
        self, response: httpx.Response, model_name: str
    ) -> ProviderCallError:
        """Build a ProviderCallError from a Gemini error body."""
        message = response.text
        error_status: Optional[str] = None
        retry_after = parse_retry_after_header(response.headers.get("retry-after"))

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error = body["error"]
            message = error.get("message") or message
            error_status = error.get("status")
            retry_after = retry_after or self._retry_delay(error.get("details"))

        logger.debug(
            f"Gemini error: model={model_name}, status={response.status_code}, "
            f"error_status={error_status}"
        )

        return ProviderCallError(
            message=f"[{response.status_code}] {message}",
            provider=PROVIDER_NAME,
            model=model_name,
            status_code=response.status_code,
            error_code=error_status,
            retry_after=retry_after,
        )

    @staticmethod
    def _retry_delay(details: Any) -> Optional[int]:
        """Read google.rpc.RetryInfo retryDelay (e.g. "37s") from error details."""
        if not isinstance(details, list):
            return None
        for detail in details:
            if isinstance(detail, dict) and detail.get("@type") == _RETRY_INFO_TYPE:
                delay = str(detail.get("retryDelay", "")).rstrip("s")
                return parse_retry_after_header(delay)
        return None
