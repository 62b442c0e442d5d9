"""
Assistant Gateway Service - provider fallback chain.

Answers one user message by walking an ordered chain of providers and
models until one replies or a fatal error stops the walk.

Fallback Chain:
    DeepSeek (primary, if configured) → Gemini model 1 → model 2 → ...

- Any primary failure falls through to the secondary, whatever its kind.
- Within the secondary's model list, rate-limit and credential errors are
  fatal; everything else moves on to the next model.
- Attempts run strictly one after another. No backoff, no caching, and no
  state survives between calls.
"""

from collections.abc import Sequence
from typing import Optional

from assistant_gateway.core.config import ProviderSettings, Settings
from assistant_gateway.core.exceptions import (
    AllProvidersExhaustedError,
    AssistantGatewayError,
    GatewayValidationError,
    InvalidCredentialError,
    NotConfiguredError,
    ProviderCallError,
    RateLimitedError,
    TransportError,
)
from assistant_gateway.models.domain import (
    AttemptOutcome,
    ConversationTurn,
    ProviderAttempt,
)
from assistant_gateway.observability.logging import get_logger
from assistant_gateway.observability.metrics import (
    record_provider_attempt,
    record_response,
)
from assistant_gateway.providers.base import AssistantProvider
from assistant_gateway.providers.classification import (
    ErrorClass,
    classify_provider_error,
    parse_retry_after,
)
from assistant_gateway.providers.deepseek import DeepSeekProvider
from assistant_gateway.providers.gemini import GeminiProvider

logger = get_logger(__name__)

APOLOGY_TEXT = "I apologize, but I could not generate a response."

RESPONSE_STATUS_SUCCESS = "success"


class AssistantGateway:
    """
    Resolves a provider, calls it, and returns one reply or a classified failure.

    Providers are injected; which of them is enabled comes from a
    ProviderSettings computed once at startup.

    Example:
        >>> gateway = create_assistant_gateway(get_settings())
        >>> reply = await gateway.respond("What events are available?", [])

    Attributes:
        providers: The resolved provider enablement.
    """

    def __init__(
        self,
        providers: ProviderSettings,
        primary: Optional[AssistantProvider] = None,
        secondary: Optional[AssistantProvider] = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            providers: Which credentials are present, and the secondary model list.
            primary: Adapter for the primary provider (required if enabled).
            secondary: Adapter for the secondary provider (required if enabled).
        """
        if providers.primary_enabled and primary is None:
            raise ValueError("primary provider is enabled but no adapter was given")
        if providers.secondary_enabled and secondary is None:
            raise ValueError("secondary provider is enabled but no adapter was given")

        self._providers = providers
        self._primary = primary if providers.primary_enabled else None
        self._secondary = secondary if providers.secondary_enabled else None

    @property
    def providers(self) -> ProviderSettings:
        return self._providers

    async def aclose(self) -> None:
        """Close the HTTP clients of every configured adapter."""
        for provider in (self._primary, self._secondary):
            if provider is not None:
                await provider.aclose()

    # =========================================================================
    # respond()
    # =========================================================================

    async def respond(
        self,
        message: str,
        history: Sequence[ConversationTurn] = (),
    ) -> str:
        """
        Produce a single assistant reply.

        Args:
            message: The new user message; must be non-empty.
            history: Prior turns, oldest first, already truncated by the caller.

        Returns:
            The reply text, or APOLOGY_TEXT if the provider replied empty.

        Raises:
            GatewayValidationError: If message is empty.
            NotConfiguredError: If no provider credential is configured.
            RateLimitedError: If a secondary model reports quota exhaustion.
            InvalidCredentialError: If a secondary model rejects the key.
            TransportError: If no provider could be reached at all.
            AllProvidersExhaustedError: If every option failed otherwise.
        """
        if not isinstance(message, str) or message == "":
            raise GatewayValidationError(
                "Message is required and must be a string", field="message"
            )

        try:
            reply = await self._run_chain(message, tuple(history))
        except AssistantGatewayError as e:
            if e.kind is not None:
                record_response(e.kind.value)
            raise

        record_response(RESPONSE_STATUS_SUCCESS)
        return reply

    async def _run_chain(
        self,
        message: str,
        history: tuple[ConversationTurn, ...],
    ) -> str:
        if not self._providers.any_enabled:
            logger.error("assistant_not_configured")
            raise NotConfiguredError()

        attempts: list[ProviderAttempt] = []
        last_error: Optional[ProviderCallError] = None

        if self._primary is not None:
            try:
                text = await self._primary.generate(message, history)
            except ProviderCallError as e:
                last_error = e
            except Exception as e:
                last_error = ProviderCallError(
                    message=f"{type(e).__name__}: {e}",
                    provider=self._primary.name,
                )
            else:
                return self._succeed(attempts, self._primary.name, None, text)

            self._record(attempts, last_error, AttemptOutcome.SKIP)
            logger.warning(
                "primary_provider_failed_falling_back",
                provider=self._primary.name,
                error=last_error.message,
                secondary_enabled=self._secondary is not None,
            )

        if self._secondary is not None:
            for model in self._providers.gemini_models:
                logger.info("provider_attempt", provider=self._secondary.name, model=model)
                try:
                    text = await self._secondary.generate(message, history, model=model)
                except ProviderCallError as e:
                    last_error = e
                except Exception as e:
                    last_error = ProviderCallError(
                        message=f"{type(e).__name__}: {e}",
                        provider=self._secondary.name,
                        model=model,
                    )
                else:
                    return self._succeed(attempts, self._secondary.name, model, text)

                self._handle_secondary_error(attempts, last_error, model)

        if last_error is None:
            raise AllProvidersExhaustedError("no provider model was attempted", attempts=attempts)

        if attempts and all(a.transport for a in attempts):
            raise TransportError(last_error.message, attempts=attempts)
        raise AllProvidersExhaustedError(last_error.message, attempts=attempts)

    def _handle_secondary_error(
        self,
        attempts: list[ProviderAttempt],
        error: ProviderCallError,
        model: str,
    ) -> None:
        """Raise for fatal classes, otherwise record a skip and return."""
        error_class = classify_provider_error(error)

        if error_class is ErrorClass.RATE_LIMITED:
            self._record(attempts, error, AttemptOutcome.FATAL, model)
            logger.warning(
                "provider_rate_limited",
                provider=error.provider,
                model=model,
                error=error.message,
            )
            raise RateLimitedError(
                "API quota exceeded. Please wait a moment and try again.",
                provider=error.provider,
                retry_after=parse_retry_after(error),
            ) from error

        if error_class is ErrorClass.INVALID_CREDENTIAL:
            self._record(attempts, error, AttemptOutcome.FATAL, model)
            logger.warning(
                "provider_credential_rejected",
                provider=error.provider,
                model=model,
                error=error.message,
            )
            raise InvalidCredentialError(
                f"The {error.provider} API key was rejected: {error.message}",
                provider=error.provider,
            ) from error

        self._record(attempts, error, AttemptOutcome.SKIP, model)
        logger.warning(
            "provider_model_skipped",
            provider=error.provider,
            model=model,
            error_class=error_class.value,
            error=error.message,
        )

    # =========================================================================
    # Attempt Bookkeeping
    # =========================================================================

    def _succeed(
        self,
        attempts: list[ProviderAttempt],
        provider: str,
        model: Optional[str],
        text: Optional[str],
    ) -> str:
        reply = text if text and text.strip() else APOLOGY_TEXT
        attempts.append(
            ProviderAttempt(
                provider=provider,
                model=model,
                outcome=AttemptOutcome.SUCCESS,
                detail=reply,
            )
        )
        record_provider_attempt(provider, model, AttemptOutcome.SUCCESS.value)
        logger.info(
            "provider_attempt_succeeded",
            provider=provider,
            model=model,
            attempts=len(attempts),
        )
        return reply

    @staticmethod
    def _record(
        attempts: list[ProviderAttempt],
        error: ProviderCallError,
        outcome: AttemptOutcome,
        model: Optional[str] = None,
    ) -> None:
        model = model or error.model
        attempts.append(
            ProviderAttempt(
                provider=error.provider,
                model=model,
                outcome=outcome,
                detail=error.message,
                transport=error.transport,
            )
        )
        record_provider_attempt(error.provider, model, outcome.value)


# =============================================================================
# Factory
# =============================================================================


def create_assistant_gateway(settings: Settings) -> AssistantGateway:
    """
    Build a gateway with adapters for every configured credential.

    Args:
        settings: Application settings.

    Returns:
        AssistantGateway ready to serve requests.
    """
    providers = settings.provider_settings()

    primary: Optional[AssistantProvider] = None
    if providers.deepseek_api_key is not None:
        primary = DeepSeekProvider(
            api_key=providers.deepseek_api_key,
            base_url=settings.deepseek_base_url,
            model=settings.deepseek_model,
            timeout=settings.request_timeout_seconds,
        )

    secondary: Optional[AssistantProvider] = None
    if providers.gemini_api_key is not None:
        secondary = GeminiProvider(
            api_key=providers.gemini_api_key,
            models=providers.gemini_models,
            api_base=settings.gemini_api_base,
            timeout=settings.request_timeout_seconds,
        )

    logger.info(
        "assistant_gateway_configured",
        primary_enabled=providers.primary_enabled,
        secondary_enabled=providers.secondary_enabled,
        secondary_models=list(providers.gemini_models),
    )
    return AssistantGateway(providers, primary=primary, secondary=secondary)
