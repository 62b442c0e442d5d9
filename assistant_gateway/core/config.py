"""
Core configuration module for the Assistant Gateway.

This module provides centralized configuration management using Pydantic
Settings. Fields are loaded from environment variables with the
ASSISTANT_GATEWAY_ prefix; the two provider credentials are additionally
accepted under their conventional unprefixed names (DEEPSEEK_API_KEY,
GEMINI_API_KEY) as the kiosk deployment sets them.

Provider enablement is computed once per Settings instance by
provider_settings() and handed to the gateway at construction, so the
gateway never reads process environment at call time.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

DEFAULT_GEMINI_MODELS = [
    "gemini-pro",
    "gemini-1.5-flash",
    "gemini-1.5-pro",
]


# =============================================================================
# Resolved Provider View
# =============================================================================


@dataclass(frozen=True)
class ProviderSettings:
    """
    Which providers are enabled, resolved once from Settings.

    A credential counts as present only when it is non-blank.

    Attributes:
        deepseek_api_key: Primary provider credential, or None if absent.
        gemini_api_key: Secondary provider credential, or None if absent.
        gemini_models: Ordered secondary model list (most to least
            broadly available).
    """

    deepseek_api_key: str | None
    gemini_api_key: str | None
    gemini_models: tuple[str, ...] = tuple(DEFAULT_GEMINI_MODELS)

    @property
    def primary_enabled(self) -> bool:
        return self.deepseek_api_key is not None

    @property
    def secondary_enabled(self) -> bool:
        return self.gemini_api_key is not None

    @property
    def any_enabled(self) -> bool:
        return self.primary_enabled or self.secondary_enabled


def _present(secret: SecretStr) -> str | None:
    value = secret.get_secret_value().strip()
    return value or None


# =============================================================================
# Settings
# =============================================================================


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All fields use the ASSISTANT_GATEWAY_ prefix for environment variables.
    Example: ASSISTANT_GATEWAY_PORT=8080
    """

    # =========================================================================
    # Service Configuration
    # =========================================================================
    service_name: str = Field(
        default="assistant-gateway",
        description="Name of the service for logging and identification",
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port the service listens on",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for structured logging",
    )
    cors_origins: str = Field(
        default="",
        description="Comma-separated CORS origins for non-development environments",
    )

    # =========================================================================
    # Provider API Keys
    # SecretStr masks values in logs/repr, use .get_secret_value() to access
    # =========================================================================
    deepseek_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices(
            "ASSISTANT_GATEWAY_DEEPSEEK_API_KEY", "DEEPSEEK_API_KEY"
        ),
        description="DeepSeek API key (primary provider)",
    )
    gemini_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices(
            "ASSISTANT_GATEWAY_GEMINI_API_KEY", "GEMINI_API_KEY"
        ),
        description="Google Gemini API key (secondary provider)",
    )

    # =========================================================================
    # Provider Endpoints and Models
    # =========================================================================
    deepseek_base_url: str = Field(
        default="https://api.deepseek.com/v1",
        description="Base URL of the DeepSeek chat-completions API",
    )
    deepseek_model: str = Field(
        default="deepseek-chat",
        description="DeepSeek model used for assistant replies",
    )
    gemini_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Gemini generateContent API",
    )
    gemini_models: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GEMINI_MODELS),
        description="Ordered Gemini model fallback list, most to least available",
    )
    request_timeout_seconds: float = Field(
        default=60.0,
        ge=1.0,
        le=600.0,
        description="Transport timeout for outbound provider calls",
    )

    # =========================================================================
    # Conversation Configuration
    # =========================================================================
    history_window: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Number of recent turns forwarded to the assistant",
    )

    model_config = {
        "env_prefix": "ASSISTANT_GATEWAY_",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }

    # =========================================================================
    # Field Validators
    # =========================================================================
    @field_validator("gemini_models")
    @classmethod
    def validate_gemini_models(cls, v: list[str]) -> list[str]:
        """Strip blanks and reject an empty model list."""
        models = [m.strip() for m in v if m and m.strip()]
        if not models:
            raise ValueError("gemini_models must contain at least one model")
        return models

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        level = v.upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return level

    def provider_settings(self) -> ProviderSettings:
        """Resolve which providers are enabled."""
        return ProviderSettings(
            deepseek_api_key=_present(self.deepseek_api_key),
            gemini_api_key=_present(self.gemini_api_key),
            gemini_models=tuple(self.gemini_models),
        )

    def get_cors_origins(self) -> list[str]:
        """
        CORS allowed origins for the current environment.

        Development allows all origins; other environments use the
        comma-separated cors_origins value (empty blocks cross-origin).
        """
        if self.environment == "development":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# =============================================================================
# Settings Singleton
# =============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses functools.lru_cache to ensure only one Settings instance is created.

    Returns:
        Settings: The application settings instance.
    """
    return Settings()
