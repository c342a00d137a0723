"""Configuration models for the SDK and for LLM calls.

Public API (the "studs"):
    LessTokensConfig: Settings for the compression service and provider choice
    LLMConfig: Per-call LLM settings, with vendor-specific passthrough fields
    DEFAULT_BASE_URL: Default compression service URL
"""

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from lesstokens.errors import ErrorCode, create_error

DEFAULT_BASE_URL = "https://lesstokens.hive-hub.ai"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Data-driven mapping: provider -> env var holding its API key
_PROVIDER_KEY_ENV: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
}

# Core LLMConfig fields that map onto vendor request parameters
CORE_REQUEST_FIELDS = (
    "temperature",
    "max_tokens",
    "top_p",
    "frequency_penalty",
    "presence_penalty",
    "stop",
)


def provider_api_key_from_env(provider: str) -> str:
    """Read a provider's API key from its environment variable.

    Raises:
        LessTokensError: If the provider is unknown or its key env var is unset
    """
    env_var = _PROVIDER_KEY_ENV.get(provider.lower())
    if env_var is None:
        raise create_error(ErrorCode.INVALID_PROVIDER, f"Unknown provider: {provider}")

    api_key = os.environ.get(env_var)
    if not api_key:
        raise create_error(
            ErrorCode.VALIDATION_ERROR,
            f"{env_var} environment variable is required when provider={provider}",
        )
    return api_key


class LessTokensConfig(BaseModel):
    """Configuration for the LessTokens SDK.

    Attributes:
        api_key: LessTokens API key
        provider: LLM provider name (openai, anthropic, google, deepseek)
        base_url: Compression service URL
        timeout_seconds: Deadline for a single compression request
    """

    api_key: SecretStr = Field(..., description="LessTokens API key")
    provider: str = Field(..., description="LLM provider name")
    base_url: str = Field(DEFAULT_BASE_URL, description="Compression service URL")
    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, description="Request timeout in seconds")

    @classmethod
    def from_env(cls) -> "LessTokensConfig":
        """Create LessTokensConfig from environment variables.

        Environment variables:
            LESSTOKENS_API_KEY: LessTokens API key (required)
            LESSTOKENS_PROVIDER: Provider name (default: openai)
            LESSTOKENS_BASE_URL: Compression service URL
            LESSTOKENS_TIMEOUT: Request timeout in seconds

        Raises:
            LessTokensError: If the API key is missing or the timeout is not a number
        """
        api_key = os.environ.get("LESSTOKENS_API_KEY")
        if not api_key:
            raise create_error(
                ErrorCode.INVALID_API_KEY,
                "LESSTOKENS_API_KEY environment variable is required",
            )

        kwargs: dict[str, Any] = {
            "api_key": api_key,
            "provider": os.environ.get("LESSTOKENS_PROVIDER", "openai"),
        }
        base_url = os.environ.get("LESSTOKENS_BASE_URL")
        if base_url:
            kwargs["base_url"] = base_url
        timeout = os.environ.get("LESSTOKENS_TIMEOUT")
        if timeout:
            try:
                kwargs["timeout_seconds"] = float(timeout)
            except ValueError as e:
                raise create_error(
                    ErrorCode.VALIDATION_ERROR,
                    f"LESSTOKENS_TIMEOUT must be a number: {timeout!r}",
                    details=e,
                ) from e

        return cls(**kwargs)


class LLMConfig(BaseModel):
    """Per-call configuration for an LLM provider.

    Core fields are mapped onto each vendor's parameter names. ``extra`` is
    passed through to the vendor request verbatim; when a core field and an
    ``extra`` key name the same parameter, the core field wins.

    Attributes:
        api_key: Provider API key
        model: Model name
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate
        top_p: Nucleus sampling
        frequency_penalty: Frequency penalty
        presence_penalty: Presence penalty
        stop: Stop sequences
        base_url: Endpoint override for OpenAI-compatible providers
        extra: Vendor-specific request fields
    """

    model_config = ConfigDict(extra="forbid")

    api_key: SecretStr = Field(..., description="Provider API key")
    model: str = Field(..., description="Model name")
    temperature: float | None = Field(None, description="Sampling temperature")
    max_tokens: int | None = Field(None, description="Maximum tokens for completion")
    top_p: float | None = Field(None, description="Top-p sampling")
    frequency_penalty: float | None = Field(None, description="Frequency penalty")
    presence_penalty: float | None = Field(None, description="Presence penalty")
    stop: list[str] | None = Field(None, description="Stop sequences")
    base_url: str | None = Field(None, description="Provider endpoint override")
    extra: dict[str, Any] = Field(default_factory=dict, description="Vendor-specific fields")

    @classmethod
    def from_env(cls, provider: str, model: str, **overrides: Any) -> "LLMConfig":
        """Create LLMConfig with the provider's API key read from the environment.

        Raises:
            LessTokensError: If the provider is unknown or its key env var is unset
        """
        return cls(api_key=provider_api_key_from_env(provider), model=model, **overrides)

    def request_options(self) -> dict[str, Any]:
        """Return the core request fields that are set, keyed by field name."""
        return {
            name: getattr(self, name)
            for name in CORE_REQUEST_FIELDS
            if getattr(self, name) is not None
        }


__all__ = [
    "LessTokensConfig",
    "LLMConfig",
    "provider_api_key_from_env",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
]
