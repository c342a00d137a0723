"""Input validation.

Every check raises LessTokensError so callers see a single error type.

Public API (the "studs"):
    SUPPORTED_PROVIDERS: Provider names accepted by the SDK
    validate_config: Check SDK construction parameters
    validate_prompt: Check a prompt string
    validate_llm_config: Check an LLMConfig
    validate_compression_options: Check CompressionOptions
    coerce_llm_config / coerce_compression_options / coerce_messages:
        Accept model instances or plain mappings
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from lesstokens.config import LLMConfig
from lesstokens.errors import ErrorCode, create_error
from lesstokens.types import CompressionOptions, Message

SUPPORTED_PROVIDERS = ("openai", "anthropic", "google", "deepseek")

MIN_PROMPT_SIZE = 1
MAX_PROMPT_SIZE = 1_000_000


def validate_config(api_key: Any, provider: Any, timeout_seconds: Any = None) -> None:
    """Validate SDK construction parameters."""
    if not isinstance(api_key, str) or not api_key.strip():
        raise create_error(
            ErrorCode.INVALID_API_KEY,
            "LessTokens API key is required and must be a non-empty string",
        )

    if not isinstance(provider, str) or not provider.strip():
        raise create_error(
            ErrorCode.INVALID_PROVIDER,
            "Provider is required and must be a non-empty string",
        )

    if provider.lower() not in SUPPORTED_PROVIDERS:
        raise create_error(
            ErrorCode.INVALID_PROVIDER,
            f"Provider '{provider}' is not supported. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}",
        )

    if timeout_seconds is not None:
        if (
            isinstance(timeout_seconds, bool)
            or not isinstance(timeout_seconds, (int, float))
            or timeout_seconds <= 0
        ):
            raise create_error(ErrorCode.VALIDATION_ERROR, "Timeout must be a positive number")


def validate_prompt(prompt: Any) -> None:
    if not isinstance(prompt, str):
        raise create_error(ErrorCode.VALIDATION_ERROR, "Prompt must be a string")

    if len(prompt) < MIN_PROMPT_SIZE:
        raise create_error(
            ErrorCode.VALIDATION_ERROR,
            f"Prompt must be at least {MIN_PROMPT_SIZE} character long",
        )

    if len(prompt) > MAX_PROMPT_SIZE:
        raise create_error(
            ErrorCode.VALIDATION_ERROR,
            f"Prompt must not exceed {MAX_PROMPT_SIZE} characters",
        )


def validate_llm_config(config: LLMConfig) -> None:
    if not config.api_key.get_secret_value().strip():
        raise create_error(
            ErrorCode.VALIDATION_ERROR,
            "LLM API key is required and must be a non-empty string",
        )

    if not config.model.strip():
        raise create_error(
            ErrorCode.VALIDATION_ERROR,
            "Model is required and must be a non-empty string",
        )


def validate_compression_options(options: CompressionOptions) -> None:
    if options.target_ratio is not None and not 0.0 <= options.target_ratio <= 1.0:
        raise create_error(
            ErrorCode.VALIDATION_ERROR,
            "target_ratio must be a number between 0.0 and 1.0",
        )


def coerce_llm_config(config: LLMConfig | Mapping[str, Any] | None) -> LLMConfig:
    """Return a validated LLMConfig built from a model or a mapping."""
    if config is None:
        raise create_error(ErrorCode.VALIDATION_ERROR, "LLM configuration is required")
    if not isinstance(config, LLMConfig):
        config = _validate_model(LLMConfig, config, "LLM configuration")
    validate_llm_config(config)
    return config


def coerce_compression_options(
    options: CompressionOptions | Mapping[str, Any] | None,
) -> CompressionOptions:
    if options is None:
        return CompressionOptions()
    if not isinstance(options, CompressionOptions):
        options = _validate_model(CompressionOptions, options, "Compression options")
    validate_compression_options(options)
    return options


def coerce_messages(messages: Iterable[Message | Mapping[str, Any]] | None) -> list[Message]:
    if not messages:
        return []
    return [
        msg if isinstance(msg, Message) else _validate_model(Message, msg, "Message")
        for msg in messages
    ]


def _validate_model(model_cls: Any, value: Any, label: str) -> Any:
    try:
        return model_cls.model_validate(value)
    except ValidationError as e:
        raise create_error(
            ErrorCode.VALIDATION_ERROR,
            f"{label} is invalid: {e.error_count()} validation error(s)",
            details=e,
        ) from e


__all__ = [
    "SUPPORTED_PROVIDERS",
    "validate_config",
    "validate_prompt",
    "validate_llm_config",
    "validate_compression_options",
    "coerce_llm_config",
    "coerce_compression_options",
    "coerce_messages",
]
