"""Factory function for creating LLM providers.

Public API (the "studs"):
    create_provider: Factory function to create provider instances
"""

from lesstokens.errors import ErrorCode, create_error
from lesstokens.llm.providers.base import BaseLLMProvider
from lesstokens.validation import SUPPORTED_PROVIDERS


def create_provider(provider: str, api_key: str, base_url: str | None = None) -> BaseLLMProvider:
    """Create an LLM provider by name.

    Vendor SDKs are imported lazily so only the selected one is loaded.

    Args:
        provider: Provider name, case-insensitive (openai, anthropic, google, deepseek)
        api_key: Provider API key
        base_url: Optional endpoint override, mainly for OpenAI-compatible vendors

    Returns:
        BaseLLMProvider: Configured provider instance

    Raises:
        LessTokensError: INVALID_PROVIDER if the provider is not supported

    Example:
        >>> provider = create_provider("openai", "sk-...")
        >>> response = await provider.chat(messages, config)
    """
    normalized = provider.lower()

    if normalized == "openai":
        from lesstokens.llm.providers.openai import OpenAIProvider

        return OpenAIProvider(api_key, base_url)
    elif normalized == "deepseek":
        from lesstokens.llm.providers.deepseek import DeepSeekProvider

        return DeepSeekProvider(api_key, base_url)
    elif normalized == "anthropic":
        from lesstokens.llm.providers.anthropic import AnthropicProvider

        return AnthropicProvider(api_key, base_url)
    elif normalized == "google":
        from lesstokens.llm.providers.google import GoogleProvider

        return GoogleProvider(api_key, base_url)
    else:
        raise create_error(
            ErrorCode.INVALID_PROVIDER,
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}",
        )


__all__ = ["create_provider"]
