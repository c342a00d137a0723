"""Multi-provider LLM abstraction layer.

This module provides a unified interface for multiple LLM providers:
- OpenAI (and OpenAI-compatible endpoints via base_url)
- Anthropic Claude
- Google Gemini
- DeepSeek

Public API (the "studs"):
    create_provider: Factory function to create provider instances
    BaseLLMProvider: Abstract base class for providers (for custom providers)

Example:
    >>> from lesstokens.llm import create_provider
    >>> from lesstokens import LLMConfig, Message
    >>>
    >>> provider = create_provider("anthropic", "sk-ant-...")
    >>> config = LLMConfig(api_key="sk-ant-...", model="claude-sonnet-4-20250514")
    >>> response = await provider.chat([Message(role="user", content="Hello!")], config)
    >>> print(response.content)
    >>>
    >>> async for chunk in provider.chat_stream(messages, config):
    ...     print(chunk.content, end="")
"""

from lesstokens.llm.factory import create_provider
from lesstokens.llm.providers.base import BaseLLMProvider

__all__ = [
    "create_provider",
    "BaseLLMProvider",
]
