"""DeepSeek provider implementation.

DeepSeek exposes an OpenAI-compatible API, so this reuses the OpenAI
provider with DeepSeek's endpoint.

Public API (the "studs"):
    DeepSeekProvider: DeepSeek provider implementation
"""

from lesstokens.llm.providers.openai import OpenAIProvider

DEEPSEEK_BASE_URL = "https://api.deepseek.com"


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek provider (OpenAI-compatible API)."""

    name = "deepseek"
    display_name = "DeepSeek"
    default_base_url = DEEPSEEK_BASE_URL


__all__ = ["DeepSeekProvider", "DEEPSEEK_BASE_URL"]
