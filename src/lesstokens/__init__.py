"""LessTokens - prompt compression in front of LLM provider APIs.

The SDK sends a prompt to the LessTokens compression service, forwards the
compressed prompt to an LLM through the vendor's official SDK, and merges
token usage and compression metrics into the response.

Key components:
    - LessTokensSDK: compress + chat, for single-shot and streamed completions
    - LessTokensClient: the compression API client
    - lesstokens.llm: provider adapters (OpenAI, Anthropic, Google, DeepSeek)

Quick start:
    >>> from lesstokens import LessTokensSDK
    >>>
    >>> sdk = LessTokensSDK(api_key="lt-...", provider="openai")
    >>> response = await sdk.process_prompt(
    ...     "Explain the following code ...",
    ...     {"api_key": "sk-...", "model": "gpt-4o"},
    ... )
    >>> print(response.content, response.usage.savings)
"""

from .client import LessTokensClient
from .config import LessTokensConfig, LLMConfig
from .errors import ErrorCode, LessTokensError, create_error
from .sdk import LessTokensSDK
from .types import (
    CompressedPrompt,
    CompressionOptions,
    LLMResponse,
    Message,
    ResponseMetadata,
    StreamChunk,
    TokenUsage,
)

__version__ = "1.0.0"

__all__ = [
    "LessTokensSDK",
    "LessTokensClient",
    "LessTokensConfig",
    "LLMConfig",
    "ErrorCode",
    "LessTokensError",
    "create_error",
    "CompressedPrompt",
    "CompressionOptions",
    "LLMResponse",
    "Message",
    "ResponseMetadata",
    "StreamChunk",
    "TokenUsage",
    "__version__",
]
