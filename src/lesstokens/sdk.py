"""Main LessTokens SDK class.

Sequences compression and the LLM call, then merges compression metrics into
the response:

    compress prompt -> build messages -> provider.chat / provider.chat_stream
        -> attach compressed_tokens, savings and compression_ratio

Public API (the "studs"):
    LessTokensSDK: Compress prompts and send them to an LLM provider
"""

import logging
from collections.abc import AsyncIterator, Callable, Iterable, Mapping
from typing import Any

from lesstokens.client import LessTokensClient
from lesstokens.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, LessTokensConfig, LLMConfig
from lesstokens.llm.factory import create_provider
from lesstokens.llm.providers.base import BaseLLMProvider
from lesstokens.types import (
    CompressedPrompt,
    CompressionOptions,
    LLMResponse,
    Message,
    ResponseMetadata,
    StreamChunk,
    TokenUsage,
)
from lesstokens.validation import (
    coerce_compression_options,
    coerce_llm_config,
    coerce_messages,
    validate_config,
    validate_prompt,
)

_logger = logging.getLogger(__name__)

MessageContent = str | Callable[[CompressedPrompt], str]


def calculate_savings(compressed: CompressedPrompt) -> float:
    """Percentage of tokens removed by compression, rounded to 2 decimals."""
    if compressed.original_tokens <= 0:
        return 0.0
    savings = (
        (compressed.original_tokens - compressed.compressed_tokens) / compressed.original_tokens
    ) * 100
    return round(savings, 2)


class LessTokensSDK:
    """Compress prompts with LessTokens and send them to an LLM provider.

    The instance only holds the compression client and the provider name;
    every call creates its own provider from the call's LLMConfig, so one SDK
    can serve concurrent calls.

    Example:
        >>> sdk = LessTokensSDK(api_key="lt-...", provider="openai")
        >>> response = await sdk.process_prompt(
        ...     "Summarize this document ...",
        ...     {"api_key": "sk-...", "model": "gpt-4o"},
        ... )
        >>> response.usage.savings
        42.5
    """

    def __init__(
        self,
        api_key: str,
        provider: str,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize the SDK.

        Args:
            api_key: LessTokens API key
            provider: LLM provider name (openai, anthropic, google, deepseek)
            base_url: Compression service URL
            timeout_seconds: Deadline for a single compression request

        Raises:
            LessTokensError: INVALID_API_KEY, INVALID_PROVIDER or VALIDATION_ERROR
        """
        validate_config(api_key, provider, timeout_seconds)

        self._provider = provider.lower()
        self._client = LessTokensClient(
            api_key,
            base_url or DEFAULT_BASE_URL,
            timeout_seconds or DEFAULT_TIMEOUT_SECONDS,
        )

    @classmethod
    def from_config(cls, config: LessTokensConfig) -> "LessTokensSDK":
        return cls(
            api_key=config.api_key.get_secret_value(),
            provider=config.provider,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
        )

    @classmethod
    def from_env(cls) -> "LessTokensSDK":
        """Create the SDK from LESSTOKENS_* environment variables."""
        return cls.from_config(LessTokensConfig.from_env())

    @property
    def provider(self) -> str:
        return self._provider

    async def process_prompt(
        self,
        prompt: str,
        llm_config: LLMConfig | Mapping[str, Any],
        compression_options: CompressionOptions | Mapping[str, Any] | None = None,
        message_role: str = "user",
        message_content: MessageContent | None = None,
        messages: Iterable[Message | Mapping[str, Any]] | None = None,
    ) -> LLMResponse:
        """Compress a prompt and send it to the LLM.

        Args:
            prompt: Prompt text to compress
            llm_config: Provider settings (LLMConfig or equivalent mapping)
            compression_options: Options for the compression service
            message_role: Role of the message carrying the prompt
            message_content: Replacement content for that message, or a
                function of the compression result returning it
            messages: Prior conversation turns, sent before the prompt message

        Returns:
            LLMResponse whose usage carries compressed_tokens and savings and
            whose metadata carries compression_ratio

        Raises:
            LessTokensError: On validation, compression or provider failure
        """
        config, compressed, outgoing = await self._prepare(
            prompt, llm_config, compression_options, message_role, message_content, messages
        )
        provider = self._create_provider(config)

        _logger.debug("Sending %d message(s) to %s", len(outgoing), self._provider)
        response = await provider.chat(outgoing, config)

        metadata = response.metadata or ResponseMetadata()
        return response.model_copy(
            update={
                "usage": self._merge_usage(response.usage, compressed),
                "metadata": metadata.model_copy(update={"compression_ratio": compressed.ratio}),
            }
        )

    async def process_prompt_stream(
        self,
        prompt: str,
        llm_config: LLMConfig | Mapping[str, Any],
        compression_options: CompressionOptions | Mapping[str, Any] | None = None,
        message_role: str = "user",
        message_content: MessageContent | None = None,
        messages: Iterable[Message | Mapping[str, Any]] | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Compress a prompt and stream the LLM response.

        Validation and compression happen when this is awaited; the returned
        iterator yields the provider's chunks as they arrive, with compression
        metrics merged into the final chunk's usage.

        Example:
            >>> stream = await sdk.process_prompt_stream(prompt, llm_config)
            >>> async for chunk in stream:
            ...     if chunk.done:
            ...         print(chunk.usage.savings)
            ...     else:
            ...         print(chunk.content, end="")
        """
        config, compressed, outgoing = await self._prepare(
            prompt, llm_config, compression_options, message_role, message_content, messages
        )
        provider = self._create_provider(config)

        _logger.debug("Streaming %d message(s) from %s", len(outgoing), self._provider)
        return self._wrap_stream(provider.chat_stream(outgoing, config), compressed)

    async def compress_prompt(
        self,
        prompt: str,
        compression_options: CompressionOptions | Mapping[str, Any] | None = None,
    ) -> CompressedPrompt:
        """Compress a prompt without sending it to an LLM."""
        validate_prompt(prompt)
        return await self._client.compress(prompt, coerce_compression_options(compression_options))

    async def _prepare(
        self,
        prompt: str,
        llm_config: LLMConfig | Mapping[str, Any],
        compression_options: CompressionOptions | Mapping[str, Any] | None,
        message_role: str,
        message_content: MessageContent | None,
        messages: Iterable[Message | Mapping[str, Any]] | None,
    ) -> tuple[LLMConfig, CompressedPrompt, list[Message]]:
        validate_prompt(prompt)
        config = coerce_llm_config(llm_config)
        options = coerce_compression_options(compression_options)
        prior = coerce_messages(messages)

        compressed = await self._client.compress(prompt, options)
        _logger.debug(
            "Prompt compressed from %d to %d tokens",
            compressed.original_tokens,
            compressed.compressed_tokens,
        )

        if callable(message_content):
            content = message_content(compressed)
        elif message_content is not None:
            content = message_content
        else:
            content = compressed.compressed

        outgoing = [*prior, Message(role=message_role or "user", content=content)]
        return config, compressed, outgoing

    def _create_provider(self, config: LLMConfig) -> BaseLLMProvider:
        return create_provider(self._provider, config.api_key.get_secret_value(), config.base_url)

    @staticmethod
    def _merge_usage(usage: TokenUsage, compressed: CompressedPrompt) -> TokenUsage:
        return usage.model_copy(
            update={
                "compressed_tokens": compressed.compressed_tokens,
                "savings": calculate_savings(compressed),
            }
        )

    async def _wrap_stream(
        self, stream: AsyncIterator[StreamChunk], compressed: CompressedPrompt
    ) -> AsyncIterator[StreamChunk]:
        """Pass content chunks through and merge metrics into the final chunk.

        If the provider stream ends without a final chunk, none is synthesized.
        """
        async for chunk in stream:
            if not chunk.done:
                yield chunk
                continue

            usage = chunk.usage or TokenUsage(
                prompt_tokens=compressed.original_tokens,
                completion_tokens=0,
                total_tokens=compressed.original_tokens,
            )
            yield chunk.model_copy(update={"usage": self._merge_usage(usage, compressed)})


__all__ = ["LessTokensSDK", "calculate_savings"]
