"""OpenAI provider implementation.

Also the base for OpenAI-compatible vendors reached through a custom
``base_url``.

Public API (the "studs"):
    OpenAIProvider: OpenAI chat completions provider
"""

from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from lesstokens.config import LLMConfig
from lesstokens.errors import LessTokensError
from lesstokens.fields import pick_field
from lesstokens.llm.providers.base import BaseLLMProvider
from lesstokens.types import LLMResponse, Message, StreamChunk, TokenUsage


class OpenAIProvider(BaseLLMProvider):
    """OpenAI provider implementation.

    Roles are passed through unchanged; OpenAI supports system turns natively.
    """

    name = "openai"
    display_name = "OpenAI"
    default_base_url: str | None = None

    def __init__(self, api_key: str, base_url: str | None = None) -> None:
        self._base_url = base_url or self.default_base_url
        self._client = AsyncOpenAI(api_key=api_key, base_url=self._base_url)

    def _build_kwargs(self, messages: list[Message], config: LLMConfig) -> dict[str, Any]:
        # LLMConfig's core field names match the chat completions parameters.
        core = {
            "model": config.model,
            "messages": [{"role": msg.role, "content": msg.content} for msg in messages],
            **config.request_options(),
        }
        return self._request_kwargs(core, config.extra)

    async def chat(self, messages: list[Message], config: LLMConfig) -> LLMResponse:
        try:
            completion = await self._client.chat.completions.create(
                **self._build_kwargs(messages, config)
            )

            choices = pick_field(completion, "choices", default=[])
            if not choices:
                raise self._no_response()
            message = pick_field(choices[0], "message")
            if message is None:
                raise self._no_response()

            return LLMResponse(
                content=pick_field(message, "content", default=""),
                usage=self._usage_from(
                    pick_field(completion, "usage"),
                    "prompt_tokens",
                    "completion_tokens",
                    "total_tokens",
                ),
                metadata=self._metadata(pick_field(completion, "model", default=config.model)),
            )

        except LessTokensError:
            raise
        except Exception as e:
            raise self._api_error(e) from e

    async def chat_stream(
        self, messages: list[Message], config: LLMConfig
    ) -> AsyncIterator[StreamChunk]:
        kwargs = self._build_kwargs(messages, config)
        kwargs["stream"] = True
        usage: TokenUsage | None = None

        try:
            stream = await self._client.chat.completions.create(**kwargs)
            async for chunk in stream:
                choices = pick_field(chunk, "choices", default=[])
                delta = pick_field(choices[0], "delta") if choices else None
                content = pick_field(delta, "content", default="")
                if content:
                    yield StreamChunk(content=content, done=False)

                # Usage arrives on an intermediate or trailing chunk; hold it
                # for the terminal chunk.
                chunk_usage = pick_field(chunk, "usage")
                if chunk_usage is not None:
                    usage = self._usage_from(
                        chunk_usage, "prompt_tokens", "completion_tokens", "total_tokens"
                    )

        except LessTokensError:
            raise
        except Exception as e:
            raise self._api_error(e) from e

        yield StreamChunk(content="", done=True, usage=usage)


__all__ = ["OpenAIProvider"]
