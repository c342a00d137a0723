"""Anthropic Claude provider implementation.

Public API (the "studs"):
    AnthropicProvider: Anthropic Claude provider implementation
"""

from collections.abc import AsyncIterator
from typing import Any

from anthropic import AsyncAnthropic

from lesstokens.config import LLMConfig
from lesstokens.errors import LessTokensError
from lesstokens.fields import pick_field, pick_int
from lesstokens.llm.providers.base import BaseLLMProvider
from lesstokens.types import LLMResponse, Message, StreamChunk, TokenUsage

DEFAULT_MAX_TOKENS = 1024


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude provider implementation.

    System messages are sent as user turns: the messages list has no system
    role and the top-level ``system`` field is left to ``LLMConfig.extra``.
    """

    name = "anthropic"
    display_name = "Anthropic"

    def __init__(self, api_key: str, base_url: str | None = None) -> None:
        self._client = AsyncAnthropic(api_key=api_key, base_url=base_url)

    def _build_kwargs(self, messages: list[Message], config: LLMConfig) -> dict[str, Any]:
        formatted_messages = [
            {"role": "user" if msg.role == "system" else msg.role, "content": msg.content}
            for msg in messages
        ]
        core = {
            "model": config.model,
            "max_tokens": config.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": formatted_messages,
            "temperature": config.temperature,
            "top_p": config.top_p,
            "stop_sequences": config.stop,
        }
        return self._request_kwargs(core, config.extra)

    def _usage(self, usage: Any) -> TokenUsage:
        return self._usage_from(usage, "input_tokens", "output_tokens")

    async def chat(self, messages: list[Message], config: LLMConfig) -> LLMResponse:
        try:
            response = await self._client.messages.create(**self._build_kwargs(messages, config))
            if response is None:
                raise self._no_response()

            blocks = pick_field(response, "content")
            if blocks is None:
                raise self._no_response()
            content = "".join(
                pick_field(block, "text", default="")
                for block in blocks
                if pick_field(block, "type") == "text"
            )

            return LLMResponse(
                content=content,
                usage=self._usage(pick_field(response, "usage")),
                metadata=self._metadata(pick_field(response, "model", default=config.model)),
            )

        except LessTokensError:
            raise
        except Exception as e:
            raise self._api_error(e) from e

    async def chat_stream(
        self, messages: list[Message], config: LLMConfig
    ) -> AsyncIterator[StreamChunk]:
        kwargs = self._build_kwargs(messages, config)
        prompt_tokens = 0
        usage: TokenUsage | None = None

        try:
            async with self._client.messages.stream(**kwargs) as stream:
                async for event in stream:
                    event_type = pick_field(event, "type")

                    if event_type == "content_block_delta":
                        delta = pick_field(event, "delta")
                        if pick_field(delta, "type") == "text_delta":
                            text = pick_field(delta, "text", default="")
                            if text:
                                yield StreamChunk(content=text, done=False)

                    elif event_type == "message_start":
                        message_usage = pick_field(pick_field(event, "message"), "usage")
                        if message_usage is not None:
                            prompt_tokens = pick_int(message_usage, "input_tokens")
                            usage = self._usage_from(message_usage, "input_tokens", "output_tokens")

                    elif event_type == "message_delta":
                        delta_usage = pick_field(event, "usage")
                        if delta_usage is not None:
                            completion_tokens = pick_int(delta_usage, "output_tokens")
                            usage = TokenUsage(
                                prompt_tokens=prompt_tokens,
                                completion_tokens=completion_tokens,
                                total_tokens=prompt_tokens + completion_tokens,
                            )

                    elif event_type == "message_stop":
                        # Aggregate usage is only final once the stream stops.
                        final_message = await stream.get_final_message()
                        final_usage = pick_field(final_message, "usage")
                        if final_usage is not None:
                            usage = self._usage(final_usage)

        except LessTokensError:
            raise
        except Exception as e:
            raise self._api_error(e) from e

        yield StreamChunk(content="", done=True, usage=usage)


__all__ = ["AnthropicProvider"]
