"""Google Gemini provider implementation.

Turn conversion:
- "assistant" role -> "model" role
- Every other role, "system" included, -> "user"
- Each turn's content -> parts: [{"text": "..."}]

Response:
- text = concatenate candidates[0].content.parts[].text
- usage.prompt_tokens = usage_metadata.prompt_token_count
- usage.completion_tokens = usage_metadata.candidates_token_count
- usage.total_tokens = sum

Public API (the "studs"):
    GoogleProvider: Google Gemini provider implementation
"""

from collections.abc import AsyncIterator
from typing import Any

from google import genai

from lesstokens.config import LLMConfig
from lesstokens.errors import LessTokensError
from lesstokens.fields import pick_field
from lesstokens.llm.providers.base import BaseLLMProvider
from lesstokens.types import LLMResponse, Message, StreamChunk, TokenUsage

# LLMConfig core field -> GenerateContentConfig field
_CONFIG_FIELD_MAP: dict[str, str] = {
    "temperature": "temperature",
    "max_tokens": "max_output_tokens",
    "top_p": "top_p",
    "frequency_penalty": "frequency_penalty",
    "presence_penalty": "presence_penalty",
    "stop": "stop_sequences",
}


class GoogleProvider(BaseLLMProvider):
    """Google Gemini provider implementation.

    Uses the async surface of the google-genai client. Gemini has no system
    turn in plain multi-turn chat, so system messages are sent as user turns.
    """

    name = "google"
    display_name = "Google"

    def __init__(self, api_key: str, base_url: str | None = None) -> None:
        http_options = {"base_url": base_url} if base_url else None
        self._client = genai.Client(api_key=api_key, http_options=http_options)

    def _build_kwargs(self, messages: list[Message], config: LLMConfig) -> dict[str, Any]:
        contents = [
            {
                "role": "model" if msg.role == "assistant" else "user",
                "parts": [{"text": msg.content}],
            }
            for msg in messages
        ]
        core = {
            _CONFIG_FIELD_MAP[name]: value for name, value in config.request_options().items()
        }
        return {
            "model": config.model,
            "contents": contents,
            "config": self._request_kwargs(core, config.extra),
        }

    def _usage(self, usage_metadata: Any) -> TokenUsage:
        return self._usage_from(usage_metadata, "prompt_token_count", "candidates_token_count")

    @staticmethod
    def _candidate_text(response: Any) -> str:
        candidates = pick_field(response, "candidates", default=[])
        if not candidates:
            return ""
        parts = pick_field(pick_field(candidates[0], "content"), "parts", default=[])
        return "".join(pick_field(part, "text", default="") for part in parts)

    async def chat(self, messages: list[Message], config: LLMConfig) -> LLMResponse:
        try:
            response = await self._client.aio.models.generate_content(
                **self._build_kwargs(messages, config)
            )

            candidates = pick_field(response, "candidates", default=[])
            if not candidates or pick_field(candidates[0], "content") is None:
                raise self._no_response()

            return LLMResponse(
                content=self._candidate_text(response),
                usage=self._usage(pick_field(response, "usage_metadata")),
                metadata=self._metadata(pick_field(response, "model_version", default=config.model)),
            )

        except LessTokensError:
            raise
        except Exception as e:
            raise self._api_error(e) from e

    async def chat_stream(
        self, messages: list[Message], config: LLMConfig
    ) -> AsyncIterator[StreamChunk]:
        kwargs = self._build_kwargs(messages, config)
        usage: TokenUsage | None = None

        try:
            stream = await self._client.aio.models.generate_content_stream(**kwargs)
            async for chunk in stream:
                # Prefer the aggregated text property; fall back to candidate parts.
                text = pick_field(chunk, "text") or self._candidate_text(chunk)
                if text:
                    yield StreamChunk(content=text, done=False)

                usage_metadata = pick_field(chunk, "usage_metadata")
                if usage_metadata is not None:
                    usage = self._usage(usage_metadata)

        except LessTokensError:
            raise
        except Exception as e:
            raise self._api_error(e) from e

        yield StreamChunk(content="", done=True, usage=usage)


__all__ = ["GoogleProvider"]
