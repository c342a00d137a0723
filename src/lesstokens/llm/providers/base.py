"""Abstract base class for LLM providers.

Public API (the "studs"):
    BaseLLMProvider: Abstract base class for LLM providers
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Mapping
from datetime import datetime, timezone
from typing import Any

from lesstokens.config import LLMConfig
from lesstokens.errors import ErrorCode, LessTokensError, create_error
from lesstokens.fields import pick_field, pick_int
from lesstokens.types import LLMResponse, Message, ResponseMetadata, StreamChunk, TokenUsage


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    All providers implement this interface so the SDK can treat vendors
    uniformly. A provider only holds its construction parameters; every call
    builds its own request and response state.
    """

    # Provider name as accepted by create_provider
    name: str = "base"
    # Vendor name used in error messages
    display_name: str = "Base"

    @abstractmethod
    async def chat(self, messages: list[Message], config: LLMConfig) -> LLMResponse:
        """Send a chat completion request.

        Args:
            messages: Conversation messages
            config: Model and sampling settings

        Returns:
            LLMResponse with generated content and usage

        Raises:
            LessTokensError: LLM_API_ERROR if the vendor call fails or returns no response
        """
        ...

    @abstractmethod
    def chat_stream(self, messages: list[Message], config: LLMConfig) -> AsyncIterator[StreamChunk]:
        """Send a streaming chat completion request.

        The vendor request is made when iteration starts. Yields content
        chunks with ``done=False`` followed by exactly one chunk with
        ``done=True`` carrying usage when the vendor reported it. The
        iterator is single-pass; call again to stream again.

        Raises:
            LessTokensError: LLM_API_ERROR if the vendor call fails
        """
        ...

    def _request_kwargs(self, core: dict[str, Any], extra: Mapping[str, Any]) -> dict[str, Any]:
        """Merge vendor-specific fields with core parameters.

        ``extra`` is applied first so core parameters that are set always win.
        """
        kwargs = dict(extra)
        kwargs.update({key: value for key, value in core.items() if value is not None})
        return kwargs

    def _metadata(self, model: str | None) -> ResponseMetadata:
        return ResponseMetadata(
            model=model,
            provider=self.name,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @staticmethod
    def _usage_from(
        source: Any,
        prompt_field: str,
        completion_field: str,
        total_field: str | None = None,
    ) -> TokenUsage:
        """Build TokenUsage from a vendor usage object.

        Missing counts default to 0. The total is taken from ``total_field``
        when the vendor supplies it, otherwise it is the sum of the two counts.
        """
        prompt_tokens = pick_int(source, prompt_field)
        completion_tokens = pick_int(source, completion_field)
        if total_field is not None and pick_field(source, total_field) is not None:
            total_tokens = pick_int(source, total_field)
        else:
            total_tokens = prompt_tokens + completion_tokens
        return TokenUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
        )

    def _no_response(self) -> LessTokensError:
        return create_error(ErrorCode.LLM_API_ERROR, f"No response from {self.display_name}")

    def _api_error(self, error: Exception) -> LessTokensError:
        """Wrap a vendor failure as LLM_API_ERROR.

        Callers re-raise LessTokensError unchanged before reaching this.
        """
        status_code = getattr(error, "status_code", None)
        return create_error(
            ErrorCode.LLM_API_ERROR,
            f"{self.display_name} API error: {error}",
            status_code if isinstance(status_code, int) else None,
            error,
        )


__all__ = ["BaseLLMProvider"]
