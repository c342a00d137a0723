"""Type definitions for the LessTokens SDK.

Public API (the "studs"):
    Message: A single message in a conversation
    TokenUsage: Token usage statistics, optionally merged with compression metrics
    ResponseMetadata: Provenance of a response
    LLMResponse: Normalized response from an LLM provider
    StreamChunk: One element of a streamed response
    CompressedPrompt: Result of a compression call
    CompressionOptions: Options sent to the compression service
"""

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """Represents a single message in a conversation.

    Attributes:
        role: Message role ("user", "assistant", "system", ...)
        content: Message content text
    """

    role: str = Field(..., description="Message role: user, assistant, or system")
    content: str = Field(..., description="Message content")


class TokenUsage(BaseModel):
    """Token usage statistics.

    ``compressed_tokens`` and ``savings`` are only populated once the usage has
    been merged with a compression result.
    """

    prompt_tokens: int = Field(0, description="Prompt tokens sent to the LLM")
    completion_tokens: int = Field(0, description="Completion tokens generated")
    total_tokens: int = Field(0, description="Total tokens")
    compressed_tokens: int | None = Field(None, description="Token count after compression")
    savings: float | None = Field(None, description="Savings percentage (0-100)")


class ResponseMetadata(BaseModel):
    """Provenance of a response."""

    model: str | None = Field(None, description="Model that generated the response")
    provider: str | None = Field(None, description="Provider name")
    timestamp: str | None = Field(None, description="ISO-8601 UTC timestamp")
    compression_ratio: float | None = Field(None, description="compressed / original tokens")


class LLMResponse(BaseModel):
    """Normalized response from an LLM provider.

    Attributes:
        content: Generated text content
        usage: Token usage statistics
        metadata: Model, provider and compression provenance
    """

    content: str = Field(..., description="Generated text content")
    usage: TokenUsage = Field(default_factory=TokenUsage, description="Token usage statistics")
    metadata: ResponseMetadata | None = Field(None, description="Response metadata")


class StreamChunk(BaseModel):
    """One element of a streamed response.

    Exactly one chunk of a stream has ``done=True``; it is the last one and the
    only one that may carry ``usage``.
    """

    content: str = Field("", description="Content delta")
    done: bool = Field(False, description="Whether this is the final chunk")
    usage: TokenUsage | None = Field(None, description="Usage, only on the final chunk")


class CompressedPrompt(BaseModel):
    """Result of compressing a prompt."""

    compressed: str = Field(..., description="Compressed prompt text")
    original_tokens: int = Field(0, ge=0, description="Original token count")
    compressed_tokens: int = Field(0, ge=0, description="Compressed token count")
    savings: float = Field(0.0, description="Savings percentage (0-100)")
    ratio: float = Field(1.0, description="compressed_tokens / original_tokens")


class CompressionOptions(BaseModel):
    """Options for the compression service.

    Serialized with camelCase aliases; unset fields are never sent.
    """

    model_config = ConfigDict(populate_by_name=True)

    target_ratio: float | None = Field(None, alias="targetRatio", description="0.0 to 1.0")
    preserve_context: bool | None = Field(None, alias="preserveContext")
    aggressive: bool | None = Field(None, description="Use aggressive compression")

    def to_request_fields(self) -> dict[str, float | bool]:
        """Return only the explicitly supplied options, keyed by wire name."""
        return self.model_dump(by_alias=True, exclude_none=True)


__all__ = [
    "Message",
    "TokenUsage",
    "ResponseMetadata",
    "LLMResponse",
    "StreamChunk",
    "CompressedPrompt",
    "CompressionOptions",
]
