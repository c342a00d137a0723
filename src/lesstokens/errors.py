"""Errors raised by the LessTokens SDK.

Public API (the "studs"):
    ErrorCode: Machine-readable error kinds
    LessTokensError: The single exception type raised by the SDK
    create_error: Factory for LessTokensError
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error kinds."""

    INVALID_API_KEY = "INVALID_API_KEY"
    INVALID_PROVIDER = "INVALID_PROVIDER"
    COMPRESSION_FAILED = "COMPRESSION_FAILED"
    LLM_API_ERROR = "LLM_API_ERROR"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    # Recognized by the retry policy only; never raised by this package.
    RATE_LIMIT = "RATE_LIMIT"


class LessTokensError(Exception):
    """Base exception for all LessTokens SDK errors.

    Attributes:
        message: Human-readable description
        code: Error kind, used to decide retry eligibility
        status_code: Transport status code, if the error came from an HTTP response
        details: The underlying cause or error body, kept for diagnostics
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = ErrorCode(code)
        self.status_code = status_code
        self.details = details

    def __repr__(self) -> str:
        return (
            f"LessTokensError(code={self.code.value!r}, status_code={self.status_code!r}, "
            f"message={self.message!r})"
        )


def create_error(
    code: ErrorCode | str,
    message: str,
    status_code: int | None = None,
    details: Any = None,
) -> LessTokensError:
    """Create a LessTokensError from an error code."""
    return LessTokensError(message, code, status_code, details)


__all__ = ["ErrorCode", "LessTokensError", "create_error"]
