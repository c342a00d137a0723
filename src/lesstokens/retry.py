"""Retry with exponential backoff.

Public API (the "studs"):
    RetryConfig: Retry parameters
    DEFAULT_RETRY_CONFIG: Default parameters (3 retries, 1s..10s)
    retry: Run an async operation, retrying on retryable error codes
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel, Field, model_validator

from lesstokens.errors import ErrorCode, LessTokensError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRYABLE_CODES = frozenset(
    {ErrorCode.TIMEOUT.value, ErrorCode.NETWORK_ERROR.value, ErrorCode.RATE_LIMIT.value}
)


class RetryConfig(BaseModel):
    """Retry parameters.

    Attributes:
        max_retries: Retries after the first attempt
        initial_delay: Delay before the first retry, in seconds
        max_delay: Upper bound for any delay, in seconds
        retryable_codes: Error codes that trigger a retry
    """

    max_retries: int = Field(3, ge=0, description="Maximum number of retries")
    initial_delay: float = Field(1.0, gt=0, description="Initial delay in seconds")
    max_delay: float = Field(10.0, gt=0, description="Maximum delay in seconds")
    retryable_codes: frozenset[str] = Field(
        DEFAULT_RETRYABLE_CODES, description="Error codes that are retried"
    )

    @model_validator(mode="after")
    def validate_delays(self) -> "RetryConfig":
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be greater than or equal to initial_delay")
        return self

    def delay_for(self, attempt: int) -> float:
        """Backoff delay after the given zero-based attempt."""
        return min(self.initial_delay * (2**attempt), self.max_delay)

    def is_retryable(self, error: BaseException) -> bool:
        """Only LessTokensError carries a recognizable code."""
        return isinstance(error, LessTokensError) and error.code.value in self.retryable_codes


DEFAULT_RETRY_CONFIG = RetryConfig()


async def retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
) -> T:
    """Run ``operation``, retrying with exponential backoff.

    The operation is attempted at most ``max_retries + 1`` times. A failure is
    re-raised immediately when it is the last attempt or its code is not
    retryable.

    Args:
        operation: Zero-argument callable returning an awaitable
        config: Retry parameters (default: DEFAULT_RETRY_CONFIG)

    Returns:
        The operation's result
    """
    config = config or DEFAULT_RETRY_CONFIG
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= config.max_retries or not config.is_retryable(e):
                raise
            delay = config.delay_for(attempt)
            _logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.2fs",
                attempt + 1,
                config.max_retries + 1,
                e,
                delay,
            )
            await asyncio.sleep(delay)
            attempt += 1


__all__ = ["RetryConfig", "DEFAULT_RETRY_CONFIG", "retry"]
