"""Tests for retry with exponential backoff."""

from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from lesstokens.errors import ErrorCode, create_error
from lesstokens.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry


@pytest.fixture
def sleep():
    with patch("lesstokens.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


def failing(*errors, result="ok"):
    """Operation that raises each error in turn, then returns result."""
    calls = {"count": 0}
    pending = list(errors)

    async def operation():
        calls["count"] += 1
        if pending:
            raise pending.pop(0)
        return result

    return operation, calls


class TestRetryConfig:
    def test_defaults(self):
        assert DEFAULT_RETRY_CONFIG.max_retries == 3
        assert DEFAULT_RETRY_CONFIG.initial_delay == 1.0
        assert DEFAULT_RETRY_CONFIG.max_delay == 10.0
        assert DEFAULT_RETRY_CONFIG.retryable_codes == {"TIMEOUT", "NETWORK_ERROR", "RATE_LIMIT"}

    def test_delay_doubles_up_to_max(self):
        config = RetryConfig(initial_delay=1.0, max_delay=5.0)
        assert [config.delay_for(n) for n in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]

    def test_max_delay_below_initial_rejected(self):
        with pytest.raises(ValidationError):
            RetryConfig(initial_delay=2.0, max_delay=1.0)

    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            RetryConfig(max_retries=-1)

    def test_is_retryable(self):
        config = RetryConfig()
        assert config.is_retryable(create_error(ErrorCode.TIMEOUT, "slow"))
        assert not config.is_retryable(create_error(ErrorCode.INVALID_API_KEY, "bad"))
        assert not config.is_retryable(ValueError("TIMEOUT"))


class TestRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self, sleep):
        operation, calls = failing()
        assert await retry(operation) == "ok"
        assert calls["count"] == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recovers_after_retryable_errors(self, sleep):
        operation, calls = failing(
            create_error(ErrorCode.NETWORK_ERROR, "reset"),
            create_error(ErrorCode.TIMEOUT, "slow"),
        )

        assert await retry(operation) == "ok"
        assert calls["count"] == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, sleep):
        errors = [create_error(ErrorCode.TIMEOUT, f"slow {n}") for n in range(5)]
        operation, calls = failing(*errors)

        with pytest.raises(Exception) as exc_info:
            await retry(operation, RetryConfig(max_retries=2, initial_delay=0.5, max_delay=10.0))

        assert calls["count"] == 3
        assert exc_info.value is errors[2]
        assert [c.args[0] for c in sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_non_retryable_raised_immediately(self, sleep):
        error = create_error(ErrorCode.INVALID_API_KEY, "bad key", 401)
        operation, calls = failing(error)

        with pytest.raises(Exception) as exc_info:
            await retry(operation)

        assert exc_info.value is error
        assert calls["count"] == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_foreign_exception_not_retried(self, sleep):
        operation, calls = failing(RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await retry(operation)

        assert calls["count"] == 1

    @pytest.mark.asyncio
    async def test_zero_retries(self, sleep):
        operation, calls = failing(create_error(ErrorCode.TIMEOUT, "slow"))

        with pytest.raises(Exception):
            await retry(operation, RetryConfig(max_retries=0))

        assert calls["count"] == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_retryable_codes(self, sleep):
        config = RetryConfig(retryable_codes=frozenset({"COMPRESSION_FAILED"}))
        operation, calls = failing(create_error(ErrorCode.COMPRESSION_FAILED, "busy"))

        assert await retry(operation, config) == "ok"
        assert calls["count"] == 2
