"""Client for the LessTokens compression API.

Public API (the "studs"):
    LessTokensClient: Compresses prompts through the remote service
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from lesstokens.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from lesstokens.errors import ErrorCode, LessTokensError, create_error
from lesstokens.fields import pick_field, pick_int
from lesstokens.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry
from lesstokens.types import CompressedPrompt, CompressionOptions

_logger = logging.getLogger(__name__)

COMPRESS_PATH = "/api/compress"


class LessTokensClient:
    """Client for the LessTokens compression API.

    Handles authentication, the request deadline, retries and the mapping of
    transport failures onto error codes. A failed or timed-out attempt is
    retried on TIMEOUT and NETWORK_ERROR; authentication and service errors
    are raised immediately.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        retry_config: RetryConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: LessTokens API key
            base_url: Service URL; a trailing slash is ignored
            timeout_seconds: Deadline for one request, connection included
            retry_config: Retry parameters (retryable codes are always
                TIMEOUT, NETWORK_ERROR and RATE_LIMIT)
            http_client: Shared client for connection pooling; a short-lived
                client is used per request when omitted
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._retry_config = (retry_config or DEFAULT_RETRY_CONFIG).model_copy(
            update={
                "retryable_codes": frozenset(
                    {
                        ErrorCode.TIMEOUT.value,
                        ErrorCode.NETWORK_ERROR.value,
                        ErrorCode.RATE_LIMIT.value,
                    }
                )
            }
        )
        self._http_client = http_client

    @property
    def url(self) -> str:
        return f"{self._base_url}{COMPRESS_PATH}"

    async def compress(
        self, prompt: str, options: CompressionOptions | None = None
    ) -> CompressedPrompt:
        """Compress a prompt.

        Args:
            prompt: Prompt text
            options: Compression options; only explicitly set fields are sent

        Returns:
            CompressedPrompt with token counts, savings and ratio

        Raises:
            LessTokensError: INVALID_API_KEY, COMPRESSION_FAILED, TIMEOUT or
                NETWORK_ERROR once retries are exhausted
        """
        body: dict[str, Any] = {"prompt": prompt}
        if options is not None:
            body.update(options.to_request_fields())

        return await retry(
            lambda: self._perform_compression_request(body, prompt),
            self._retry_config,
        )

    async def _perform_compression_request(
        self, body: dict[str, Any], prompt: str
    ) -> CompressedPrompt:
        try:
            response = await asyncio.wait_for(self._post(body), timeout=self._timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise create_error(
                ErrorCode.TIMEOUT,
                f"Request timeout after {self._timeout}s",
                details=e,
            ) from e
        # InvalidURL is not an HTTPError subclass.
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise create_error(
                ErrorCode.NETWORK_ERROR,
                f"Network error: {str(e) or type(e).__name__}",
                details=e,
            ) from e

        if not response.is_success:
            raise self._status_error(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise create_error(
                ErrorCode.COMPRESSION_FAILED,
                "Compression service returned an invalid response",
                response.status_code,
                e,
            ) from e

        return self._parse_compression(payload, prompt, response.status_code)

    async def _post(self, body: dict[str, Any]) -> httpx.Response:
        headers = {"Content-Type": "application/json", "X-API-Key": self._api_key}
        timeout = httpx.Timeout(self._timeout)
        if self._http_client is not None:
            return await self._http_client.post(self.url, json=body, headers=headers, timeout=timeout)
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.post(self.url, json=body, headers=headers)

    @staticmethod
    def _status_error(response: httpx.Response) -> LessTokensError:
        try:
            error_data = response.json()
        except ValueError:
            error_data = {}

        if response.status_code in (401, 403):
            return create_error(
                ErrorCode.INVALID_API_KEY,
                "Invalid LessTokens API key",
                response.status_code,
                error_data,
            )

        message = pick_field(error_data, "message") if isinstance(error_data, Mapping) else None
        return create_error(
            ErrorCode.COMPRESSION_FAILED,
            message or f"Compression failed: {response.reason_phrase or response.status_code}",
            response.status_code,
            error_data,
        )

    @staticmethod
    def _parse_compression(payload: Any, prompt: str, status_code: int) -> CompressedPrompt:
        if not isinstance(payload, Mapping):
            raise create_error(
                ErrorCode.COMPRESSION_FAILED,
                "Compression service returned an invalid response",
                status_code,
                payload,
            )

        # Current API nests the result under "data"; older versions return it flat.
        data = payload.get("data")
        if not isinstance(data, Mapping):
            data = payload

        try:
            result = CompressedPrompt(
                compressed=pick_field(data, "compressed", default="") or prompt,
                original_tokens=pick_int(data, "originalTokens"),
                compressed_tokens=pick_int(data, "compressedTokens"),
                savings=pick_field(data, "tokensSaved", "savings", default=0),
                ratio=pick_field(data, "compressionRatio", "ratio", default=1.0),
            )
        except ValidationError as e:
            raise create_error(
                ErrorCode.COMPRESSION_FAILED,
                "Compression service returned an invalid response",
                status_code,
                e,
            ) from e

        _logger.debug(
            "Compressed prompt: %d -> %d tokens", result.original_tokens, result.compressed_tokens
        )
        return result


__all__ = ["LessTokensClient"]
