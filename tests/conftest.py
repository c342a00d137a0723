"""Shared test fixtures."""

import pytest

from lesstokens.config import LLMConfig
from lesstokens.types import CompressedPrompt, Message


@pytest.fixture
def llm_config():
    """Minimal LLM configuration."""
    return LLMConfig(api_key="sk-test", model="test-model")


@pytest.fixture
def messages():
    """A system turn followed by a user turn."""
    return [
        Message(role="system", content="You are helpful."),
        Message(role="user", content="Hello!"),
    ]


@pytest.fixture
def compressed():
    """Compression result: 100 -> 50 tokens."""
    return CompressedPrompt(
        compressed="compressed",
        original_tokens=100,
        compressed_tokens=50,
        savings=50.0,
        ratio=0.5,
    )


@pytest.fixture
def async_iter():
    """Factory turning a list into an async iterator.

    Exception instances in the list are raised when reached.
    """

    def _make(items):
        async def _gen():
            for item in items:
                if isinstance(item, BaseException):
                    raise item
                yield item

        return _gen()

    return _make


async def collect(stream):
    return [chunk async for chunk in stream]


@pytest.fixture
def collect_stream():
    """Drain an async iterator into a list."""
    return collect
