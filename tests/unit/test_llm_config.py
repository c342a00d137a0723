"""Tests for configuration models and input validation."""

import pytest
from pydantic import ValidationError

from lesstokens.config import DEFAULT_BASE_URL, LessTokensConfig, LLMConfig
from lesstokens.errors import ErrorCode, LessTokensError
from lesstokens.types import CompressionOptions, Message
from lesstokens.validation import (
    MAX_PROMPT_SIZE,
    SUPPORTED_PROVIDERS,
    coerce_compression_options,
    coerce_llm_config,
    coerce_messages,
    validate_config,
    validate_prompt,
)


class TestLessTokensConfig:
    def test_defaults(self):
        config = LessTokensConfig(api_key="lt-test", provider="openai")
        assert config.api_key.get_secret_value() == "lt-test"
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout_seconds == 30.0

    def test_api_key_hidden_in_repr(self):
        config = LessTokensConfig(api_key="lt-secret", provider="openai")
        assert "lt-secret" not in repr(config)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LESSTOKENS_API_KEY", "lt-env")
        monkeypatch.setenv("LESSTOKENS_PROVIDER", "anthropic")
        monkeypatch.setenv("LESSTOKENS_BASE_URL", "https://compress.example.com")
        monkeypatch.setenv("LESSTOKENS_TIMEOUT", "12.5")

        config = LessTokensConfig.from_env()

        assert config.api_key.get_secret_value() == "lt-env"
        assert config.provider == "anthropic"
        assert config.base_url == "https://compress.example.com"
        assert config.timeout_seconds == 12.5

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.setenv("LESSTOKENS_API_KEY", "lt-env")
        monkeypatch.delenv("LESSTOKENS_PROVIDER", raising=False)
        monkeypatch.delenv("LESSTOKENS_BASE_URL", raising=False)
        monkeypatch.delenv("LESSTOKENS_TIMEOUT", raising=False)

        config = LessTokensConfig.from_env()

        assert config.provider == "openai"
        assert config.base_url == DEFAULT_BASE_URL

    def test_from_env_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("LESSTOKENS_API_KEY", raising=False)
        with pytest.raises(LessTokensError) as exc_info:
            LessTokensConfig.from_env()
        assert exc_info.value.code is ErrorCode.INVALID_API_KEY

    def test_from_env_invalid_timeout(self, monkeypatch):
        monkeypatch.setenv("LESSTOKENS_API_KEY", "lt-env")
        monkeypatch.setenv("LESSTOKENS_TIMEOUT", "soon")
        with pytest.raises(LessTokensError) as exc_info:
            LessTokensConfig.from_env()
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR


class TestLLMConfig:
    def test_minimal(self):
        config = LLMConfig(api_key="sk-test", model="gpt-4o")
        assert config.model == "gpt-4o"
        assert config.extra == {}
        assert config.base_url is None

    def test_request_options_only_set_fields(self):
        config = LLMConfig(api_key="sk-test", model="gpt-4o", temperature=0.0, stop=["END"])
        assert config.request_options() == {"temperature": 0.0, "stop": ["END"]}

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            LLMConfig(api_key="sk-test", model="gpt-4o", top_k=40)

    def test_vendor_fields_go_in_extra(self):
        config = LLMConfig(api_key="sk-test", model="gemini", extra={"top_k": 40})
        assert config.extra == {"top_k": 40}
        assert "top_k" not in config.request_options()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
        config = LLMConfig.from_env("Anthropic", "claude-sonnet-4-20250514", max_tokens=200)
        assert config.api_key.get_secret_value() == "sk-ant-env"
        assert config.max_tokens == 200

    def test_from_env_missing_key(self, monkeypatch):
        monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
        with pytest.raises(LessTokensError, match="DEEPSEEK_API_KEY"):
            LLMConfig.from_env("deepseek", "deepseek-chat")

    def test_from_env_unknown_provider(self):
        with pytest.raises(LessTokensError) as exc_info:
            LLMConfig.from_env("unknown", "model")
        assert exc_info.value.code is ErrorCode.INVALID_PROVIDER


class TestValidateConfig:
    @pytest.mark.parametrize("provider", ["openai", "Anthropic", "GOOGLE", "deepseek"])
    def test_supported_providers(self, provider):
        validate_config("lt-test", provider, 10)

    @pytest.mark.parametrize("api_key", ["", "   ", None, 123])
    def test_invalid_api_key(self, api_key):
        with pytest.raises(LessTokensError) as exc_info:
            validate_config(api_key, "openai")
        assert exc_info.value.code is ErrorCode.INVALID_API_KEY

    def test_missing_provider(self):
        with pytest.raises(LessTokensError) as exc_info:
            validate_config("lt-test", "")
        assert exc_info.value.code is ErrorCode.INVALID_PROVIDER

    def test_unsupported_provider_lists_supported(self):
        with pytest.raises(LessTokensError) as exc_info:
            validate_config("lt-test", "unsupported")
        assert exc_info.value.code is ErrorCode.INVALID_PROVIDER
        for name in SUPPORTED_PROVIDERS:
            assert name in str(exc_info.value)

    @pytest.mark.parametrize("timeout", [0, -1, "30", True])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(LessTokensError) as exc_info:
            validate_config("lt-test", "openai", timeout)
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR


class TestValidatePrompt:
    def test_valid_prompt(self):
        validate_prompt("a")

    @pytest.mark.parametrize("prompt", ["", None, 42])
    def test_invalid_prompt(self, prompt):
        with pytest.raises(LessTokensError) as exc_info:
            validate_prompt(prompt)
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    def test_prompt_too_long(self):
        with pytest.raises(LessTokensError, match="must not exceed"):
            validate_prompt("x" * (MAX_PROMPT_SIZE + 1))


class TestCoercion:
    def test_llm_config_from_mapping(self):
        config = coerce_llm_config({"api_key": "sk-test", "model": "gpt-4o", "temperature": 0.5})
        assert isinstance(config, LLMConfig)
        assert config.temperature == 0.5

    def test_llm_config_instance_passes_through(self, llm_config):
        assert coerce_llm_config(llm_config) is llm_config

    def test_llm_config_required(self):
        with pytest.raises(LessTokensError) as exc_info:
            coerce_llm_config(None)
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    def test_llm_config_invalid_mapping(self):
        with pytest.raises(LessTokensError) as exc_info:
            coerce_llm_config({"api_key": "sk-test"})
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR
        assert isinstance(exc_info.value.details, ValidationError)

    @pytest.mark.parametrize(
        "overrides", [{"api_key": "  "}, {"model": ""}], ids=["blank-key", "empty-model"]
    )
    def test_llm_config_blank_fields(self, overrides):
        data = {"api_key": "sk-test", "model": "gpt-4o", **overrides}
        with pytest.raises(LessTokensError) as exc_info:
            coerce_llm_config(data)
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    def test_compression_options_default(self):
        assert coerce_compression_options(None) == CompressionOptions()

    def test_compression_options_from_mapping(self):
        options = coerce_compression_options({"target_ratio": 0.3, "aggressive": True})
        assert options.target_ratio == 0.3
        assert options.aggressive is True

    @pytest.mark.parametrize("ratio", [-0.1, 1.5])
    def test_compression_options_ratio_out_of_range(self, ratio):
        with pytest.raises(LessTokensError) as exc_info:
            coerce_compression_options(CompressionOptions(target_ratio=ratio))
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    def test_compression_options_wrong_type(self):
        with pytest.raises(LessTokensError) as exc_info:
            coerce_compression_options({"aggressive": "very"})
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    def test_messages(self):
        result = coerce_messages(
            [Message(role="system", content="a"), {"role": "user", "content": "b"}]
        )
        assert result == [Message(role="system", content="a"), Message(role="user", content="b")]

    def test_messages_empty(self):
        assert coerce_messages(None) == []
        assert coerce_messages([]) == []

    def test_messages_invalid(self):
        with pytest.raises(LessTokensError) as exc_info:
            coerce_messages([{"role": "user"}])
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR
