"""
Unit tests for crosscutting/config.py (Settings validation).

Tests:
  - Defaults for segmentation and generation
  - Field validators (chunk size, overlap, provider, temperature, tokens)
  - Cross-field validation (overlap < max_chunk_size)
  - Provider configuration detection

Note:
  - Uses monkeypatch to set environment variables; .env loading is disabled in conftest
"""

import pytest
from pydantic import ValidationError

from textproc.crosscutting.config import Settings, get_settings

pytestmark = pytest.mark.unit


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("AI_PROVIDER", raising=False)

        settings = Settings()

        assert settings.ai_provider == "google"
        assert settings.max_chunk_size == 12000
        assert settings.overlap_size == 50
        assert settings.max_input_tokens == 0
        assert settings.default_max_output_tokens == 4000
        assert settings.default_temperature == 0.3
        assert settings.google_model == "gemini-2.5-flash"

    def test_custom_chunk_settings(self, monkeypatch):
        monkeypatch.setenv("MAX_CHUNK_SIZE", "500")
        monkeypatch.setenv("OVERLAP_SIZE", "20")

        settings = Settings()

        assert settings.max_chunk_size == 500
        assert settings.overlap_size == 20

    @pytest.mark.parametrize(
        "var,value,message",
        [
            ("MAX_CHUNK_SIZE", "0", "max_chunk_size must be greater than 0"),
            ("OVERLAP_SIZE", "-1", "overlap_size must be >= 0"),
            ("MAX_INPUT_TOKENS", "-5", "max_input_tokens must be >= 0"),
            ("AI_PROVIDER", "cohere", "ai_provider must be one of"),
            ("DEFAULT_TEMPERATURE", "3", "default_temperature must be between 0 and 2"),
        ],
    )
    def test_invalid_values(self, monkeypatch, var, value, message):
        monkeypatch.setenv(var, value)

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert message in str(exc_info.value)

    def test_provider_is_normalized(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "  LOCAL ")

        assert Settings().ai_provider == "local"

    def test_overlap_must_be_less_than_chunk_size(self, monkeypatch):
        monkeypatch.setenv("MAX_CHUNK_SIZE", "100")
        monkeypatch.setenv("OVERLAP_SIZE", "100")

        with pytest.raises(ValueError, match="must be less than"):
            Settings().validate_chunk_params()

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()

        assert get_settings() is get_settings()

    def test_allowed_origins_list(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.com, http://b.com,,")

        assert Settings().get_allowed_origins_list() == ["http://a.com", "http://b.com"]


class TestProviderConfigured:
    def test_google_requires_api_key(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "google")
        monkeypatch.setenv("GOOGLE_API_KEY", "")
        assert Settings().is_provider_configured() is False

        monkeypatch.setenv("GOOGLE_API_KEY", "key")
        assert Settings().is_provider_configured() is True

    def test_local_requires_endpoint(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "local")
        monkeypatch.setenv("LOCAL_LLM_ENDPOINT", "")
        assert Settings().is_provider_configured() is False

        monkeypatch.setenv("LOCAL_LLM_ENDPOINT", "http://localhost:11434")
        assert Settings().is_provider_configured() is True

    def test_demo_is_always_configured(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "demo")

        assert Settings().is_provider_configured() is True

    @pytest.mark.parametrize(
        "provider,env",
        [
            ("openai", {"OPENAI_API_KEY": "sk-test"}),
            ("anthropic", {"ANTHROPIC_API_KEY": "sk-ant-test"}),
            (
                "azure",
                {
                    "AZURE_OPENAI_API_KEY": "az-key",
                    "AZURE_OPENAI_ENDPOINT": "https://example.openai.azure.com",
                },
            ),
            ("huggingface", {"HUGGINGFACE_API_KEY": "hf_test"}),
        ],
    )
    def test_remote_providers_are_accepted_and_need_credentials(
        self, monkeypatch, provider, env
    ):
        """R: Every provider of the original deployment validates at startup."""
        monkeypatch.setenv("AI_PROVIDER", provider)
        for name in env:
            monkeypatch.delenv(name, raising=False)
        assert Settings().is_provider_configured() is False

        for name, value in env.items():
            monkeypatch.setenv(name, value)
        assert Settings().is_provider_configured() is True

    def test_placeholder_key_counts_as_unconfigured(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_API_KEY", "demo-key")

        assert Settings().is_provider_configured() is False

    @pytest.mark.parametrize(
        "provider,expected",
        [
            ("google", "gemini-2.5-flash"),
            ("openai", "gpt-4o-mini"),
            ("azure", "gpt-35-turbo"),
            ("huggingface", "meta-llama/Llama-2-70b-chat-hf"),
            ("local", "llama2"),
            ("demo", "demo"),
        ],
    )
    def test_provider_default_model(self, monkeypatch, provider, expected):
        monkeypatch.setenv("AI_PROVIDER", provider)

        assert Settings().provider_default_model() == expected
