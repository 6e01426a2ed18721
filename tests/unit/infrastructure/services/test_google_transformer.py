"""
Name: Google Gemini Transformer Unit Tests

Responsibilities:
  - Verify request mapping (model alias, system instruction, generation config)
  - Verify error wrapping and empty-response handling

Notes:
  - The genai client is a Mock; no network calls.
"""

from unittest.mock import Mock

import pytest

from textproc.crosscutting.exceptions import TransformerError
from textproc.domain.entities import Operation, OperationKind, TransformOptions
from textproc.infrastructure.prompts import system_message
from textproc.infrastructure.services.retry import no_retry
from textproc.infrastructure.services.transformers import GoogleTextTransformer

TRANSCRIBE = Operation(kind=OperationKind.TRANSCRIBE)
TRANSLATE_FR = Operation(kind=OperationKind.TRANSLATE, target_language="fr")


def _client(text="  Texto corregido.  ", side_effect=None):
    client = Mock()
    client.models.generate_content.return_value = Mock(text=text)
    client.models.generate_content.side_effect = side_effect
    return client


def _transformer(client, **kwargs):
    return GoogleTextTransformer(client=client, retry_decorator=no_retry, **kwargs)


@pytest.mark.unit
class TestGoogleTextTransformer:
    def test_requires_api_key_or_client(self):
        with pytest.raises(TransformerError):
            GoogleTextTransformer(api_key="   ")

    def test_transform_returns_trimmed_text(self):
        client = _client()

        result = _transformer(client).transform("texto", TRANSCRIBE, TransformOptions())

        assert result == "Texto corregido."

    def test_request_carries_prompt_and_generation_config(self):
        client = _client()
        options = TransformOptions(max_output_tokens=321, temperature=0.7)

        _transformer(client).transform("bonjour", TRANSLATE_FR, options)

        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == GoogleTextTransformer.DEFAULT_MODEL_ID
        assert "al francés" in kwargs["contents"]
        assert kwargs["contents"].endswith("bonjour")
        config = kwargs["config"]
        assert config.temperature == 0.7
        assert config.max_output_tokens == 321
        assert config.system_instruction == system_message(TRANSLATE_FR)

    @pytest.mark.parametrize(
        "hint,expected",
        [
            ("gpt-4", "gemini-2.5-pro"),
            ("GPT-3.5-TURBO", "gemini-2.5-flash"),
            ("modelo-inventado", "custom-default"),
            (None, "custom-default"),
        ],
    )
    def test_model_hint_resolution(self, hint, expected):
        transformer = _transformer(_client(), model_id="custom-default")

        assert transformer.resolve_model(hint) == expected

    def test_provider_error_is_wrapped(self):
        boom = RuntimeError("quota")
        client = _client(side_effect=boom)

        with pytest.raises(TransformerError) as exc_info:
            _transformer(client).transform("x", TRANSCRIBE, TransformOptions())

        assert "Error de Google Gemini" in exc_info.value.message
        assert exc_info.value.original_error is boom

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_response_raises(self, text):
        with pytest.raises(TransformerError):
            _transformer(_client(text=text)).transform("x", TRANSCRIBE, TransformOptions())

    def test_transient_failure_is_retried_with_default_policy(self):
        client = _client()
        client.models.generate_content.side_effect = [ConnectionError("reset"), Mock(text="ok")]

        transformer = GoogleTextTransformer(client=client)

        assert transformer.transform("x", TRANSCRIBE, TransformOptions()) == "ok"
        assert client.models.generate_content.call_count == 2
