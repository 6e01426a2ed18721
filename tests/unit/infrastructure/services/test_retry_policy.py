"""
Name: Retry Policy Unit Tests

Responsibilities:
  - Test transient vs permanent error classification
  - Verify the tenacity decorator retries only transient failures
  - Validate configuration guards

Collaborators:
  - textproc.infrastructure.services.retry: Module under test
  - unittest.mock: Fake provider errors

Constraints:
  - No real sleeps (base delay 0)
"""

from unittest.mock import Mock

import anthropic
import httpx
import openai
import pytest

from textproc.crosscutting.exceptions import TransformerError
from textproc.infrastructure.services.retry import (
    PERMANENT_HTTP_CODES,
    TRANSIENT_HTTP_CODES,
    create_retry_decorator,
    get_http_status_code,
    is_transient_error,
    no_retry,
)


class _StatusError(Exception):
    def __init__(self, code: int) -> None:
        super().__init__(f"status {code}")
        self.code = code


@pytest.mark.unit
class TestGetHttpStatusCode:
    def test_extracts_code_attribute(self):
        assert get_http_status_code(_StatusError(429)) == 429

    def test_extracts_from_response_attribute(self):
        request = httpx.Request("POST", "http://llm.local/api/generate")
        response = httpx.Response(503, request=request)
        exc = httpx.HTTPStatusError("boom", request=request, response=response)

        assert get_http_status_code(exc) == 503

    def test_extracts_status_code_attribute(self):
        exc = Mock(spec=["status_code"])
        exc.status_code = 500

        assert get_http_status_code(exc) == 500

    def test_returns_none_for_unknown_exception(self):
        assert get_http_status_code(ValueError("nope")) is None


@pytest.mark.unit
class TestIsTransientError:
    @pytest.mark.parametrize("code", sorted(TRANSIENT_HTTP_CODES))
    def test_transient_http_codes(self, code):
        assert is_transient_error(_StatusError(code)) is True

    @pytest.mark.parametrize("code", sorted(PERMANENT_HTTP_CODES))
    def test_permanent_http_codes(self, code):
        assert is_transient_error(_StatusError(code)) is False

    def test_httpx_timeout_is_transient(self):
        assert is_transient_error(httpx.ReadTimeout("slow")) is True

    def test_connection_error_is_transient(self):
        assert is_transient_error(ConnectionError("refused")) is True

    def test_rate_limit_message(self):
        assert is_transient_error(Exception("Rate limit exceeded, retry later")) is True

    def test_sdk_connection_errors_are_transient(self):
        request = httpx.Request("POST", "https://api.example/v1")

        assert is_transient_error(openai.APIConnectionError(request=request)) is True
        assert is_transient_error(anthropic.APIConnectionError(request=request)) is True

    @pytest.mark.parametrize("status,expected", [(529, True), (503, True), (401, False)])
    def test_sdk_status_errors(self, status, expected):
        request = httpx.Request("POST", "https://api.example/v1")
        response = httpx.Response(status, request=request)

        for sdk in (openai, anthropic):
            exc = sdk.APIStatusError(f"status {status}", response=response, body=None)
            assert is_transient_error(exc) is expected

    def test_domain_errors_fail_fast(self):
        """R: Empty responses are classified as TransformerError and never retried."""
        assert is_transient_error(TransformerError("Respuesta vacía")) is False

    def test_unknown_error_not_transient(self):
        assert is_transient_error(ValueError("Invalid argument")) is False


@pytest.mark.unit
class TestCreateRetryDecorator:
    def test_retries_transient_then_succeeds(self):
        provider = Mock(side_effect=[ConnectionError("reset"), _StatusError(503), "ok"])
        wrapped = create_retry_decorator(max_attempts=3, base_delay=0, max_delay=0.01)(provider)

        assert wrapped() == "ok"
        assert provider.call_count == 3

    def test_permanent_error_is_not_retried(self):
        provider = Mock(side_effect=_StatusError(401))
        wrapped = create_retry_decorator(max_attempts=5, base_delay=0, max_delay=0.01)(provider)

        with pytest.raises(_StatusError):
            wrapped()
        assert provider.call_count == 1

    def test_reraises_original_after_last_attempt(self):
        provider = Mock(side_effect=TimeoutError("deadline"))
        wrapped = create_retry_decorator(max_attempts=2, base_delay=0, max_delay=0.01)(provider)

        with pytest.raises(TimeoutError):
            wrapped()
        assert provider.call_count == 2

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"base_delay": -1},
            {"max_delay": 0},
        ],
    )
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            create_retry_decorator(**kwargs)

    def test_no_retry_is_identity(self):
        def fn():
            return 1

        assert no_retry(fn) is fn
