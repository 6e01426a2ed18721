"""textproc.infrastructure.services.retry

Name: Retry policy para llamadas al transformador externo

Responsabilidades
-----------------
  - Clasificar errores: transitorios (reintentar) vs permanentes (fail-fast).
  - Proveer un decorator tenacity con exponential backoff + jitter.
  - Loguear cada reintento con el fragmento/sesión en curso.

Colaboradores
-------------
  - tenacity (motor de retry)
  - crosscutting.config.get_settings (attempts / delays)
  - crosscutting.logger

Restricciones
-------------
  - Reintentar SOLO 408/429/5xx/529, timeouts y errores de conexión.
  - 400/401/403/404 y respuestas vacías no se reintentan.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ...crosscutting.config import get_settings
from ...crosscutting.exceptions import TextProcessorError
from ...crosscutting.logger import logger

T = TypeVar("T")

TRANSIENT_HTTP_CODES: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504, 529})
PERMANENT_HTTP_CODES: frozenset[int] = frozenset({400, 401, 403, 404})

_TRANSIENT_MESSAGE_PATTERNS: tuple[str, ...] = (
    "rate limit",
    "too many requests",
    "quota exceeded",
    "resource exhausted",
    "service unavailable",
    "temporarily unavailable",
    "connection error",
    "connection reset",
    "connection refused",
    "timed out",
    "deadline exceeded",
)


def get_http_status_code(exception: BaseException) -> Optional[int]:
    """
    Extrae un status HTTP (best-effort).

    - google.genai.errors.APIError expone `code`
    - httpx.HTTPStatusError expone `response.status_code`
    - openai / anthropic APIStatusError exponen `status_code`
    """
    code = getattr(exception, "code", None)
    if isinstance(code, int) and code >= 100:
        return code

    response = getattr(exception, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    status_code = getattr(exception, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


def is_transient_error(exception: BaseException) -> bool:
    # Nuestros errores ya están clasificados (respuesta vacía, config faltante).
    if isinstance(exception, TextProcessorError):
        return False

    status_code = get_http_status_code(exception)
    if status_code is not None:
        if status_code in PERMANENT_HTTP_CODES:
            return False
        if status_code in TRANSIENT_HTTP_CODES:
            return True

    if isinstance(exception, (httpx.TimeoutException, httpx.TransportError)):
        return True
    if isinstance(exception, (TimeoutError, ConnectionError)):
        return True

    message = str(exception).lower()
    return any(p in message for p in _TRANSIENT_MESSAGE_PATTERNS)


def _log_retry(retry_state: RetryCallState) -> None:
    fn_name = getattr(retry_state.fn, "__name__", "unknown")
    wait_time = retry_state.next_action.sleep if retry_state.next_action else 0
    exc = retry_state.outcome.exception() if retry_state.outcome else None

    logger.warning(
        "Retrying transformer call",
        extra={
            "function": fn_name,
            "attempt": retry_state.attempt_number,
            "wait_seconds": round(float(wait_time), 2),
            "error": str(exc) if exc else None,
            "error_type": type(exc).__name__ if exc else None,
        },
    )


def create_retry_decorator(
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator tenacity con los defaults de Settings (overrides explícitos opcionales).

    reraise=True: tras el último intento se propaga la excepción original.
    """
    settings = get_settings()
    attempts = settings.retry_max_attempts if max_attempts is None else max_attempts
    initial = settings.retry_base_delay_seconds if base_delay is None else float(base_delay)
    ceiling = settings.retry_max_delay_seconds if max_delay is None else float(max_delay)

    if attempts <= 0:
        raise ValueError("max_attempts must be > 0")
    if initial < 0:
        raise ValueError("base_delay must be >= 0")
    if ceiling <= 0:
        raise ValueError("max_delay must be > 0")

    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential_jitter(initial=initial, max=ceiling, jitter=initial),
        retry=retry_if_exception(is_transient_error),
        before_sleep=_log_retry,
        reraise=True,
    )


def no_retry(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator identidad (tests / providers sin reintentos)."""
    return func
