# textproc/crosscutting/middleware.py
"""
===============================================================================
MÓDULO: Middlewares HTTP (correlación + límite de payload)
===============================================================================

RequestContextMiddleware
  - X-Request-Id entrante (si es razonable) o uno nuevo.
  - ContextVars method/path/request_id para los logs del request y de la sesión.
  - Métricas HTTP. En /process-stream la latencia medida llega hasta el
    envío de headers; la sesión completa se mide en el caso de uso.

BodyLimitMiddleware
  - Los textos viajan en el body JSON: se corta en MAX_BODY_BYTES,
    por Content-Length o contando bytes si el body llega chunked.
  - 413 application/problem+json, igual que el resto de los errores.

Colaboradores:
  - textproc/context.py
  - crosscutting/metrics.py, crosscutting/timing.py
  - crosscutting/error_responses.py
===============================================================================
"""

from __future__ import annotations

import uuid
from typing import Callable, Final

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..context import clear_context, set_request_context
from .config import get_settings
from .error_responses import PROBLEM_JSON_MEDIA_TYPE, ErrorCode, ErrorDetail
from .logger import logger
from .metrics import record_request_metrics
from .timing import Timer

_MAX_REQUEST_ID_LEN: Final[int] = 128
_UNLOGGED_PATHS: Final[frozenset[str]] = frozenset({"/healthz", "/metrics"})


def _incoming_request_id(raw: str | None) -> str:
    candidate = (raw or "").strip()
    if candidate and len(candidate) <= _MAX_REQUEST_ID_LEN and candidate.isprintable():
        return candidate
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _incoming_request_id(request.headers.get("x-request-id"))
        request.state.request_id = request_id
        set_request_context(request_id=request_id, method=request.method, path=request.url.path)

        timer = Timer().start()
        status_code = 500
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request falló", extra={"latency_ms": timer.elapsed_ms})
            raise
        else:
            status_code = response.status_code
            response.headers["X-Request-Id"] = request_id
            return response
        finally:
            timer.stop()
            record_request_metrics(
                endpoint=request.url.path,
                method=request.method,
                status_code=status_code,
                latency_seconds=timer.elapsed_seconds,
            )
            if request.url.path not in _UNLOGGED_PATHS:
                logger.info(
                    "request completado",
                    extra={"status_code": status_code, "latency_ms": timer.elapsed_ms},
                )
            clear_context()


class _BodyTooLarge(Exception):
    def __init__(self, received: int) -> None:
        super().__init__(received)
        self.received = received


class BodyLimitMiddleware:
    """Middleware ASGI puro (no bufferiza el body)."""

    def __init__(self, app: ASGIApp, max_body_bytes: int | None = None) -> None:
        self.app = app
        self.max_body_bytes = (
            get_settings().max_body_bytes if max_body_bytes is None else max_body_bytes
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_body_bytes:
            logger.warning(
                "payload demasiado grande (content-length)",
                extra={"content_length": int(declared), "max_bytes": self.max_body_bytes},
            )
            await self._reject(scope, receive, send, request)
            return

        received = 0
        response_started = False

        async def counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body") or b"")
                if received > self.max_body_bytes:
                    raise _BodyTooLarge(received)
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            response_started = response_started or message["type"] == "http.response.start"
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except _BodyTooLarge as exc:
            if response_started:
                raise
            logger.warning(
                "payload demasiado grande (chunked)",
                extra={"received_bytes": exc.received, "max_bytes": self.max_body_bytes},
            )
            await self._reject(scope, receive, send, request)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, request: Request) -> None:
        request_id = _incoming_request_id(request.headers.get("x-request-id"))
        problem = ErrorDetail(
            type="about:blank/payload_too_large",
            title=ErrorCode.PAYLOAD_TOO_LARGE.title,
            status=413,
            detail=f"Request body demasiado grande. Máximo permitido: {self.max_body_bytes} bytes",
            code=ErrorCode.PAYLOAD_TOO_LARGE,
            instance=request.url.path,
            errors=[{"request_id": request_id}],
        )
        response = JSONResponse(
            status_code=413,
            content=problem.model_dump(mode="json", exclude_none=True),
            media_type=PROBLEM_JSON_MEDIA_TYPE,
            headers={"X-Request-Id": request_id},
        )
        await response(scope, receive, send)
