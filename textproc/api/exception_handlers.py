"""
===============================================================================
TARJETA CRC — textproc/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones del procesador a respuestas HTTP RFC7807.
  - Loguear con request_id + error_id.
  - No filtrar detalles internos en producción.

Mapeo:
  - OperationValidationError -> 422 VALIDATION_ERROR
  - TransformerError         -> 502 TRANSFORMER_ERROR
  - TextProcessorError       -> 500 INTERNAL_ERROR
  - Exception                -> 500 INTERNAL_ERROR (genérico)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import (
    OperationValidationError,
    TextProcessorError,
    TransformerError,
)
from ..crosscutting.logger import logger


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_processor_error(
    request: Request,
    *,
    exc: TextProcessorError,
    code: ErrorCode,
    status_code: int,
) -> JSONResponse:
    request_id = _request_id_from(request)
    log = logger.warning if status_code < 500 else logger.error
    log(
        "Error del procesador",
        extra={
            "code": code.value,
            "error_code": exc.error_code,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "request_id": request_id,
        },
    )

    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=exc.message,
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def operation_validation_error_handler(
    request: Request, exc: OperationValidationError
) -> JSONResponse:
    return await _handle_processor_error(
        request, exc=exc, code=ErrorCode.VALIDATION_ERROR, status_code=422
    )


async def transformer_error_handler(
    request: Request, exc: TransformerError
) -> JSONResponse:
    return await _handle_processor_error(
        request, exc=exc, code=ErrorCode.TRANSFORMER_ERROR, status_code=502
    )


async def processor_error_handler(
    request: Request, exc: TextProcessorError
) -> JSONResponse:
    return await _handle_processor_error(
        request, exc=exc, code=ErrorCode.INTERNAL_ERROR, status_code=500
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": _request_id_from(request), "error": str(exc)},
    )
    detail = "Error interno." if get_settings().is_production() else str(exc)
    app_exc = AppHTTPException(
        status_code=500, code=ErrorCode.INTERNAL_ERROR, detail=detail
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """Más específicos primero; Exception al final como fallback."""
    app.add_exception_handler(OperationValidationError, operation_validation_error_handler)
    app.add_exception_handler(TransformerError, transformer_error_handler)
    app.add_exception_handler(TextProcessorError, processor_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
