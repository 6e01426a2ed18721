# textproc/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Errores HTTP como Problem Details (RFC 7807)
===============================================================================

Todas las respuestas de error del servicio (422 de validación, 413 de payload,
502 del provider, 500) comparten el mismo cuerpo application/problem+json:

    {type, title, status, detail, code, instance, errors?}

- `code` es estable: los clientes deciden por código, no por texto.
- `errors[]` lleva detalles de campo y el request_id para correlación.

Colaboradores:
  - crosscutting/middleware.py (413)
  - api/exception_handlers.py (mapea TextProcessorError)
  - interfaces/api/http/router.py (OpenAPI)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    TRANSFORMER_ERROR = "TRANSFORMER_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def title(self) -> str:
        return self.value.replace("_", " ").title()


class ErrorDetail(BaseModel):
    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: Optional[str] = None
    errors: Optional[list[dict[str, Any]]] = None


_PROBLEM_CONTENT = {
    PROBLEM_JSON_MEDIA_TYPE: {"schema": {"$ref": "#/components/schemas/ErrorDetail"}}
}

OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {"description": description, "model": ErrorDetail, "content": _PROBLEM_CONTENT}
    for status, description in (
        ("413", "Payload Too Large (RFC7807)"),
        ("422", "Validation Error (RFC7807)"),
        ("502", "Transformer Error (RFC7807)"),
        ("default", "Error (RFC7807)"),
    )
}


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode estable y detalles opcionales."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


def validation_error(
    detail: str, errors: Optional[list[dict[str, Any]]] = None
) -> AppHTTPException:
    return AppHTTPException(422, ErrorCode.VALIDATION_ERROR, detail, errors)


def problem_detail(
    request: Request,
    *,
    status: int,
    code: ErrorCode,
    detail: str,
    errors: Optional[list[dict[str, Any]]] = None,
) -> ErrorDetail:
    """ErrorDetail para `request`; agrega el request_id (si hay) a errors[]."""
    collected = list(errors or [])
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        collected.append({"request_id": request_id})

    return ErrorDetail(
        type=f"about:blank/{code.value.lower()}",
        title=code.title,
        status=status,
        detail=detail,
        code=code,
        instance=request.url.path,
        errors=collected or None,
    )


def problem_response(error: ErrorDetail, headers: Optional[dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=error.status,
        content=error.model_dump(mode="json", exclude_none=True),
        headers=headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


async def app_exception_handler(request: Request, exc: AppHTTPException) -> JSONResponse:
    error = problem_detail(
        request,
        status=exc.status_code,
        code=exc.code,
        detail=str(exc.detail),
        errors=exc.errors,
    )
    return problem_response(error, headers=exc.headers)
