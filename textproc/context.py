"""
===============================================================================
TARJETA CRC — textproc/context.py (Contexto por request / sesión)
===============================================================================

Responsabilidades:
  - Guardar request_id / method / path / session_id en ContextVars.
  - Que cualquier log emitido durante una sesión de procesamiento salga
    correlacionado sin pasar ids por parámetro.

Colaboradores:
  - crosscutting/middleware.py: set_request_context() / clear_context().
  - application/usecases/process_text.py: set_session_context().
  - crosscutting/logger.py: get_context_dict().

Notas:
  - Las sesiones SSE corren el generador en el threadpool; starlette copia el
    contexto al thread, por eso el session_id queda visible en esos logs.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
session_id_var: ContextVar[str] = ContextVar("session_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

# Clave en el log -> variable.
_LOG_FIELDS: Final[tuple[tuple[str, ContextVar[str]], ...]] = (
    ("request_id", request_id_var),
    ("session_id", session_id_var),
    ("method", http_method_var),
    ("path", http_path_var),
)


def set_request_context(*, request_id: str = "", method: str = "", path: str = "") -> None:
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def set_session_context(session_id: str = "") -> None:
    session_id_var.set(session_id or "")


def get_context_dict() -> dict[str, str]:
    """Contexto actual, sin claves vacías."""
    return {name: value for name, var in _LOG_FIELDS if (value := var.get())}


def clear_context() -> None:
    for _, var in _LOG_FIELDS:
        var.set("")
