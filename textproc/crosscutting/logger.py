# textproc/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request / sesión
===============================================================================

Objetivo
--------
Una línea JSON por evento de log, correlacionable por request_id / session_id.

Reglas propias de este servicio
-------------------------------
- Los textos de usuario pueden pesar megas: ningún string de `extra`
  pasa de _MAX_FIELD_CHARS.
- Las claves que "huelen" a credencial (api key del provider, tokens) se
  reemplazan por un marcador.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Colaboradores:
  - textproc/context.py (ContextVars)
  - crosscutting/config.py (LOG_LEVEL / LOG_JSON)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Final

from pydantic import ValidationError

# Atributos propios de LogRecord: todo lo demás en __dict__ vino por `extra=`.
_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.makeLogRecord({}))
) | {"message", "asctime", "taskName"}

_SECRET_MARKERS: Final[tuple[str, ...]] = (
    "api_key",
    "apikey",
    "secret",
    "password",
    "token",
    "authorization",
)

_MAX_FIELD_CHARS: Final[int] = 2_000
_MAX_DEPTH: Final[int] = 4


def _is_secret(key: str) -> bool:
    lowered = key.lower()
    # "max_input_tokens" / "max_tokens" son configuración, no credenciales.
    if lowered.endswith("tokens"):
        return False
    return any(marker in lowered for marker in _SECRET_MARKERS)


def scrub(value: Any, key: str = "", depth: int = 0) -> Any:
    """Versión serializable y acotada de `value` para el payload del log."""
    if key and _is_secret(key):
        return "***REDACTADO***"
    if depth > _MAX_DEPTH:
        return "***TRUNCADO***"

    if isinstance(value, str):
        if len(value) > _MAX_FIELD_CHARS:
            return f"{value[:_MAX_FIELD_CHARS]}…(+{len(value) - _MAX_FIELD_CHARS} chars)"
        return value
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes {len(value)}B>"
    if isinstance(value, dict):
        return {str(k): scrub(v, str(k), depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [scrub(v, key, depth + 1) for v in value]
    return str(value)


class JSONFormatter(logging.Formatter):
    """LogRecord -> JSON (contexto + extra + excepción)."""

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
            **get_context_dict(),
        }

        entry.update(
            (name, scrub(value, name))
            for name, value in record.__dict__.items()
            if name not in _RECORD_ATTRS
        )

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "stacktrace": traceback.format_exception(exc_type, exc, tb),
            }

        return json.dumps(entry, ensure_ascii=False, default=str, separators=(",", ":"))


def _resolve_format() -> tuple[str, bool]:
    # Settings inválidos no deben impedir loguear el error que los reporta.
    try:
        from .config import get_settings

        settings = get_settings()
    except (ValidationError, ValueError):
        return "INFO", True
    return (settings.log_level or "INFO").upper(), settings.log_json


def setup_logger(name: str = "textproc") -> logging.Logger:
    """
    Configura el logger raíz del paquete (idempotente).

    Los loggers `textproc.*` creados con getLogger(__name__) propagan a este.
    """
    level, use_json = _resolve_format()

    log = logging.getLogger(name)
    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if use_json:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(levelname)s %(name)s %(message)s"))
        log.addHandler(handler)

    return log


logger = setup_logger()
