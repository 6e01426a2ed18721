# textproc/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del procesador (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message "humana" (sin filtrar secretos)

Taxonomía
---------
- OperationValidationError: operación inválida / falta idioma destino (fatal).
- TransformerError: falla del transformador externo (provider, red, respuesta vacía).
- SegmentTransformError: falla de UN fragmento (recuperable a nivel sesión).
- ChannelWriteError: no se pudo entregar un evento al consumidor (termina la sesión).

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  TextProcessorError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP o a eventos
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - application/usecases/process_text.py (mapea a eventos de error)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class TextProcessorError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      TextProcessorError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "TEXT_PROCESSOR_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class OperationValidationError(TextProcessorError):
    """Operación no soportada o parámetros faltantes (ej: idioma destino)."""

    error_code: str = "VALIDATION_ERROR"


class TransformerError(TextProcessorError):
    """Errores del transformador externo (provider / red / respuesta inválida)."""

    error_code: str = "TRANSFORMER_ERROR"


class SegmentTransformError(TextProcessorError):
    """Falla al transformar un fragmento puntual (chunk_index es 1-based)."""

    error_code: str = "SEGMENT_TRANSFORM_ERROR"

    def __init__(
        self,
        chunk_index: int,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.chunk_index = chunk_index
        super().__init__(message, error_id=error_id, original_error=original_error)


class ChannelWriteError(TextProcessorError):
    """El consumidor de eventos falló (ej: cliente desconectado)."""

    error_code: str = "CHANNEL_WRITE_ERROR"
