# textproc/crosscutting/streaming.py
"""
===============================================================================
MÓDULO: Event Channel SSE (Server-Sent Events) para sesiones de procesamiento
===============================================================================

Objetivo
--------
- Codificar cada evento del caso de uso como frame SSE:
      event: <kind>
      id: <sequence>
      data: <json>
- Consumir el generador síncrono del caso de uso sin bloquear el event loop.
- Cliente desconectado => cancelación cooperativa de la sesión.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  stream_processing()

Responsabilidades:
  - Formatear eventos SSE (orden y secuencia preservados)
  - Traducir fallas inesperadas a un evento "error" final

Colaboradores:
  - application/usecases/process_text.py
  - domain/events.py
===============================================================================
"""

from __future__ import annotations

import json
from typing import Any, AsyncGenerator

from fastapi import Request
from fastapi.responses import StreamingResponse
from starlette.concurrency import iterate_in_threadpool

from ..application.usecases.process_text import ProcessTextInput, ProcessTextUseCase
from ..domain.entities import CancellationToken
from ..domain.events import ProcessingEvent
from .config import get_settings
from .logger import logger

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def stream_processing(
    use_case: ProcessTextUseCase,
    input_data: ProcessTextInput,
    request: Request,
) -> StreamingResponse:
    return StreamingResponse(
        _generate_sse(use_case, input_data, request),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


async def _generate_sse(
    use_case: ProcessTextUseCase,
    input_data: ProcessTextInput,
    request: Request,
) -> AsyncGenerator[str, None]:
    token = CancellationToken()
    events = use_case.execute(input_data, cancellation=token)
    last_sequence = 0

    try:
        async for event in iterate_in_threadpool(events):
            last_sequence = event.sequence
            yield sse_event(event)

            if await request.is_disconnected():
                logger.info("SSE: cliente desconectado", extra={"sequence": last_sequence})
                token.cancel()
                events.close()
                return

    except Exception as exc:
        logger.error("SSE stream error", exc_info=True, extra={"error": str(exc)})
        detail = "error inesperado" if get_settings().is_production() else str(exc)
        yield sse_frame(
            "error",
            {"message": f"Error interno del servidor: {detail}"},
            sequence=last_sequence + 1,
        )
    finally:
        # Si la tarea se cancela a mitad de una llamada al transformador,
        # la sesión lo observa al volver y no emite más eventos.
        token.cancel()


def sse_event(event: ProcessingEvent) -> str:
    return sse_frame(event.event, event.to_payload(), sequence=event.sequence)


def sse_frame(kind: str, data: dict[str, Any], *, sequence: int | None = None) -> str:
    # SSE: cada frame termina con doble newline
    lines = [f"event: {kind}"]
    if sequence is not None:
        lines.append(f"id: {sequence}")
    lines.append(f"data: {json.dumps(data, ensure_ascii=False)}")
    return "\n".join(lines) + "\n\n"
