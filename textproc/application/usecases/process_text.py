# =============================================================================
# FILE: application/usecases/process_text.py
# =============================================================================
"""
===============================================================================
USE CASE: Process Text (segmentación + transformación secuencial + eventos)
===============================================================================

Name:
    Process Text Use Case (Pipeline Orchestrator)

Business Goal:
    Transcribir/corregir o traducir textos arbitrariamente largos:
      - El texto se parte en fragmentos acotados (ChunkBudget).
      - Cada fragmento se transforma en orden, de a uno.
      - El consumidor recibe progreso y resultados parciales en tiempo real.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ProcessTextUseCase

Responsibilities:
    - Validar la operación (y el idioma destino para traducción).
    - Segmentar y transformar fragmentos estrictamente en orden.
    - Aislar fallas por fragmento: un fragmento fallido NO aborta la sesión.
    - Emitir eventos tipados con secuencia monotónica.
    - Respetar la cancelación cooperativa entre fragmentos.

Collaborators:
    - TextSegmenter: segment(text, budget)
    - TextTransformer: transform(text, operation, options)
    - EventSink (opcional, modo push)

-------------------------------------------------------------------------------
STATE MACHINE
-------------------------------------------------------------------------------
    INITIALIZED -> SEGMENTING -> PROCESSING -> COMPLETED
    INITIALIZED -> FAILED                 (operación inválida)
    PROCESSING  -> CANCELLED              (token cancelado / consumidor cerró)

EVENT PROTOCOL
-------------------------------------------------------------------------------
    progress        "Texto dividido en N fragmentos"        (una vez)
    progress        "Procesando fragmento i de N" + %       (antes de cada llamada)
    chunk_complete  resultado del fragmento + acumulado     (éxito)
    error           "Error en fragmento i: ..." + chunkIndex (falla recuperable)
    complete        resultado final + failedChunks          (siempre último)

Tras observar la cancelación no se emite ningún evento más.
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Final, Generator, Iterator, Optional
from uuid import uuid4

from ...context import set_session_context
from ...crosscutting.exceptions import (
    ChannelWriteError,
    OperationValidationError,
    SegmentTransformError,
)
from ...crosscutting.metrics import (
    observe_transform_latency,
    record_segment,
    record_session,
)
from ...crosscutting.timing import Timer
from ...domain.entities import (
    CancellationToken,
    ChunkBudget,
    Operation,
    OperationKind,
    TransformOptions,
)
from ...domain.events import (
    ChunkCompleteEvent,
    CompleteEvent,
    ErrorEvent,
    ProcessingEvent,
    ProgressEvent,
)
from ...domain.services import EventSink, TextSegmenter, TextTransformer

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Messages (contrato visible para clientes existentes)
# -----------------------------------------------------------------------------
_MSG_SPLIT: Final[str] = "Texto dividido en {total} fragmentos"
_MSG_PROCESSING: Final[str] = "Procesando fragmento {index} de {total}"
_MSG_SEGMENT_ERROR: Final[str] = "Error en fragmento {index}: {error}"
_MSG_COMPLETE: Final[str] = "Procesamiento completado exitosamente"
_MSG_INVALID_OPERATION: Final[str] = "Operación no válida. Use 'transcribe' o 'translate'"
_MSG_MISSING_LANGUAGE: Final[str] = "Se requiere el idioma destino para la traducción"

# Separador entre resultados de fragmentos consecutivos.
_RESULT_SEPARATOR: Final[str] = " "


class SessionState(str, Enum):
    INITIALIZED = "initialized"
    SEGMENTING = "segmenting"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.CANCELLED, SessionState.FAILED)


@dataclass(frozen=True)
class ProcessTextInput:
    """
    Input del caso de uso.

    operation llega como string crudo: la validación es parte de la sesión.
    budget=None usa el presupuesto por defecto del caso de uso.
    """

    text: str
    operation: str
    target_language: Optional[str] = None
    budget: Optional[ChunkBudget] = None
    options: TransformOptions = field(default_factory=TransformOptions)


@dataclass
class ProcessingSession:
    """Estado de UNA ejecución. Nunca se comparte entre ejecuciones."""

    session_id: str = field(default_factory=lambda: str(uuid4()))
    state: SessionState = SessionState.INITIALIZED
    operation: Optional[Operation] = None
    total_chunks: int = 0
    current_chunk: int = 0
    results: list[str] = field(default_factory=list)
    failed_chunks: list[int] = field(default_factory=list)
    events_emitted: int = 0
    _sequence: Iterator[int] = field(default_factory=lambda: count(1), repr=False)

    @property
    def accumulated(self) -> str:
        return _RESULT_SEPARATOR.join(self.results)

    def next_sequence(self) -> int:
        self.events_emitted += 1
        return next(self._sequence)


class ProcessTextUseCase:
    """
    Orquestador del pipeline.

    Dos modos de consumo:
      - execute(): generador pull de eventos (SSE, tests).
      - run(): push a un EventSink; devuelve la sesión final.
    """

    def __init__(
        self,
        segmenter: TextSegmenter,
        transformer: TextTransformer,
        default_budget: Optional[ChunkBudget] = None,
    ) -> None:
        self._segmenter = segmenter
        self._transformer = transformer
        self._default_budget = default_budget or ChunkBudget()

    @property
    def default_budget(self) -> ChunkBudget:
        return self._default_budget

    @staticmethod
    def validate(operation: str, target_language: Optional[str] = None) -> Operation:
        """Operación soportada + idioma destino si es traducción."""
        try:
            kind = OperationKind((operation or "").strip().lower())
        except ValueError:
            raise OperationValidationError(_MSG_INVALID_OPERATION) from None

        language = (target_language or "").strip() or None
        if kind is OperationKind.TRANSLATE and language is None:
            raise OperationValidationError(_MSG_MISSING_LANGUAGE)

        return Operation(kind=kind, target_language=language)

    # -------------------------------------------------------------------------
    # Pull mode
    # -------------------------------------------------------------------------
    def execute(
        self,
        input_data: ProcessTextInput,
        cancellation: Optional[CancellationToken] = None,
        session: Optional[ProcessingSession] = None,
    ) -> Generator[ProcessingEvent, None, ProcessingSession]:
        """
        Genera los eventos de una sesión, en orden.

        Cerrar el generador (GeneratorExit) equivale a cancelar la sesión.
        """
        session = session or ProcessingSession()
        token = cancellation or CancellationToken()
        set_session_context(session.session_id)

        try:
            try:
                operation = self.validate(input_data.operation, input_data.target_language)
            except OperationValidationError as exc:
                session.state = SessionState.FAILED
                record_session("invalid", "failed")
                logger.warning(
                    "Process text rejected",
                    extra={"session_id": session.session_id, "error": exc.message},
                )
                yield ErrorEvent(message=exc.message, sequence=session.next_sequence())
                return session

            session.operation = operation
            session.state = SessionState.SEGMENTING
            budget = input_data.budget or self._default_budget
            segments = self._segmenter.segment(input_data.text, budget)
            total = len(segments)
            session.total_chunks = total

            logger.info(
                "Process text started",
                extra={
                    "session_id": session.session_id,
                    "operation": operation.kind.value,
                    "target_language": operation.target_language,
                    "text_chars": len(input_data.text),
                    "total_chunks": total,
                    "strategy": segments[0].strategy.value if segments else None,
                    "max_chunk_size": budget.max_size,
                },
            )

            session.state = SessionState.PROCESSING
            yield ProgressEvent(
                message=_MSG_SPLIT.format(total=total),
                total_chunks=total,
                current_chunk=0,
                sequence=session.next_sequence(),
            )

            for segment in segments:
                if token.cancelled:
                    return self._cancel(session)

                index = segment.index
                session.current_chunk = index
                yield ProgressEvent(
                    message=_MSG_PROCESSING.format(index=index, total=total),
                    total_chunks=total,
                    current_chunk=index,
                    percentage=_percentage(index, total),
                    sequence=session.next_sequence(),
                )
                if token.cancelled:
                    return self._cancel(session)

                timer = Timer().start()
                try:
                    result = self._transformer.transform(
                        segment.content, operation, input_data.options
                    )
                except Exception as exc:
                    timer.stop()
                    if token.cancelled:
                        return self._cancel(session)

                    error = SegmentTransformError(
                        index,
                        _MSG_SEGMENT_ERROR.format(index=index, error=exc),
                        original_error=exc,
                    )
                    session.failed_chunks.append(index)
                    record_segment(operation.kind.value, "error")
                    logger.error(
                        "Segment transform failed",
                        exc_info=True,
                        extra={
                            "session_id": session.session_id,
                            "chunk_index": index,
                            "total_chunks": total,
                            "error_id": error.error_id,
                            "error_type": type(exc).__name__,
                            "latency_ms": timer.elapsed_ms,
                        },
                    )
                    yield ErrorEvent(
                        message=error.message,
                        chunk_index=index,
                        sequence=session.next_sequence(),
                    )
                    continue

                timer.stop()
                observe_transform_latency(operation.kind.value, timer.elapsed_seconds)

                # Resultado en vuelo tras cancelar: se descarta.
                if token.cancelled:
                    return self._cancel(session)

                session.results.append(result)
                record_segment(operation.kind.value, "ok")
                logger.debug(
                    "Segment transformed",
                    extra={"chunk_index": index, "latency_ms": timer.elapsed_ms},
                )
                yield ChunkCompleteEvent(
                    chunk_index=index,
                    result=result,
                    partial_result=session.accumulated,
                    sequence=session.next_sequence(),
                )

            session.state = SessionState.COMPLETED
            record_session(operation.kind.value, "completed")
            logger.info(
                "Process text completed",
                extra={
                    "session_id": session.session_id,
                    "total_chunks": total,
                    "failed_chunks": list(session.failed_chunks),
                    "result_chars": len(session.accumulated),
                },
            )
            yield CompleteEvent(
                result=session.accumulated,
                total_chunks=total,
                message=_MSG_COMPLETE,
                failed_chunks=tuple(session.failed_chunks),
                sequence=session.next_sequence(),
            )
            return session

        except GeneratorExit:
            if not session.state.terminal:
                self._cancel(session)
            raise
        except Exception:
            if not session.state.terminal:
                session.state = SessionState.FAILED
                record_session(_operation_label(session), "failed")
            raise

    # -------------------------------------------------------------------------
    # Push mode
    # -------------------------------------------------------------------------
    def run(
        self,
        input_data: ProcessTextInput,
        sink: EventSink,
        cancellation: Optional[CancellationToken] = None,
    ) -> ProcessingSession:
        """
        Entrega cada evento al sink, en orden, y devuelve la sesión final.

        Si el sink falla: se cancela la sesión y se lanza ChannelWriteError.
        """
        session = ProcessingSession()
        token = cancellation or CancellationToken()
        events = self.execute(input_data, cancellation=token, session=session)

        try:
            for event in events:
                try:
                    sink(event)
                except Exception as exc:
                    token.cancel()
                    raise ChannelWriteError(
                        f"No se pudo entregar el evento '{event.event}'",
                        original_error=exc,
                    ) from exc
        finally:
            events.close()

        return session

    def _cancel(self, session: ProcessingSession) -> ProcessingSession:
        session.state = SessionState.CANCELLED
        record_session(_operation_label(session), "cancelled")
        logger.info(
            "Process text cancelled",
            extra={
                "session_id": session.session_id,
                "current_chunk": session.current_chunk,
                "total_chunks": session.total_chunks,
            },
        )
        return session


def _percentage(index: int, total: int) -> int:
    """round(index / total * 100), half-up."""
    return (index * 200 + total) // (2 * total)


def _operation_label(session: ProcessingSession) -> str:
    return session.operation.kind.value if session.operation else "unknown"
