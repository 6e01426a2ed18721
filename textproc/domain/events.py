"""
===============================================================================
TARJETA CRC — domain/events.py
===============================================================================

Módulo:
    Protocolo de eventos de procesamiento (tagged union)

Responsabilidades:
    - Un tipo por clase de evento, cada uno con SOLO sus campos:
        * ProgressEvent       -> "progress"
        * ChunkCompleteEvent  -> "chunk_complete"
        * ErrorEvent          -> "error"
        * CompleteEvent       -> "complete"
    - Serializar al payload de transporte (claves camelCase, estables).

Colaboradores:
    - application/usecases/process_text.py (emite)
    - crosscutting/streaming.py (codifica SSE)

Notas:
    - sequence es monotónico por sesión (viaja como `id:` en SSE, no en el payload).
    - ErrorEvent sin chunk_index = error fatal de sesión; con chunk_index = recuperable.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union


@dataclass(frozen=True)
class ProgressEvent:
    event: ClassVar[str] = "progress"

    message: str
    total_chunks: int
    current_chunk: int
    percentage: Optional[int] = None
    sequence: int = 0

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "message": self.message,
            "totalChunks": self.total_chunks,
            "currentChunk": self.current_chunk,
        }
        if self.percentage is not None:
            payload["percentage"] = self.percentage
        return payload


@dataclass(frozen=True)
class ChunkCompleteEvent:
    event: ClassVar[str] = "chunk_complete"

    chunk_index: int
    result: str
    partial_result: str
    sequence: int = 0

    def to_payload(self) -> dict[str, Any]:
        return {
            "chunkIndex": self.chunk_index,
            "result": self.result,
            "partialResult": self.partial_result,
        }


@dataclass(frozen=True)
class ErrorEvent:
    event: ClassVar[str] = "error"

    message: str
    chunk_index: Optional[int] = None
    sequence: int = 0

    @property
    def recoverable(self) -> bool:
        return self.chunk_index is not None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message}
        if self.chunk_index is not None:
            payload["chunkIndex"] = self.chunk_index
        return payload


@dataclass(frozen=True)
class CompleteEvent:
    event: ClassVar[str] = "complete"

    result: str
    total_chunks: int
    message: str
    failed_chunks: tuple[int, ...] = field(default_factory=tuple)
    sequence: int = 0

    def to_payload(self) -> dict[str, Any]:
        return {
            "result": self.result,
            "totalChunks": self.total_chunks,
            "message": self.message,
            "failedChunks": list(self.failed_chunks),
        }


ProcessingEvent = Union[ProgressEvent, ChunkCompleteEvent, ErrorEvent, CompleteEvent]
