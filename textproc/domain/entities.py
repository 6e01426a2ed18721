"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades y value objects del procesador de textos

Responsabilidades:
    - ChunkBudget: presupuesto explícito (max_size, overlap) de segmentación.
    - Segment: fragmento inmutable, recortado, con índice 1-based.
    - Operation / TransformOptions: qué transformación pedir y con qué parámetros.
    - CancellationToken: señal cooperativa de cancelación de una sesión.

Colaboradores:
    - infrastructure/text/segmenter.py (produce Segment)
    - application/usecases/process_text.py (consume todo)

Reglas:
    - Sin dependencias de infraestructura ni de configuración global.
===============================================================================
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_MAX_CHUNK_SIZE = 12000
DEFAULT_OVERLAP_SIZE = 50


@dataclass(frozen=True)
class ChunkBudget:
    """
    Presupuesto de segmentación (en caracteres).

    Invariante: 0 <= overlap < max_size.
    El overlap solo lo usa la estrategia de ventana deslizante.
    """

    max_size: int = DEFAULT_MAX_CHUNK_SIZE
    overlap: int = DEFAULT_OVERLAP_SIZE

    def __post_init__(self) -> None:
        if self.max_size <= 0:
            raise ValueError(f"max_size debe ser > 0. got={self.max_size}")
        if self.overlap < 0:
            raise ValueError(f"overlap debe ser >= 0. got={self.overlap}")
        if self.overlap >= self.max_size:
            raise ValueError("overlap debe ser menor a max_size.")

    def with_overrides(
        self, *, max_size: Optional[int] = None, overlap: Optional[int] = None
    ) -> "ChunkBudget":
        """Devuelve un presupuesto nuevo aplicando overrides por request."""
        return ChunkBudget(
            max_size=self.max_size if max_size is None else max_size,
            overlap=self.overlap if overlap is None else overlap,
        )


class SegmentStrategy(str, Enum):
    TRIVIAL = "trivial"
    STRUCTURAL = "structural"
    PARAGRAPH = "paragraph"
    WINDOWED = "windowed"


@dataclass(frozen=True)
class Segment:
    """
    Fragmento contiguo del texto original, sin espacios en los bordes.

    Notas:
      - index es 1-based dentro de la secuencia ordenada.
      - strategy indica qué estrategia de nivel superior lo produjo.
    """

    content: str
    index: int
    strategy: SegmentStrategy = SegmentStrategy.TRIVIAL

    def __len__(self) -> int:
        return len(self.content)


class OperationKind(str, Enum):
    TRANSCRIBE = "transcribe"
    TRANSLATE = "translate"


@dataclass(frozen=True)
class Operation:
    """Descriptor de la operación pedida al transformador."""

    kind: OperationKind
    target_language: Optional[str] = None


@dataclass(frozen=True)
class TransformOptions:
    """Parámetros de generación (best-effort según provider)."""

    max_output_tokens: int = 4000
    temperature: float = 0.3
    model_hint: Optional[str] = None


class CancellationToken:
    """
    Señal cooperativa de cancelación (thread-safe).

    El orquestador la consulta solo entre invocaciones de fragmentos.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
