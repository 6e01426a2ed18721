"""
===============================================================================
CRC CARD — infrastructure/text/models.py
===============================================================================

Modelos:
  BoundaryTier, CutCandidate, CutResult (transitorios de la segmentación)

Responsabilidades:
  - Representar la "calidad" de un punto de corte (tier) como entero ordenable.
  - Representar el resultado de la búsqueda de corte (semántico o forzado).

Colaboradores:
  - infrastructure/text/boundary.py
  - infrastructure/text/segmenter.py
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class BoundaryTier(IntEnum):
    """Prioridad del corte: mayor es mejor."""

    SPACE = 0
    LINE_BREAK = 1
    CLAUSE = 2  # ? / !
    PARAGRAPH = 3
    SENTENCE_END = 4


@dataclass(frozen=True)
class CutCandidate:
    """Posición del marcador (no del corte) + tier. No se persiste."""

    position: int
    tier: BoundaryTier

    @property
    def cut_offset(self) -> int:
        # El corte queda después del primer carácter del marcador.
        return self.position + 1


@dataclass(frozen=True)
class CutResult:
    """
    Offset de corte (exclusivo) y cómo se obtuvo.

    tier=None significa corte forzado en el borde de la ventana.
    """

    offset: int
    tier: Optional[BoundaryTier] = None

    @property
    def forced(self) -> bool:
        return self.tier is None
