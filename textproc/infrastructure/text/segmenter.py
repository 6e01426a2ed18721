"""
===============================================================================
CRC CARD — infrastructure/text/segmenter.py
===============================================================================

Componente:
  Segmentación adaptativa de texto (Strategy chain)

Responsabilidades:
  - Partir texto arbitrariamente largo en fragmentos <= max_size, en orden.
  - Elegir la estrategia de mayor nivel que funcione:
      1) trivial      -> el texto entra entero
      2) structural   -> secciones detectadas (headers, capítulos, separadores)
      3) paragraph    -> bloques separados por líneas en blanco
      4) windowed     -> ventana deslizante con cortes semánticos + overlap
  - Exponer:
      * segment_text(...) -> list[str]
      * segment_fragments(...) -> list[Segment]
      * AdaptiveSegmenter (servicio)

Colaboradores:
  - infrastructure/text/detectors.py (detectores estructurales)
  - infrastructure/text/boundary.py (BoundaryScorer)
  - domain/entities.py (ChunkBudget, Segment, SegmentStrategy)

Invariantes:
  - Todo fragmento (salvo el caso trivial) tiene len <= max_size.
  - La ventana deslizante siempre avanza (no hay loops infinitos).
  - Función pura: misma entrada -> misma salida.
===============================================================================
"""

from __future__ import annotations

import re
from typing import Final, Iterator, Optional, Sequence

from ...domain.entities import ChunkBudget, Segment, SegmentStrategy
from .boundary import BoundaryScorer
from .detectors import DEFAULT_SECTION_DETECTORS, BoundaryDetector, split_at

_PARAGRAPH_BREAK: Final[re.Pattern[str]] = re.compile(r"\n\s*\n")

# Una sección "cuenta" para el detector solo si supera este largo (trim).
_MIN_SECTION_CHARS: Final[int] = 100

# El corte semántico no puede caer antes del 75% de la ventana.
_MIN_FILL_RATIO: Final[float] = 0.75

# La ventana siguiente arranca al menos al 95% de la anterior.
_MIN_ADVANCE_RATIO: Final[float] = 0.95


class AdaptiveSegmenter:
    """
    Implementación de TextSegmenter.

    Parámetros:
      - detectors: detectores estructurales, probados en orden.
      - scorer: ranking de cortes para la ventana deslizante.
    """

    def __init__(
        self,
        detectors: Sequence[BoundaryDetector] = DEFAULT_SECTION_DETECTORS,
        scorer: Optional[BoundaryScorer] = None,
    ) -> None:
        self._detectors = tuple(detectors)
        self._scorer = scorer or BoundaryScorer()

    # -------------------------------------------------------------------------
    # API pública
    # -------------------------------------------------------------------------
    def segment(self, text: str, budget: ChunkBudget) -> list[Segment]:
        strategy, pieces = self.split(text, budget)
        return [
            Segment(content=piece, index=i, strategy=strategy)
            for i, piece in enumerate(pieces, start=1)
        ]

    def split(self, text: str, budget: ChunkBudget) -> tuple[SegmentStrategy, list[str]]:
        """Devuelve la estrategia ganadora y los fragmentos (strings)."""
        if len(text) <= budget.max_size:
            return SegmentStrategy.TRIVIAL, [text]

        structured = self._structural(text, budget)
        if structured is not None:
            return SegmentStrategy.STRUCTURAL, structured

        paragraphs = _PARAGRAPH_BREAK.split(text)
        if len(paragraphs) > 1:
            packed = self._pack(paragraphs, budget, "\n\n")
            return SegmentStrategy.PARAGRAPH, packed or [text.strip()]

        return SegmentStrategy.WINDOWED, self.windowed(text, budget)

    def windowed(self, text: str, budget: ChunkBudget) -> list[str]:
        """Ventana deslizante: cada fragmento recortado; nunca vacío."""
        chunks = [
            piece
            for piece in (text[start:end].strip() for start, end in self.windows(text, budget))
            if piece
        ]
        return chunks or [text.strip()]

    def windows(self, text: str, budget: ChunkBudget) -> Iterator[tuple[int, int]]:
        """
        Genera (start, end) de cada ventana sobre `text`.

        - end <= start + max_size
        - el próximo start avanza siempre (overlap acotado)
        - la ventana que llega al final del texto es la última
        """
        n = len(text)
        min_fill = int(budget.max_size * _MIN_FILL_RATIO)
        min_advance = int(budget.max_size * _MIN_ADVANCE_RATIO)

        start = 0
        while start < n:
            window_end = min(start + budget.max_size, n)
            end = window_end
            if window_end < n:
                end = self._scorer.find_best_cut(text, window_end, start + min_fill).offset

            yield start, end
            if end >= n:
                return

            next_start = max(end - budget.overlap, start + min_advance)
            if next_start >= end or next_start <= start:
                next_start = end
            start = next_start

    # -------------------------------------------------------------------------
    # Estrategias internas
    # -------------------------------------------------------------------------
    def _structural(self, text: str, budget: ChunkBudget) -> Optional[list[str]]:
        for detector in self._detectors:
            pieces = split_at(text, detector.detect(text))
            substantial = sum(1 for p in pieces if len(p.strip()) > _MIN_SECTION_CHARS)
            if len(pieces) < 2 or substantial < 2:
                continue

            # Gana el primer detector con estructura real; si no respeta el
            # presupuesto, se cae a párrafos (no se prueba el siguiente).
            packed = self._pack(pieces, budget, "\n")
            if len(packed) > 1 and all(len(c) <= budget.max_size for c in packed):
                return packed
            return None
        return None

    def _pack(self, pieces: Sequence[str], budget: ChunkBudget, separator: str) -> list[str]:
        """
        Acumula piezas consecutivas mientras entren en max_size.

        Una pieza que sola excede el presupuesto se parte con la ventana deslizante.
        """
        chunks: list[str] = []
        current = ""
        for piece in pieces:
            trimmed = piece.strip()
            if not trimmed:
                continue

            candidate = f"{current}{separator}{trimmed}" if current else trimmed
            if len(candidate) <= budget.max_size:
                current = candidate
                continue

            if current:
                chunks.append(current)

            if len(trimmed) > budget.max_size:
                chunks.extend(self.windowed(trimmed, budget))
                current = ""
            else:
                current = trimmed

        if current:
            chunks.append(current)
        return chunks


_DEFAULT_SEGMENTER: Final[AdaptiveSegmenter] = AdaptiveSegmenter()


def segment_text(text: str, budget: Optional[ChunkBudget] = None) -> list[str]:
    """API simple (strings)."""
    return _DEFAULT_SEGMENTER.split(text, budget or ChunkBudget())[1]


def segment_fragments(text: str, budget: Optional[ChunkBudget] = None) -> list[Segment]:
    """API rica: Segment con índice 1-based y estrategia usada."""
    return _DEFAULT_SEGMENTER.segment(text, budget or ChunkBudget())
