"""
===============================================================================
CRC CARD — infrastructure/text/boundary.py
===============================================================================

Clase:
  BoundaryScorer

Responsabilidades:
  - Encontrar el mejor punto de corte hacia atrás desde `target`, sin pasarlo.
  - Evaluar por tiers fijos: fin de oración > párrafo > ?/! > salto de línea > espacio.
  - Aceptar solo candidatos en o después de `minimum` (evita chunks patológicamente cortos).
  - Si no hay candidato aceptable: corte forzado exacto en `target`.

Colaboradores:
  - infrastructure/text/models.py (BoundaryTier, CutCandidate, CutResult)
  - infrastructure/text/segmenter.py (ventana deslizante)

Decisiones:
  - Dentro de un tier gana el candidato más cercano al borde de la ventana.
  - Empates entre tiers se resuelven solo por prioridad, nunca arbitrariamente.
===============================================================================
"""

from __future__ import annotations

from typing import Final, Mapping, Sequence

from .models import BoundaryTier, CutCandidate, CutResult

# Marcadores por tier, en orden de prioridad (mejor a peor).
DEFAULT_TIER_MARKERS: Final[Mapping[BoundaryTier, Sequence[str]]] = {
    BoundaryTier.SENTENCE_END: (". ", ".\n"),
    BoundaryTier.PARAGRAPH: ("\n\n",),
    BoundaryTier.CLAUSE: ("?", "!"),
    BoundaryTier.LINE_BREAK: ("\n",),
    BoundaryTier.SPACE: (" ",),
}


class BoundaryScorer:
    """
    Ranking de puntos de corte dentro de una ventana.

    Uso:
      scorer.find_best_cut(text, target=window_end, minimum=window_start + 75%)
    """

    def __init__(
        self, tier_markers: Mapping[BoundaryTier, Sequence[str]] = DEFAULT_TIER_MARKERS
    ) -> None:
        if not tier_markers:
            raise ValueError("tier_markers no puede estar vacío.")
        self._tiers = sorted(tier_markers.items(), key=lambda kv: kv[0], reverse=True)

    def candidates(self, text: str, target: int, minimum: int) -> list[CutCandidate]:
        """
        Mejor candidato admisible por tier, ordenados por prioridad.

        Un marcador en `pos` es admisible si minimum <= pos < target
        (el marcador puede continuar después de target: ". " con el punto en target-1).
        """
        target = min(target, len(text))
        minimum = max(0, minimum)
        if minimum >= target:
            # No hay texto dentro de la ventana: no se puede cortar.
            return []

        found: list[CutCandidate] = []
        for tier, markers in self._tiers:
            best = -1
            for marker in markers:
                end = min(len(text), target - 1 + len(marker))
                pos = text.rfind(marker, minimum, end)
                if pos > best:
                    best = pos
            if best != -1:
                found.append(CutCandidate(position=best, tier=tier))
        return found

    def find_best_cut(self, text: str, target: int, minimum: int) -> CutResult:
        """
        Devuelve el offset de corte (exclusivo).

        - target >= len(text): no hace falta cortar, devuelve len(text).
        - Primer candidato por tier (ya es el más cercano a target dentro del tier).
        - Sin candidatos: corte forzado en target.
        """
        if target >= len(text):
            return CutResult(offset=len(text))

        found = self.candidates(text, target, minimum)
        if found:
            best = found[0]
            return CutResult(offset=best.cut_offset, tier=best.tier)

        return CutResult(offset=target)
