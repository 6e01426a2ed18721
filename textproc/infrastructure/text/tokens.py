"""
Estimación de tokens y re-segmentación por límite de tokens.

Heurística: ~4 caracteres por token (sin tokenizer real del provider).
"""

from __future__ import annotations

import math
from typing import Final, Optional, Sequence

from ...domain.entities import DEFAULT_OVERLAP_SIZE, ChunkBudget, Segment
from .segmenter import AdaptiveSegmenter

CHARS_PER_TOKEN: Final[int] = 4

# Al re-partir se usa un ratio más conservador que el de la estimación.
_SAFE_CHARS_PER_TOKEN: Final[float] = 3.5


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def enforce_token_limit(
    pieces: Sequence[str],
    max_tokens: int,
    *,
    segmenter: Optional[AdaptiveSegmenter] = None,
) -> list[str]:
    """
    Re-parte los fragmentos cuya estimación supera `max_tokens`.

    Los que entran se devuelven tal cual y en el mismo orden.
    """
    if max_tokens <= 0:
        raise ValueError(f"max_tokens debe ser > 0. got={max_tokens}")

    segmenter = segmenter or AdaptiveSegmenter()
    char_limit = max(1, int(max_tokens * _SAFE_CHARS_PER_TOKEN))
    budget = ChunkBudget(max_size=char_limit, overlap=min(DEFAULT_OVERLAP_SIZE, char_limit - 1))

    out: list[str] = []
    for piece in pieces:
        if estimate_tokens(piece) <= max_tokens:
            out.append(piece)
            continue
        out.extend(segmenter.split(piece, budget)[1])
    return out


class TokenLimitedSegmenter:
    """
    Decorator de TextSegmenter: re-parte los fragmentos que exceden `max_tokens`.

    Los índices se renumeran (1-based) y se conserva la estrategia original.
    """

    def __init__(self, inner: AdaptiveSegmenter, max_tokens: int) -> None:
        if max_tokens <= 0:
            raise ValueError(f"max_tokens debe ser > 0. got={max_tokens}")
        self._inner = inner
        self._max_tokens = max_tokens

    def segment(self, text: str, budget: ChunkBudget) -> list[Segment]:
        segments = self._inner.segment(text, budget)
        if all(estimate_tokens(s.content) <= self._max_tokens for s in segments):
            return segments

        strategy = segments[0].strategy
        pieces = enforce_token_limit(
            [s.content for s in segments], self._max_tokens, segmenter=self._inner
        )
        return [
            Segment(content=piece, index=i, strategy=strategy)
            for i, piece in enumerate(pieces, start=1)
        ]
