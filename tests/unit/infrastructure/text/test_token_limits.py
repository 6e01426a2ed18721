"""
Name: Token Limit Unit Tests

Responsibilities:
  - estimate_tokens heuristic (~4 chars per token, rounded up)
  - enforce_token_limit re-splitting of oversized pieces
  - TokenLimitedSegmenter re-indexing
"""

import pytest

from textproc.domain.entities import ChunkBudget, SegmentStrategy
from textproc.infrastructure.text.segmenter import AdaptiveSegmenter
from textproc.infrastructure.text.tokens import (
    TokenLimitedSegmenter,
    enforce_token_limit,
    estimate_tokens,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "text,expected",
    [("", 0), ("abcd", 1), ("abcde", 2), ("x" * 400, 100)],
)
def test_estimate_tokens(text, expected):
    assert estimate_tokens(text) == expected


@pytest.mark.unit
class TestEnforceTokenLimit:
    def test_pieces_within_limit_are_untouched(self):
        pieces = ["uno", "dos", "tres"]

        assert enforce_token_limit(pieces, max_tokens=10) == pieces

    def test_oversized_piece_is_resplit_in_place(self):
        pieces = ["short", "Frase corta. " * 20, "tail"]

        out = enforce_token_limit(pieces, max_tokens=10)

        assert out[0] == "short"
        assert out[-1] == "tail"
        assert len(out) > 3
        assert all(estimate_tokens(p) <= 10 for p in out)

    @pytest.mark.parametrize("max_tokens", [0, -5])
    def test_non_positive_limit_rejected(self, max_tokens):
        with pytest.raises(ValueError):
            enforce_token_limit(["x"], max_tokens=max_tokens)


@pytest.mark.unit
class TestTokenLimitedSegmenter:
    def test_passthrough_when_every_segment_fits(self):
        segmenter = TokenLimitedSegmenter(AdaptiveSegmenter(), max_tokens=1000)

        segments = segmenter.segment("Hola mundo.", ChunkBudget())

        assert [s.content for s in segments] == ["Hola mundo."]

    def test_resplits_and_renumbers(self):
        """R: A trivial 1300-char segment is cut down to the token ceiling."""
        segmenter = TokenLimitedSegmenter(AdaptiveSegmenter(), max_tokens=50)

        segments = segmenter.segment("Hello world. " * 100, ChunkBudget())

        assert len(segments) > 1
        assert [s.index for s in segments] == list(range(1, len(segments) + 1))
        assert all(s.strategy is SegmentStrategy.TRIVIAL for s in segments)
        assert all(estimate_tokens(s.content) <= 50 for s in segments)

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            TokenLimitedSegmenter(AdaptiveSegmenter(), max_tokens=0)
