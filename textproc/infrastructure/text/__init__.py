"""Utilidades de texto (segmentación)."""

from .boundary import BoundaryScorer
from .detectors import DEFAULT_SECTION_DETECTORS, RegexSectionDetector
from .models import BoundaryTier, CutCandidate, CutResult
from .segmenter import AdaptiveSegmenter, segment_fragments, segment_text
from .tokens import TokenLimitedSegmenter, enforce_token_limit, estimate_tokens

__all__ = [
    "segment_text",
    "segment_fragments",
    "AdaptiveSegmenter",
    "BoundaryScorer",
    "BoundaryTier",
    "CutCandidate",
    "CutResult",
    "DEFAULT_SECTION_DETECTORS",
    "RegexSectionDetector",
    "estimate_tokens",
    "enforce_token_limit",
    "TokenLimitedSegmenter",
]
