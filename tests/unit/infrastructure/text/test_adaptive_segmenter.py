"""
Name: Adaptive Segmenter Unit Tests

Responsibilities:
  - Trivial / structural / paragraph / windowed strategy selection
  - Size bound, reconstruction and forward-progress properties
  - Reference scenarios (repeated sentences, markdown chapters, empty input)

Notes:
  - Pure unit tests (no external dependencies)
"""

import random

import pytest

from textproc.domain.entities import ChunkBudget, SegmentStrategy
from textproc.infrastructure.text.segmenter import (
    AdaptiveSegmenter,
    segment_fragments,
    segment_text,
)

DEFAULT_BUDGET = ChunkBudget(max_size=12000, overlap=50)


def _squash(text: str) -> str:
    return "".join(text.split())


def _chapter(number: int, paragraphs: int = 23) -> str:
    paragraph = ("Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 10).strip()
    body = "\n\n".join([paragraph] * paragraphs)
    return f"## Chapter {number}\n\n{body}"


def _random_text(seed: int, words: int) -> str:
    rng = random.Random(seed)
    vocabulary = ["lorem", "ipsum", "dolor", "sit", "amet", "río", "árbol", "casa"]
    parts: list[str] = []
    for _ in range(words):
        parts.append(rng.choice(vocabulary))
        roll = rng.random()
        if roll < 0.08:
            parts.append(". ")
        elif roll < 0.1:
            parts.append("\n\n")
        elif roll < 0.12:
            parts.append("?\n")
        else:
            parts.append(" ")
    return "".join(parts)


@pytest.fixture
def segmenter() -> AdaptiveSegmenter:
    return AdaptiveSegmenter()


@pytest.mark.unit
class TestTrivialPath:
    def test_short_text_is_returned_unchanged(self, segmenter):
        text = "  Hola mundo.  "

        strategy, pieces = segmenter.split(text, DEFAULT_BUDGET)

        assert strategy is SegmentStrategy.TRIVIAL
        assert pieces == [text]

    def test_text_exactly_at_max_size(self):
        text = "X" * 100

        assert segment_text(text, ChunkBudget(max_size=100, overlap=10)) == [text]

    def test_empty_input_yields_single_empty_segment(self):
        fragments = segment_fragments("")

        assert len(fragments) == 1
        assert fragments[0].content == ""
        assert fragments[0].index == 1


@pytest.mark.unit
class TestReferenceScenarios:
    def test_repeated_sentences_fall_through_to_windowed(self, segmenter):
        text = "Hello world. " * 2000

        strategy, pieces = segmenter.split(text, DEFAULT_BUDGET)

        assert strategy is SegmentStrategy.WINDOWED
        assert len(pieces) == 3
        for piece in pieces:
            assert len(piece) <= 12000
            assert piece.endswith("Hello world.")

    def test_markdown_chapters_select_structural_split(self, segmenter):
        text = "\n\n".join(_chapter(i) for i in (1, 2, 3))
        assert 38000 < len(text) < 42000

        strategy, pieces = segmenter.split(text, DEFAULT_BUDGET)

        assert strategy is SegmentStrategy.STRUCTURAL
        assert all(len(p) <= 12000 for p in pieces)
        # Ningún fragmento cruza el límite entre capítulos.
        assert all(p.count("## Chapter") <= 1 for p in pieces)
        headed = [p for p in pieces if p.startswith("## Chapter")]
        assert [p.split("\n", 1)[0] for p in headed] == [
            "## Chapter 1",
            "## Chapter 2",
            "## Chapter 3",
        ]
        assert all(
            p.startswith("## Chapter") for p in pieces if "## Chapter" in p
        )

    def test_small_chapters_are_packed_together(self, segmenter):
        text = "\n\n".join(_chapter(i, paragraphs=2) for i in range(1, 9))
        budget = ChunkBudget(max_size=3000, overlap=50)

        strategy, pieces = segmenter.split(text, budget)

        assert strategy is SegmentStrategy.STRUCTURAL
        assert len(pieces) < 8
        assert all(len(p) <= 3000 for p in pieces)
        assert _squash("".join(pieces)) == _squash(text)


@pytest.mark.unit
class TestStrategySelection:
    def test_headers_with_trivial_sections_do_not_count(self, segmenter):
        """R: Only one section is substantial, so the paragraph strategy is used."""
        text = "## A\nshort\n## B\nshort\n" + ("para " * 100 + "\n\n") * 5

        strategy, pieces = segmenter.split(text, ChunkBudget(max_size=1000, overlap=50))

        assert strategy is SegmentStrategy.PARAGRAPH
        assert all(len(p) <= 1000 for p in pieces)

    def test_paragraphs_are_packed_greedily(self, segmenter):
        paragraph = ("Word " * 50).strip()
        text = "\n\n".join([paragraph] * 10)

        strategy, pieces = segmenter.split(text, ChunkBudget(max_size=1000, overlap=50))

        assert strategy is SegmentStrategy.PARAGRAPH
        assert len(pieces) == 4
        assert pieces[0] == "\n\n".join([paragraph] * 3)

    def test_oversized_paragraph_is_windowed_in_place(self, segmenter):
        small = "Intro paragraph."
        huge = "Sentence number one. " * 100
        text = f"{small}\n\n{huge}\n\nOutro paragraph."

        strategy, pieces = segmenter.split(text, ChunkBudget(max_size=500, overlap=20))

        assert strategy is SegmentStrategy.PARAGRAPH
        assert pieces[0] == small
        assert pieces[-1] == "Outro paragraph."
        assert all(len(p) <= 500 for p in pieces)

    def test_no_structure_no_paragraphs_goes_windowed(self, segmenter):
        text = "palabra " * 300

        strategy, _ = segmenter.split(text, ChunkBudget(max_size=500, overlap=20))

        assert strategy is SegmentStrategy.WINDOWED


@pytest.mark.unit
class TestProperties:
    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    @pytest.mark.parametrize("max_size,overlap", [(200, 20), (777, 50), (1500, 0)])
    def test_every_segment_respects_max_size(self, segmenter, seed, max_size, overlap):
        text = _random_text(seed, words=1500)
        budget = ChunkBudget(max_size=max_size, overlap=overlap)

        pieces = segmenter.split(text, budget)[1]

        assert pieces
        assert all(len(p) <= max_size for p in pieces)
        assert all(p == p.strip() for p in pieces)

    def test_pathological_single_sentence_is_still_bounded(self, segmenter):
        """
        R: A single 'sentence' with no boundary of any tier is cut at the window
        edge, so even this unsplittable unit produces segments <= max_size.
        """
        text = "a" * 30000

        strategy, pieces = segmenter.split(text, DEFAULT_BUDGET)

        assert strategy is SegmentStrategy.WINDOWED
        assert all(len(p) <= 12000 for p in pieces)
        assert sum(len(p) for p in pieces) >= len(text)

    def test_paragraph_split_reconstructs_source(self, segmenter):
        paragraphs = [f"Paragraph {i}. " + "content " * (20 + i * 7) for i in range(15)]
        text = "\n\n".join(paragraphs)

        strategy, pieces = segmenter.split(text, ChunkBudget(max_size=1200, overlap=30))

        assert strategy is SegmentStrategy.PARAGRAPH
        assert _squash("\n\n".join(pieces)) == _squash(text)

    @pytest.mark.parametrize(
        "text,budget",
        [
            ("x" * 500, ChunkBudget(max_size=100, overlap=99)),
            ("ab " * 200, ChunkBudget(max_size=1, overlap=0)),
            ("ab. cd " * 100, ChunkBudget(max_size=10, overlap=9)),
            ("Hello world. " * 500, ChunkBudget(max_size=1200, overlap=50)),
        ],
    )
    def test_windows_make_forward_progress(self, segmenter, text, budget):
        windows = list(segmenter.windows(text, budget))

        starts = [start for start, _ in windows]
        assert all(b > a for a, b in zip(starts, starts[1:]))
        assert all(end - start <= budget.max_size for start, end in windows)
        assert windows[-1][1] == len(text)

    def test_window_reaching_end_is_the_last_one(self, segmenter):
        """R: A tail shorter than the advance is not emitted again inside the last window."""
        windows = list(segmenter.windows("a" * 23500, DEFAULT_BUDGET))

        assert windows == [(0, 12000), (11950, 23500)]

    def test_no_redundant_tail_segment(self, segmenter):
        text = "Hello world. " * 1805

        strategy, pieces = segmenter.split(text, DEFAULT_BUDGET)
        windows = list(segmenter.windows(text, DEFAULT_BUDGET))

        assert strategy is SegmentStrategy.WINDOWED
        assert len(pieces) == 2
        ends = [end for _, end in windows]
        assert all(b > a for a, b in zip(ends, ends[1:]))
        assert ends[-1] == len(text)

    def test_overlap_is_bounded_by_cut(self, segmenter):
        text = "Hello world. " * 2000

        windows = list(segmenter.windows(text, DEFAULT_BUDGET))

        for (_, prev_end), (next_start, _) in zip(windows, windows[1:]):
            assert prev_end - 50 <= next_start <= prev_end

    def test_segmentation_is_deterministic(self, segmenter):
        text = _random_text(42, words=3000)
        budget = ChunkBudget(max_size=900, overlap=40)

        assert segmenter.split(text, budget) == segmenter.split(text, budget)


@pytest.mark.unit
class TestSegmentFragments:
    def test_indices_are_one_based_and_strategy_is_tagged(self):
        text = "Hello world. " * 2000

        fragments = segment_fragments(text, DEFAULT_BUDGET)

        assert [f.index for f in fragments] == list(range(1, len(fragments) + 1))
        assert {f.strategy for f in fragments} == {SegmentStrategy.WINDOWED}
        assert all(len(f) == len(f.content) for f in fragments)

    def test_whitespace_only_long_text(self):
        assert segment_text(" " * 50, ChunkBudget(max_size=10, overlap=2)) == [""]
