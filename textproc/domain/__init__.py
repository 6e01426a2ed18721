"""Dominio: entidades, eventos y puertos del procesador."""

from .entities import (
    CancellationToken,
    ChunkBudget,
    Operation,
    OperationKind,
    Segment,
    SegmentStrategy,
    TransformOptions,
)
from .events import (
    ChunkCompleteEvent,
    CompleteEvent,
    ErrorEvent,
    ProcessingEvent,
    ProgressEvent,
)
from .services import EventSink, TextSegmenter, TextTransformer

__all__ = [
    "CancellationToken",
    "ChunkBudget",
    "Operation",
    "OperationKind",
    "Segment",
    "SegmentStrategy",
    "TransformOptions",
    "ChunkCompleteEvent",
    "CompleteEvent",
    "ErrorEvent",
    "ProcessingEvent",
    "ProgressEvent",
    "EventSink",
    "TextSegmenter",
    "TextTransformer",
]
