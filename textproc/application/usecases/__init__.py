"""
Use Cases Layer

    from textproc.application.usecases import ProcessTextUseCase, ProcessTextInput
"""

from .process_text import (
    ProcessingSession,
    ProcessTextInput,
    ProcessTextUseCase,
    SessionState,
)

__all__ = [
    "ProcessingSession",
    "ProcessTextInput",
    "ProcessTextUseCase",
    "SessionState",
]
