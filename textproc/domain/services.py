"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios (Protocols)

Responsabilidades:
    - Definir contratos para el transformador externo, el segmentador y el
      canal de eventos.
    - Mantener el dominio independiente de SDKs y transportes.

Colaboradores:
    - infrastructure/services/transformers/*: implementaciones del transformador.
    - infrastructure/text/segmenter.py: implementación del segmentador.
    - application/usecases: consumen estos puertos.

Reglas:
    - SOLO interfaces: nada de implementación.
===============================================================================
"""

from __future__ import annotations

from typing import Protocol

from .entities import ChunkBudget, Operation, Segment, TransformOptions
from .events import ProcessingEvent


class TextTransformer(Protocol):
    """
    Contrato del transformador (transcripción / traducción).

    Falla con TransformerError (o cualquier excepción) si el provider no está
    configurado, hay error de red o la respuesta es vacía/inválida.
    """

    def transform(
        self, text: str, operation: Operation, options: TransformOptions
    ) -> str: ...


class TextSegmenter(Protocol):
    """Contrato para partir texto en fragmentos acotados (función pura)."""

    def segment(self, text: str, budget: ChunkBudget) -> list[Segment]: ...


class EventSink(Protocol):
    """Canal push: recibe cada evento en orden. Si falla, la sesión termina."""

    def __call__(self, event: ProcessingEvent) -> None: ...
