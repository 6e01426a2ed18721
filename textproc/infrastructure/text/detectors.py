"""
===============================================================================
CRC CARD — infrastructure/text/detectors.py
===============================================================================

Componente:
  Detectores de límites estructurales (Strategy)

Responsabilidades:
  - Encontrar offsets de inicio de sección (headers markdown, capítulos
    numerados, líneas en MAYÚSCULAS, separadores, "Capítulo N").
  - Partir el texto en esos offsets conservando el header con su sección.

Colaboradores:
  - infrastructure/text/segmenter.py (los prueba en orden, gana el primero)

Notas:
  - Un detector es cualquier objeto con `name` y `detect(text) -> list[int]`.
  - Agregar un detector nuevo = agregar una entrada a DEFAULT_SECTION_DETECTORS.
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Protocol, Sequence


class BoundaryDetector(Protocol):
    name: str

    def detect(self, text: str) -> list[int]: ...


@dataclass(frozen=True)
class RegexSectionDetector:
    """Detector basado en regex multilínea: cada match marca el inicio de una sección."""

    name: str
    pattern: re.Pattern[str]

    def detect(self, text: str) -> list[int]:
        # Offset 0 no es un corte: el primer trozo ya empieza ahí.
        return sorted({m.start() for m in self.pattern.finditer(text) if m.start() > 0})


def split_at(text: str, cuts: Sequence[int]) -> list[str]:
    """Parte `text` en los offsets dados (ordenados, sin incluir 0 ni len)."""
    pieces: list[str] = []
    prev = 0
    for cut in cuts:
        if prev < cut < len(text):
            pieces.append(text[prev:cut])
            prev = cut
    pieces.append(text[prev:])
    return pieces


_UPPER = "A-ZÁÉÍÓÚÑÜ"

DEFAULT_SECTION_DETECTORS: Final[tuple[RegexSectionDetector, ...]] = (
    RegexSectionDetector("markdown_header", re.compile(r"^#{1,6}[ \t]+\S.*$", re.MULTILINE)),
    RegexSectionDetector(
        "numbered_chapter", re.compile(r"^\d+\.\s+[A-Z][^.\n]{10,}", re.MULTILINE)
    ),
    RegexSectionDetector(
        "uppercase_title", re.compile(rf"^[{_UPPER}][{_UPPER} \t]{{10,}}$", re.MULTILINE)
    ),
    RegexSectionDetector("separator", re.compile(r"^(?:-{5,}|={5,})\s*$", re.MULTILINE)),
    RegexSectionDetector(
        "named_chapter",
        re.compile(
            r"^(?:Chapter|Cap[ií]tulo|Section|Secci[oó]n|Part|Parte)\s+\d+",
            re.MULTILINE | re.IGNORECASE,
        ),
    ),
)
