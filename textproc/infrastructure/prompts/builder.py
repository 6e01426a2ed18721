"""
Name: Prompt Builder (transcripción / traducción)

Qué es
------
Construye el mensaje de sistema y el prompt de usuario para cada operación.
Los textos están en español: el servicio opera sobre contenido en español y
el idioma destino se nombra en español ("Traduce ... al francés").

Colaboradores
-------------
  - domain.entities.Operation / OperationKind
  - infrastructure/services/transformers/* (consumen system + prompt)
"""

from __future__ import annotations

from typing import Final, Mapping

from ...domain.entities import Operation, OperationKind

LANGUAGE_NAMES: Final[Mapping[str, str]] = {
    "es": "español",
    "en": "inglés",
    "fr": "francés",
    "de": "alemán",
    "it": "italiano",
    "pt": "portugués",
    "ru": "ruso",
    "ja": "japonés",
    "ko": "coreano",
    "zh": "chino",
    "ar": "árabe",
    "hi": "hindi",
    "th": "tailandés",
    "vi": "vietnamita",
}

_SYSTEM_MESSAGES: Final[Mapping[OperationKind, str]] = {
    OperationKind.TRANSCRIBE: (
        "Eres un experto en transcripción y corrección de textos. Tu trabajo es "
        "mejorar la ortografía, puntuación y formato manteniendo el significado original."
    ),
    OperationKind.TRANSLATE: (
        "Eres un traductor profesional experto. Tu trabajo es proporcionar traducciones "
        "precisas y naturales manteniendo el contexto y estilo del texto original."
    ),
}

_TRANSCRIBE_TEMPLATE: Final[str] = (
    "Por favor, transcribe y mejora la ortografía y puntuación del siguiente texto, "
    "manteniendo su significado original. Conserva el formato y estructura del texto:"
    "\n\n{text}"
)

_TRANSLATE_TEMPLATE: Final[str] = (
    "Traduce el siguiente texto al {language}. Mantén el formato, estructura y estilo "
    "del texto original. Proporciona una traducción natural y fluida:\n\n{text}"
)


def language_name(code: str | None) -> str:
    """Nombre en español del idioma; códigos desconocidos se usan tal cual."""
    if not code:
        return ""
    return LANGUAGE_NAMES.get(code.strip().lower(), code.strip())


def system_message(operation: Operation) -> str:
    return _SYSTEM_MESSAGES[operation.kind]


def build_prompt(text: str, operation: Operation) -> str:
    if operation.kind is OperationKind.TRANSLATE:
        return _TRANSLATE_TEMPLATE.format(
            language=language_name(operation.target_language), text=text
        )
    return _TRANSCRIBE_TEMPLATE.format(text=text)
