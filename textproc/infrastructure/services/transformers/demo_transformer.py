"""
Name: Demo Text Transformer (determinista, sin IO)

Se usa cuando el provider configurado no tiene credenciales/endpoint, y en tests.
La salida marca explícitamente que no hubo transformación real.
"""

from __future__ import annotations

from ....domain.entities import Operation, OperationKind, TransformOptions
from ...prompts import language_name

_PREVIEW_CHARS = 100


class DemoTextTransformer:
    def __init__(self, provider: str = "demo") -> None:
        self._label = provider.strip().upper() or "DEMO"

    @property
    def model_id(self) -> str:
        return "demo"

    def transform(
        self, text: str, operation: Operation, options: TransformOptions
    ) -> str:
        preview = text[:_PREVIEW_CHARS]
        if operation.kind is OperationKind.TRANSLATE:
            action = f"Texto traducido a {language_name(operation.target_language)}"
        else:
            action = "Texto transcrito y corregido"
        return f"[DEMO - {self._label}] {action}: {preview}..."
