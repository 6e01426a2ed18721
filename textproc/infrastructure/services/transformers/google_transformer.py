"""
Name: Google Gemini Text Transformer (Adapter)

Qué hace
--------
Implementación de `domain.services.TextTransformer` usando Google GenAI (Gemini).
  - Arma system instruction + prompt por operación (infrastructure.prompts).
  - Mapea hints de modelo heredados (gpt-4, gemini-pro, ...) a modelos Gemini.
  - Reintenta errores transitorios con backoff + jitter (tenacity).
  - Respuesta vacía => TransformerError (no se reintenta).

CRC
---
Class: GoogleTextTransformer
Responsibilities:
  - Transformar UN fragmento por llamada (sin estado entre llamadas)
  - Loguear fallas del provider con contexto mínimo (modelo, tamaño)
Collaborators:
  - google.genai.Client (SDK externo)
  - retry.create_retry_decorator
  - prompts.build_prompt / system_message
"""

from __future__ import annotations

from typing import Final, Mapping

from google import genai
from google.genai import types

from ....crosscutting.exceptions import TransformerError
from ....crosscutting.logger import logger
from ....domain.entities import Operation, TransformOptions
from ...prompts import build_prompt, system_message
from ..retry import create_retry_decorator

# Hints aceptados en `options.model` (compatibilidad con clientes existentes).
MODEL_ALIASES: Final[Mapping[str, str]] = {
    "gpt-3.5-turbo": "gemini-2.5-flash",
    "gpt-4": "gemini-2.5-pro",
    "gpt-4-turbo": "gemini-2.5-pro",
    "gemini-pro": "gemini-2.5-flash",
    "gemini-1.5-pro": "gemini-2.5-pro",
    "gemini-1.5-flash": "gemini-2.5-flash",
    "gemini-2.5-flash": "gemini-2.5-flash",
    "gemini-2.5-pro": "gemini-2.5-pro",
}


class GoogleTextTransformer:
    """Adapter Gemini para transcripción/traducción de fragmentos."""

    DEFAULT_MODEL_ID = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: genai.Client | None = None,
        model_id: str | None = None,
        retry_decorator=None,
    ) -> None:
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("GoogleTextTransformer: GOOGLE_API_KEY not configured")
            raise TransformerError("GOOGLE_API_KEY not configured")

        self._client = client or genai.Client(api_key=resolved_key)
        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()

        decorator = retry_decorator or create_retry_decorator()
        self._generate_content = decorator(self._client.models.generate_content)

        logger.info(
            "GoogleTextTransformer initialized", extra={"model_id": self._model_id}
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    def resolve_model(self, hint: str | None) -> str:
        """Hint conocido -> modelo Gemini; hint desconocido o vacío -> default."""
        if not hint:
            return self._model_id
        return MODEL_ALIASES.get(hint.strip().lower(), self._model_id)

    def transform(
        self, text: str, operation: Operation, options: TransformOptions
    ) -> str:
        model = self.resolve_model(options.model_hint)
        config = types.GenerateContentConfig(
            system_instruction=system_message(operation),
            temperature=options.temperature,
            max_output_tokens=options.max_output_tokens,
        )

        try:
            response = self._generate_content(
                model=model,
                contents=build_prompt(text, operation),
                config=config,
            )
        except Exception as exc:
            logger.error(
                "GoogleTextTransformer: generation failed",
                exc_info=True,
                extra={
                    "model_id": model,
                    "operation": operation.kind.value,
                    "input_chars": len(text),
                    "error_type": type(exc).__name__,
                },
            )
            raise TransformerError(f"Error de Google Gemini: {exc}", original_error=exc) from exc

        result = (getattr(response, "text", "") or "").strip()
        if not result:
            raise TransformerError("Respuesta vacía de Google Gemini")

        logger.info(
            "GoogleTextTransformer: fragment transformed",
            extra={"model_id": model, "input_chars": len(text), "output_chars": len(result)},
        )
        return result
