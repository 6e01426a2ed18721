"""
Name: OpenAI / Azure OpenAI Text Transformer (Adapter)

Qué hace
--------
Implementación de `domain.services.TextTransformer` sobre Chat Completions.
  - Mensajes: system (por operación) + user (prompt con el fragmento).
  - Hints de modelo: solo se respetan nombres de la familia OpenAI
    (gpt-*, o1*, ...); cualquier otro hint usa el modelo por defecto.
  - Azure: el modelo es siempre el deployment configurado.
  - Los reintentos los hace tenacity; el cliente del SDK va con max_retries=0.

CRC
---
Class: OpenAITextTransformer / AzureOpenAITextTransformer
Responsibilities:
  - Transformar UN fragmento por llamada
  - Envolver errores del SDK en TransformerError
Collaborators:
  - openai.OpenAI / openai.AzureOpenAI (SDK externo)
  - retry.create_retry_decorator
  - prompts.build_prompt / system_message
"""

from __future__ import annotations

from typing import Final

import openai

from ....crosscutting.exceptions import TransformerError
from ....crosscutting.logger import logger
from ....domain.entities import Operation, TransformOptions
from ...prompts import build_prompt, system_message
from ..retry import create_retry_decorator

_OPENAI_MODEL_PREFIXES: Final[tuple[str, ...]] = ("gpt-", "chatgpt-", "o1", "o3", "o4")


class OpenAITextTransformer:
    """Adapter Chat Completions (OpenAI)."""

    DEFAULT_MODEL_ID = "gpt-4o-mini"
    PROVIDER_LABEL = "OpenAI"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: openai.OpenAI | None = None,
        model_id: str | None = None,
        timeout_seconds: float = 120.0,
        retry_decorator=None,
    ) -> None:
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error(f"{type(self).__name__}: API key not configured")
            raise TransformerError(f"{self.PROVIDER_LABEL} API key not configured")

        self._client = client or self._build_client(resolved_key, timeout_seconds)
        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()

        decorator = retry_decorator or create_retry_decorator()
        self._create = decorator(self._client.chat.completions.create)

        logger.info(
            f"{type(self).__name__} initialized", extra={"model_id": self._model_id}
        )

    def _build_client(self, api_key: str, timeout_seconds: float) -> openai.OpenAI:
        return openai.OpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0)

    @property
    def model_id(self) -> str:
        return self._model_id

    def resolve_model(self, hint: str | None) -> str:
        candidate = (hint or "").strip().lower()
        if candidate.startswith(_OPENAI_MODEL_PREFIXES):
            return candidate
        return self._model_id

    def transform(
        self, text: str, operation: Operation, options: TransformOptions
    ) -> str:
        model = self.resolve_model(options.model_hint)

        try:
            response = self._create(
                model=model,
                messages=[
                    {"role": "system", "content": system_message(operation)},
                    {"role": "user", "content": build_prompt(text, operation)},
                ],
                max_tokens=options.max_output_tokens,
                temperature=options.temperature,
            )
        except openai.OpenAIError as exc:
            logger.error(
                f"{type(self).__name__}: completion failed",
                exc_info=True,
                extra={
                    "model_id": model,
                    "operation": operation.kind.value,
                    "input_chars": len(text),
                    "error_type": type(exc).__name__,
                },
            )
            raise TransformerError(
                f"Error de {self.PROVIDER_LABEL}: {exc}", original_error=exc
            ) from exc

        choices = getattr(response, "choices", None) or []
        result = (choices[0].message.content or "").strip() if choices else ""
        if not result:
            raise TransformerError(f"No se recibió respuesta de {self.PROVIDER_LABEL}")
        return result

    def close(self) -> None:
        self._client.close()


class AzureOpenAITextTransformer(OpenAITextTransformer):
    """Mismo contrato que OpenAI; el deployment fija el modelo."""

    DEFAULT_MODEL_ID = "gpt-35-turbo"
    PROVIDER_LABEL = "Azure OpenAI"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        endpoint: str | None = None,
        deployment: str | None = None,
        api_version: str = "2024-02-15-preview",
        client: openai.AzureOpenAI | None = None,
        timeout_seconds: float = 120.0,
        retry_decorator=None,
    ) -> None:
        if client is None and not (endpoint or "").strip():
            raise TransformerError("AZURE_OPENAI_ENDPOINT not configured")
        self._endpoint = (endpoint or "").strip()
        self._api_version = api_version
        super().__init__(
            api_key,
            client=client,
            model_id=deployment,
            timeout_seconds=timeout_seconds,
            retry_decorator=retry_decorator,
        )

    def _build_client(self, api_key: str, timeout_seconds: float) -> openai.AzureOpenAI:
        return openai.AzureOpenAI(
            api_key=api_key,
            azure_endpoint=self._endpoint,
            api_version=self._api_version,
            timeout=timeout_seconds,
            max_retries=0,
        )

    def resolve_model(self, hint: str | None) -> str:
        return self._model_id
