"""
Name: Local LLM Text Transformer (Ollama-compatible, httpx)

Contrato HTTP
-------------
POST {endpoint}/api/generate
  {"model", "prompt", "stream": false, "options": {"temperature", "num_predict"}}
=> {"response": "..."}

El mensaje de sistema va como prefijo del prompt (la API /generate no lo separa).
El modelo es siempre LOCAL_LLM_MODEL; `options.model_hint` se ignora.
"""

from __future__ import annotations

import httpx

from ....crosscutting.exceptions import TransformerError
from ....crosscutting.logger import logger
from ....domain.entities import Operation, TransformOptions
from ...prompts import build_prompt, system_message
from ..retry import create_retry_decorator


class LocalLLMTransformer:
    def __init__(
        self,
        endpoint: str,
        model: str,
        *,
        timeout_seconds: float = 120.0,
        client: httpx.Client | None = None,
        retry_decorator=None,
    ) -> None:
        if not (endpoint or "").strip():
            raise TransformerError("LOCAL_LLM_ENDPOINT not configured")

        self._url = endpoint.rstrip("/") + "/api/generate"
        self._model = model
        self._client = client or httpx.Client(timeout=timeout_seconds)

        decorator = retry_decorator or create_retry_decorator()
        self._post = decorator(self._post_generate)

        logger.info(
            "LocalLLMTransformer initialized",
            extra={"endpoint": self._url, "model_id": self._model},
        )

    @property
    def model_id(self) -> str:
        return self._model

    def _post_generate(self, payload: dict) -> dict:
        response = self._client.post(self._url, json=payload)
        response.raise_for_status()
        return response.json()

    def transform(
        self, text: str, operation: Operation, options: TransformOptions
    ) -> str:
        payload = {
            "model": self._model,
            "prompt": f"{system_message(operation)}\n\n{build_prompt(text, operation)}",
            "stream": False,
            "options": {
                "temperature": options.temperature,
                "num_predict": options.max_output_tokens,
            },
        }

        try:
            data = self._post(payload)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(
                "LocalLLMTransformer: request failed",
                exc_info=True,
                extra={"endpoint": self._url, "error_type": type(exc).__name__},
            )
            raise TransformerError(f"Error del LLM local: {exc}", original_error=exc) from exc

        result = str(data.get("response") or "").strip() if isinstance(data, dict) else ""
        if not result:
            raise TransformerError("Respuesta vacía del LLM local")
        return result

    def close(self) -> None:
        self._client.close()
