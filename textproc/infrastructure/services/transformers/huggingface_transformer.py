"""
Name: Hugging Face Inference Text Transformer (httpx)

POST {endpoint}/{model}
  Authorization: Bearer <key>
  {"inputs": "<system>\n\n<prompt>",
   "parameters": {"max_new_tokens", "temperature", "return_full_text": false}}
=> [{"generated_text": "..."}]

El modelo es siempre HUGGINGFACE_MODEL; `options.model_hint` se ignora.
"""

from __future__ import annotations

import httpx

from ....crosscutting.exceptions import TransformerError
from ....crosscutting.logger import logger
from ....domain.entities import Operation, TransformOptions
from ...prompts import build_prompt, system_message
from ..retry import create_retry_decorator


class HuggingFaceTextTransformer:
    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        endpoint: str = "https://router.huggingface.co/hf-inference/models",
        timeout_seconds: float = 120.0,
        client: httpx.Client | None = None,
        retry_decorator=None,
    ) -> None:
        if not (api_key or "").strip():
            raise TransformerError("HUGGINGFACE_API_KEY not configured")
        if not (model or "").strip():
            raise TransformerError("HUGGINGFACE_MODEL not configured")

        self._model = model.strip()
        self._url = f"{endpoint.rstrip('/')}/{self._model}"
        self._client = client or httpx.Client(timeout=timeout_seconds)
        self._headers = {"Authorization": f"Bearer {api_key.strip()}"}

        decorator = retry_decorator or create_retry_decorator()
        self._post = decorator(self._post_inference)

        logger.info(
            "HuggingFaceTextTransformer initialized", extra={"model_id": self._model}
        )

    @property
    def model_id(self) -> str:
        return self._model

    def _post_inference(self, payload: dict):
        response = self._client.post(self._url, json=payload, headers=self._headers)
        response.raise_for_status()
        return response.json()

    def transform(
        self, text: str, operation: Operation, options: TransformOptions
    ) -> str:
        payload = {
            "inputs": f"{system_message(operation)}\n\n{build_prompt(text, operation)}",
            "parameters": {
                "max_new_tokens": options.max_output_tokens,
                "temperature": options.temperature,
                "return_full_text": False,
            },
        }

        try:
            data = self._post(payload)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(
                "HuggingFaceTextTransformer: request failed",
                exc_info=True,
                extra={"model_id": self._model, "error_type": type(exc).__name__},
            )
            raise TransformerError(f"Error de Hugging Face: {exc}", original_error=exc) from exc

        first = data[0] if isinstance(data, list) and data else {}
        result = str(first.get("generated_text") or "").strip() if isinstance(first, dict) else ""
        if not result:
            raise TransformerError("No se recibió respuesta de Hugging Face")
        return result

    def close(self) -> None:
        self._client.close()
