"""
Name: Anthropic Claude Text Transformer (Adapter)

Messages API: `system` separado del mensaje de usuario; la respuesta llega como
lista de bloques y se concatenan los bloques de texto.
Hints de modelo: solo claude-*; el resto usa el modelo configurado.
"""

from __future__ import annotations

import anthropic

from ....crosscutting.exceptions import TransformerError
from ....crosscutting.logger import logger
from ....domain.entities import Operation, TransformOptions
from ...prompts import build_prompt, system_message
from ..retry import create_retry_decorator


class AnthropicTextTransformer:
    DEFAULT_MODEL_ID = "claude-haiku-4-5"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: anthropic.Anthropic | None = None,
        model_id: str | None = None,
        timeout_seconds: float = 120.0,
        retry_decorator=None,
    ) -> None:
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("AnthropicTextTransformer: ANTHROPIC_API_KEY not configured")
            raise TransformerError("ANTHROPIC_API_KEY not configured")

        self._client = client or anthropic.Anthropic(
            api_key=resolved_key, timeout=timeout_seconds, max_retries=0
        )
        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()

        decorator = retry_decorator or create_retry_decorator()
        self._create = decorator(self._client.messages.create)

        logger.info(
            "AnthropicTextTransformer initialized", extra={"model_id": self._model_id}
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    def resolve_model(self, hint: str | None) -> str:
        candidate = (hint or "").strip().lower()
        return candidate if candidate.startswith("claude-") else self._model_id

    def transform(
        self, text: str, operation: Operation, options: TransformOptions
    ) -> str:
        model = self.resolve_model(options.model_hint)

        try:
            response = self._create(
                model=model,
                max_tokens=options.max_output_tokens,
                temperature=options.temperature,
                system=system_message(operation),
                messages=[{"role": "user", "content": build_prompt(text, operation)}],
            )
        except anthropic.AnthropicError as exc:
            logger.error(
                "AnthropicTextTransformer: message failed",
                exc_info=True,
                extra={
                    "model_id": model,
                    "operation": operation.kind.value,
                    "input_chars": len(text),
                    "error_type": type(exc).__name__,
                },
            )
            raise TransformerError(f"Error de Anthropic: {exc}", original_error=exc) from exc

        blocks = getattr(response, "content", None) or []
        result = "".join(getattr(block, "text", "") or "" for block in blocks).strip()
        if not result:
            raise TransformerError("No se recibió respuesta de Anthropic")
        return result

    def close(self) -> None:
        self._client.close()
