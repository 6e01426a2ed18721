"""
===============================================================================
TARJETA CRC — textproc/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer segmentador, transformador y caso de uso siguiendo DIP.
  - Traducir Settings a valores explícitos (ChunkBudget) para que el
    segmentador nunca lea configuración global.
  - Mantener singletons con lru_cache.

Colaboradores:
  - textproc.crosscutting.config.get_settings
  - textproc.infrastructure.text / services.transformers
  - textproc.application.usecases.ProcessTextUseCase

Notas:
  - Este archivo NO contiene lógica de negocio ni depende de FastAPI.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases import ProcessTextUseCase
from .crosscutting.config import get_settings
from .crosscutting.logger import logger
from .domain.entities import ChunkBudget, TransformOptions
from .domain.services import TextSegmenter, TextTransformer
from .infrastructure.services.transformers import (
    AnthropicTextTransformer,
    AzureOpenAITextTransformer,
    DemoTextTransformer,
    GoogleTextTransformer,
    HuggingFaceTextTransformer,
    LocalLLMTransformer,
    OpenAITextTransformer,
)
from .infrastructure.text import AdaptiveSegmenter, TokenLimitedSegmenter


@lru_cache(maxsize=1)
def get_default_budget() -> ChunkBudget:
    settings = get_settings()
    return ChunkBudget(max_size=settings.max_chunk_size, overlap=settings.overlap_size)


def get_default_options() -> TransformOptions:
    settings = get_settings()
    return TransformOptions(
        max_output_tokens=settings.default_max_output_tokens,
        temperature=settings.default_temperature,
    )


@lru_cache(maxsize=1)
def get_segmenter() -> TextSegmenter:
    """Segmentador adaptativo (opcionalmente acotado por tokens)."""
    segmenter = AdaptiveSegmenter()
    max_tokens = get_settings().max_input_tokens
    if max_tokens > 0:
        return TokenLimitedSegmenter(segmenter, max_tokens)
    return segmenter


@lru_cache(maxsize=1)
def get_transformer() -> TextTransformer:
    """
    Transformador según AI_PROVIDER.

    Provider sin credenciales/endpoint => modo demo (con warning), no error.
    """
    settings = get_settings()
    provider = settings.ai_provider

    if not settings.is_provider_configured():
        logger.warning(
            "AI provider not configured, using demo transformer",
            extra={"ai_provider": provider},
        )
        return DemoTextTransformer(provider)

    timeout = settings.provider_timeout_seconds
    if provider == "google":
        return GoogleTextTransformer(
            api_key=settings.google_api_key, model_id=settings.google_model
        )
    if provider == "openai":
        return OpenAITextTransformer(
            settings.openai_api_key, model_id=settings.openai_model, timeout_seconds=timeout
        )
    if provider == "anthropic":
        return AnthropicTextTransformer(
            settings.anthropic_api_key,
            model_id=settings.anthropic_model,
            timeout_seconds=timeout,
        )
    if provider == "azure":
        return AzureOpenAITextTransformer(
            settings.azure_openai_api_key,
            endpoint=settings.azure_openai_endpoint,
            deployment=settings.azure_openai_deployment,
            api_version=settings.azure_openai_api_version,
            timeout_seconds=timeout,
        )
    if provider == "huggingface":
        return HuggingFaceTextTransformer(
            settings.huggingface_api_key,
            settings.huggingface_model,
            endpoint=settings.huggingface_endpoint,
            timeout_seconds=timeout,
        )
    if provider == "local":
        return LocalLLMTransformer(
            settings.local_llm_endpoint,
            settings.local_llm_model,
            timeout_seconds=settings.local_llm_timeout_seconds,
        )
    return DemoTextTransformer(provider)


def close_transformer() -> None:
    """Cierra el cliente del transformador construido (si hay) y vacía el cache."""
    if get_transformer.cache_info().currsize == 0:
        return
    close = getattr(get_transformer(), "close", None)
    if callable(close):
        close()
    get_transformer.cache_clear()


def get_process_text_use_case() -> ProcessTextUseCase:
    return ProcessTextUseCase(
        segmenter=get_segmenter(),
        transformer=get_transformer(),
        default_budget=get_default_budget(),
    )
