"""
===============================================================================
TARJETA CRC — schemas/process.py
===============================================================================

Módulo:
    Schemas HTTP para procesamiento de textos (transcripción / traducción)

Responsabilidades:
    - DTOs request/response con claves camelCase (contrato de clientes existentes).
    - Validar tamaños, rangos y overrides del presupuesto de segmentación.

Colaboradores:
    - crosscutting.config.get_settings (límites)
    - domain.entities (ChunkBudget, TransformOptions)
===============================================================================
"""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from textproc.crosscutting.config import get_settings
from textproc.domain.entities import ChunkBudget, TransformOptions

_settings = get_settings()


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class ProcessOptionsReq(_CamelModel):
    """Overrides por request (todos opcionales)."""

    max_chunk_size: Optional[int] = Field(default=None, ge=1, alias="maxChunkSize")
    overlap_size: Optional[int] = Field(default=None, ge=0, alias="overlapSize")
    max_tokens: Optional[int] = Field(default=None, ge=1, alias="maxTokens")
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    model: Optional[str] = Field(default=None, max_length=100)


class ProcessTextReq(_CamelModel):
    text: Annotated[str, Field(..., min_length=1, max_length=_settings.max_text_chars)]
    operation: str = Field(..., min_length=1, max_length=32)
    target_language: Optional[str] = Field(
        default=None, max_length=32, alias="targetLanguage"
    )
    options: ProcessOptionsReq = Field(default_factory=ProcessOptionsReq)

    def to_budget(self, default: ChunkBudget) -> ChunkBudget:
        """
        Aplica overrides sobre el presupuesto por defecto.

        Si solo se achica maxChunkSize, el overlap por defecto se recorta para
        respetar overlap < maxChunkSize. Un overlap explícito inválido falla.
        """
        opts = self.options
        max_size = opts.max_chunk_size or default.max_size
        overlap = opts.overlap_size
        if overlap is None:
            overlap = min(default.overlap, max_size - 1)
        return default.with_overrides(max_size=max_size, overlap=overlap)

    def to_options(self, default: TransformOptions) -> TransformOptions:
        opts = self.options
        return TransformOptions(
            max_output_tokens=opts.max_tokens or default.max_output_tokens,
            temperature=default.temperature if opts.temperature is None else opts.temperature,
            model_hint=opts.model or default.model_hint,
        )


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class SegmentErrorRes(_CamelModel):
    message: str
    chunk_index: Optional[int] = Field(default=None, alias="chunkIndex")


class ProcessTextRes(_CamelModel):
    """Respuesta del endpoint no-streaming (misma sesión, resultado agregado)."""

    result: str
    total_chunks: int = Field(alias="totalChunks")
    failed_chunks: list[int] = Field(default_factory=list, alias="failedChunks")
    errors: list[SegmentErrorRes] = Field(default_factory=list)
    message: str


class ProviderInfoRes(_CamelModel):
    current: str
    configured: bool
    default_model: str = Field(alias="defaultModel")


class InfoRes(_CamelModel):
    service: str
    version: str
    operations: list[str]
    max_chunk_size: int = Field(alias="maxChunkSize")
    ai_provider: ProviderInfoRes = Field(alias="aiProvider")
    supported_providers: list[str] = Field(alias="supportedProviders")
    supported_languages: list[str] = Field(alias="supportedLanguages")
