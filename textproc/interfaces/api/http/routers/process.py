"""
===============================================================================
TARJETA CRC — textproc/interfaces/api/http/routers/process.py
===============================================================================

Name:
    Text Processing Router

Responsibilities:
    - POST /process-stream: sesión completa como stream SSE.
    - POST /process: misma sesión, respuesta JSON agregada (sin streaming).
    - GET /info: capacidades del servicio y provider activo.
    - Validar la operación ANTES de abrir el stream (422 RFC7807).

Collaborators:
    - application.usecases.ProcessTextUseCase
    - crosscutting.streaming.stream_processing
    - schemas.process
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from textproc import __version__
from textproc.application.usecases import (
    ProcessingSession,
    ProcessTextInput,
    ProcessTextUseCase,
)
from textproc.container import get_default_options, get_process_text_use_case
from textproc.crosscutting.config import SUPPORTED_PROVIDERS, get_settings
from textproc.crosscutting.error_responses import validation_error
from textproc.crosscutting.streaming import stream_processing
from textproc.domain.entities import OperationKind
from textproc.domain.events import ErrorEvent, ProcessingEvent
from textproc.infrastructure.prompts import LANGUAGE_NAMES

from ..schemas.process import (
    InfoRes,
    ProcessTextReq,
    ProcessTextRes,
    ProviderInfoRes,
    SegmentErrorRes,
)

router = APIRouter(tags=["text"])

SERVICE_NAME = "AI Text Processor"


def _build_input(req: ProcessTextReq, use_case: ProcessTextUseCase) -> ProcessTextInput:
    """Valida operación + presupuesto y arma el input del caso de uso."""
    # OperationValidationError -> 422 vía exception handler.
    use_case.validate(req.operation, req.target_language)

    try:
        budget = req.to_budget(use_case.default_budget)
    except ValueError as exc:
        raise validation_error(
            str(exc), errors=[{"field": "options.overlapSize", "msg": str(exc)}]
        ) from exc

    return ProcessTextInput(
        text=req.text,
        operation=req.operation,
        target_language=req.target_language,
        budget=budget,
        options=req.to_options(get_default_options()),
    )


@router.post("/process-stream")
async def process_stream(
    req: ProcessTextReq,
    request: Request,
    use_case: ProcessTextUseCase = Depends(get_process_text_use_case),
):
    input_data = _build_input(req, use_case)
    return stream_processing(use_case, input_data, request)


@router.post("/process", response_model=ProcessTextRes)
def process_text(
    req: ProcessTextReq,
    use_case: ProcessTextUseCase = Depends(get_process_text_use_case),
) -> ProcessTextRes:
    input_data = _build_input(req, use_case)

    events: list[ProcessingEvent] = []
    session: ProcessingSession = use_case.run(input_data, events.append)

    errors = [
        SegmentErrorRes(message=e.message, chunk_index=e.chunk_index)
        for e in events
        if isinstance(e, ErrorEvent)
    ]
    return ProcessTextRes(
        result=session.accumulated,
        total_chunks=session.total_chunks,
        failed_chunks=list(session.failed_chunks),
        errors=errors,
        message=events[-1].message if events else "",
    )


@router.get("/info", response_model=InfoRes)
def info() -> InfoRes:
    settings = get_settings()
    return InfoRes(
        service=SERVICE_NAME,
        version=__version__,
        operations=[kind.value for kind in OperationKind],
        max_chunk_size=settings.max_chunk_size,
        ai_provider=ProviderInfoRes(
            current=settings.ai_provider,
            configured=settings.is_provider_configured(),
            default_model=settings.provider_default_model(),
        ),
        supported_providers=list(SUPPORTED_PROVIDERS),
        supported_languages=list(LANGUAGE_NAMES),
    )
