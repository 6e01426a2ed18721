"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (body limit, request context, CORS)
  - Mount text processing routes under /api/text
  - Expose health check and metrics endpoints

Collaborators:
  - RequestContextMiddleware: request id + logging context + HTTP metrics
  - BodyLimitMiddleware: rejects oversized bodies (413)
  - interfaces.api.http.router: process-stream / process / info

Notes:
  - Settings are validated at startup (lifespan); invalid env fails fast
  - /healthz does not call the AI provider
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..container import close_transformer
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    try:
        logger.info(
            "AI Text Processor starting up",
            extra={
                "ai_provider": settings.ai_provider,
                "provider_configured": settings.is_provider_configured(),
                "max_chunk_size": settings.max_chunk_size,
                "overlap_size": settings.overlap_size,
                "max_input_tokens": settings.max_input_tokens,
            },
        )
        yield
    finally:
        close_transformer()
        logger.info("AI Text Processor shutting down")


app = FastAPI(
    title="AI Text Processor",
    version=__version__,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "text", "description": "Transcripción y traducción de textos largos"},
    ],
)

app.add_middleware(BodyLimitMiddleware)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_allowed_origins_list(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-Id", "Last-Event-ID"],
)

app.include_router(router, prefix="/api/text")

register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    settings = get_settings()
    return {
        "ok": True,
        "ai_provider": settings.ai_provider,
        "provider_configured": settings.is_provider_configured(),
        "request_id": getattr(request.state, "request_id", None),
    }


@app.get("/metrics")
def metrics():
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
