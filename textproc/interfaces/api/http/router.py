"""
Router raíz de la API HTTP.

main.py lo monta con prefix="/api/text". Las respuestas RFC7807 se declaran
una sola vez acá para que todas las rutas las documenten en OpenAPI.
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers import process


def build_router() -> APIRouter:
    root = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    root.include_router(process.router)
    return root


router = build_router()
