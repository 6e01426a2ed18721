"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas Prometheus del procesador

Responsabilidades:
    - Definir contadores/histogramas en un registry propio.
    - Proveer helpers pequeños para registrar requests, sesiones y fragmentos.
    - Cuidar cardinalidad: labels acotados (operation, outcome, status bucket).
    - Generar la respuesta de /metrics.

Colaboradores:
    - crosscutting.middleware: latencia y conteo HTTP.
    - application/usecases/process_text.py: sesiones, fragmentos, latencia del transformador.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

_requests_total = Counter(
    "textproc_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "textproc_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 15.0, 60.0, 300.0),
    registry=_registry,
)

_sessions_total = Counter(
    "textproc_sessions_total",
    "Sesiones de procesamiento por resultado",
    ["operation", "outcome"],
    registry=_registry,
)

_segments_total = Counter(
    "textproc_segments_total",
    "Fragmentos procesados por resultado",
    ["operation", "outcome"],
    registry=_registry,
)

_transform_latency = Histogram(
    "textproc_transform_latency_seconds",
    "Latencia del transformador por fragmento (segundos)",
    ["operation"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
    registry=_registry,
)

_UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
_NUM_RE = re.compile(r"/\d+(?=/|$)")


def _normalize_endpoint(path: str) -> str:
    path = _UUID_RE.sub("{id}", path)
    return _NUM_RE.sub("/{n}", path)


def _status_bucket(status_code: int) -> str:
    return f"{status_code // 100}xx"


def record_request_metrics(
    endpoint: str, method: str, status_code: int, latency_seconds: float
) -> None:
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=_status_bucket(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(latency_seconds)


def record_session(operation: str, outcome: str) -> None:
    """outcome: completed | failed | cancelled"""
    _sessions_total.labels(operation=operation, outcome=outcome).inc()


def record_segment(operation: str, outcome: str) -> None:
    """outcome: ok | error"""
    _segments_total.labels(operation=operation, outcome=outcome).inc()


def observe_transform_latency(operation: str, seconds: float) -> None:
    _transform_latency.labels(operation=operation).observe(seconds)


def get_metrics_response() -> tuple[bytes, str]:
    """(body, content_type) para el endpoint /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
