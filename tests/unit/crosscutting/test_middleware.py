"""
Name: HTTP Middleware Unit Tests

Responsibilities:
  - BodyLimitMiddleware rejects oversized bodies with RFC 7807 413
  - RequestContextMiddleware propagates / generates X-Request-Id
"""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from textproc.crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware


def _app(max_body_bytes: int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(BodyLimitMiddleware, max_body_bytes=max_body_bytes)
    app.add_middleware(RequestContextMiddleware)

    @app.post("/echo")
    async def echo(request: Request):
        body = await request.body()
        return {"size": len(body), "request_id": request.state.request_id}

    return app


@pytest.mark.unit
class TestBodyLimitMiddleware:
    def test_small_body_passes(self):
        client = TestClient(_app(max_body_bytes=64))

        response = client.post("/echo", content=b"x" * 10)

        assert response.status_code == 200
        assert response.json()["size"] == 10

    def test_oversized_body_is_rejected(self):
        client = TestClient(_app(max_body_bytes=64))

        response = client.post("/echo", content=b"x" * 500)

        assert response.status_code == 413
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["code"] == "PAYLOAD_TOO_LARGE"
        assert body["status"] == 413
        assert "64 bytes" in body["detail"]


@pytest.mark.unit
class TestRequestContextMiddleware:
    def test_incoming_request_id_is_echoed(self):
        client = TestClient(_app(max_body_bytes=1024))

        response = client.post("/echo", content=b"{}", headers={"X-Request-Id": "req-123"})

        assert response.headers["X-Request-Id"] == "req-123"
        assert response.json()["request_id"] == "req-123"

    def test_request_id_is_generated_when_missing(self):
        client = TestClient(_app(max_body_bytes=1024))

        response = client.post("/echo", content=b"{}")

        assert len(response.headers["X-Request-Id"]) == 36
