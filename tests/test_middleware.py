"""
Tests for response middleware and the error envelope.
"""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from inkwell.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from inkwell.responses import ApiException, ConflictError, api_exception_handler


@pytest.fixture
def small_app():
    app = FastAPI()
    app.add_exception_handler(ApiException, api_exception_handler)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/ok")
    def ok():
        return {"ok": True}

    @app.get("/conflict")
    def conflict():
        raise ConflictError("Already decided", {"status": "APPROVED"})

    return app


class TestSecurityHeaders:

    def test_headers_present(self, small_app):
        response = TestClient(small_app).get("/ok")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "default-src 'none'" in response.headers["Content-Security-Policy"]

    def test_headers_on_errors(self, small_app):
        response = TestClient(small_app).get("/conflict")
        assert response.status_code == 409
        assert response.headers["X-Frame-Options"] == "DENY"


class TestRequestLogging:

    def test_generates_request_id(self, small_app):
        response = TestClient(small_app).get("/ok")
        assert response.headers["X-Request-ID"].startswith("req_")

    def test_echoes_incoming_request_id(self, small_app):
        response = TestClient(small_app).get("/ok", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"


class TestErrorEnvelope:

    def test_conflict_body(self, small_app):
        data = TestClient(small_app).get("/conflict").json()
        assert data["ok"] is False
        assert data["error"] == "Already decided"
        assert data["error_code"] == "CONFLICT"
        assert data["details"] == {"status": "APPROVED"}
        assert "timestamp" in data
