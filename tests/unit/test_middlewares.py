"""
Tests for the HTTP middleware stack and the uvicorn access log filter.
"""

import logging

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from relay.logging import get_log_context
from relay.middlewares.correlation_id import (
    CORRELATION_ID_HEADER,
    CorrelationIDMiddleware,
    get_correlation_id,
)
from relay.middlewares.logging_context import LoggingContextMiddleware
from relay.middlewares.prometheus import PrometheusMiddleware
from relay.uvicorn_filters import ExcludeMetricsFilter, uvicorn_log_config


@pytest.fixture
def app():
    """
    Minimal app exposing what the middlewares put into the context.

    Returns:
        FastAPI: Application with the relay middleware stack.
    """
    test_app = FastAPI()

    @test_app.get("/context")
    async def context(request: Request):
        return {
            "request_id": request.state.request_id,
            "correlation_id": get_correlation_id(),
            "log_context": get_log_context(),
        }

    @test_app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    test_app.add_middleware(PrometheusMiddleware)
    test_app.add_middleware(LoggingContextMiddleware)
    test_app.add_middleware(CorrelationIDMiddleware)
    return test_app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


class TestCorrelationIDMiddleware:
    def test_generates_short_id(self, client):
        response = client.get("/context")

        cid = response.headers[CORRELATION_ID_HEADER]
        assert len(cid) == 8
        assert response.json()["request_id"] == cid
        assert response.json()["correlation_id"] == cid

    def test_uses_incoming_header(self, client):
        response = client.get(
            "/context", headers={CORRELATION_ID_HEADER: "abcdef0123456789"}
        )

        assert response.headers[CORRELATION_ID_HEADER] == "abcdef01"
        assert response.json()["correlation_id"] == "abcdef01"

    def test_context_is_reset_after_request(self, client):
        client.get("/context")

        assert get_correlation_id() == ""


class TestLoggingContextMiddleware:
    def test_request_fields_in_context(self, client):
        context = client.get("/context").json()["log_context"]

        assert context["endpoint"] == "/context"
        assert context["method"] == "GET"


class TestPrometheusMiddleware:
    def test_counts_requests(self, client):
        labels = {
            "method": "GET",
            "endpoint": "/context",
            "status_code": "200",
        }
        before = REGISTRY.get_sample_value("http_requests_total", labels) or 0

        client.get("/context")

        assert REGISTRY.get_sample_value("http_requests_total", labels) == (
            before + 1
        )

    def test_counts_failed_requests(self, client):
        labels = {"method": "GET", "endpoint": "/boom", "status_code": "500"}
        before = REGISTRY.get_sample_value("http_requests_total", labels) or 0

        assert client.get("/boom").status_code == 500

        assert REGISTRY.get_sample_value("http_requests_total", labels) == (
            before + 1
        )


class TestExcludeMetricsFilter:
    @pytest.mark.parametrize(
        "message, kept",
        [
            ('127.0.0.1:5000 - "GET /metrics HTTP/1.1" 200', False),
            ('127.0.0.1:5000 - "GET /health HTTP/1.1" 200', False),
            ('127.0.0.1:5000 - "GET /api/cities HTTP/1.1" 200', True),
        ],
    )
    def test_filter(self, message, kept):
        record = logging.LogRecord(
            "uvicorn.access", logging.INFO, __file__, 1, message, (), None
        )

        assert ExcludeMetricsFilter().filter(record) is kept

    def test_attached_to_access_handler(self):
        config = uvicorn_log_config()

        assert config["handlers"]["access"]["filters"] == ["exclude_metrics"]
        assert config["filters"]["exclude_metrics"]["()"] == (
            "relay.uvicorn_filters.ExcludeMetricsFilter"
        )

    def test_default_config_untouched(self):
        from uvicorn.config import LOGGING_CONFIG

        uvicorn_log_config()

        assert "filters" not in LOGGING_CONFIG["handlers"]["access"]
