"""
HTTP request metrics for the endpoints served next to the relay.

Only HTTP scopes reach a BaseHTTPMiddleware, so relay connections never
pass through here. Their counters live in relay.utils.metrics.websocket
and are updated by the connection endpoint and the broadcast dispatcher.
"""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from relay.utils.metrics import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Record how many calls each HTTP endpoint serves and how long they take,
    keyed by path and method.

    A handler that raises is counted with status 500, matching the body
    `handle_http_errors` or Starlette's fallback sends for it.
    """

    async def dispatch(self, request: Request, call_next: ASGIApp) -> Response:
        method = request.method
        endpoint = request.url.path
        status_code = 500

        http_requests_in_progress.labels(
            method=method, endpoint=endpoint
        ).inc()
        started = time.perf_counter()

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            http_request_duration_seconds.labels(
                method=method, endpoint=endpoint
            ).observe(time.perf_counter() - started)
            http_requests_total.labels(
                method=method, endpoint=endpoint, status_code=status_code
            ).inc()
            http_requests_in_progress.labels(
                method=method, endpoint=endpoint
            ).dec()
