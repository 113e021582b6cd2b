"""
Per-request log fields for the HTTP side of the relay.

Relay connections bypass this middleware; their records carry the
connection id that the endpoint puts in the log context on connect.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from relay.logging import clear_log_context, set_log_context


class LoggingContextMiddleware(BaseHTTPMiddleware):  # type: ignore[misc]
    """
    Tag log records emitted while serving a request with its path and
    method, and with the response status once the handler returns.

    The correlation id is not set here; CorrelationIDMiddleware owns it.
    """

    async def dispatch(self, request: Request, call_next: ASGIApp) -> Response:
        set_log_context(endpoint=request.url.path, method=request.method)

        try:
            response = await call_next(request)
            set_log_context(status_code=response.status_code)
        finally:
            # Context vars outlive the request on a reused task
            clear_log_context()

        return response
