"""
Middleware for request correlation ID tracking.

Adds a short correlation ID to every HTTP request so that log lines and
responses can be tied together.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Context variable for storing correlation ID per request
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_ID_HEADER = "X-Correlation-ID"
CORRELATION_ID_LENGTH = 8


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add correlation IDs to HTTP requests.

    This middleware:
    - Takes the correlation ID from the X-Correlation-ID header or generates
      a new one from a UUID4
    - Limits correlation IDs to 8 characters
    - Stores it in request.state.request_id and in a context variable
    - Echoes it in the X-Correlation-ID response header

    WebSocket scopes are passed through untouched; relay connections use
    their connection id in the log context instead.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())
        cid = cid[:CORRELATION_ID_LENGTH]

        request.state.request_id = cid
        token = correlation_id.set(cid)

        try:
            response = await call_next(request)
        finally:
            correlation_id.reset(token)

        response.headers[CORRELATION_ID_HEADER] = cid
        return response


def get_correlation_id() -> str:
    """
    Get the correlation ID for the current request context.

    Returns:
        The correlation ID string, or empty string if not set.
    """
    return correlation_id.get()
