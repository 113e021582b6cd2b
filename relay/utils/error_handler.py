"""
Error handler decorator for HTTP endpoints.

Converts AppException instances raised by an endpoint into a JSON error
response, so endpoints do not repeat try/except blocks.
"""

from functools import wraps
from typing import Any, Callable

from fastapi.responses import JSONResponse

from relay.constants import ERROR_MESSAGE
from relay.exceptions import AppException
from relay.logging import logger
from relay.schemas.response import ErrorResponseModel


def handle_http_errors(func: Callable) -> Callable:
    """
    Decorator for HTTP endpoints to convert AppException to JSONResponse.

    The response status is the exception's `http_status` and the body is
    `{"message": "Error", "error": <exception message>}`.

    Args:
        func: The HTTP endpoint function to wrap.

    Returns:
        Wrapped function that handles exceptions.

    Example:
        ```python
        @router.get("/api/cities")
        @handle_http_errors
        async def cities() -> list[CityModel]:
            return await CitiesManager().get_cities()  # No try/except needed!
        ```
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except AppException as ex:
            logger.error(
                f"{type(ex).__name__} in {func.__name__}: {ex.message}",
                extra={"exception_type": type(ex).__name__},
            )
            return JSONResponse(
                status_code=ex.http_status,
                content=ErrorResponseModel(
                    message=ERROR_MESSAGE, error=ex.message
                ).model_dump(),
            )

    return wrapper
