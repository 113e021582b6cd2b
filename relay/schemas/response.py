from typing import Any

from pydantic import BaseModel


class MessageResponseModel(BaseModel):  # type: ignore[misc]
    message: str


class DataResponseModel(BaseModel):  # type: ignore[misc]
    message: str
    data: dict[str, Any]


class ErrorResponseModel(BaseModel):  # type: ignore[misc]
    """Body of HTTP 500 responses produced by handle_http_errors."""

    message: str
    error: str


class HealthResponseModel(BaseModel):  # type: ignore[misc]
    status: str
    active_connections: int
