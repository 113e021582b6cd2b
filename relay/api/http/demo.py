"""Trivial request/response endpoints used to check the HTTP side."""

from fastapi import APIRouter, status

from relay.constants import SUCCESS_MESSAGE
from relay.exceptions import OperationFailure
from relay.schemas.response import (
    DataResponseModel,
    ErrorResponseModel,
    MessageResponseModel,
)
from relay.utils.async_operation import simulated_operation
from relay.utils.error_handler import handle_http_errors

router = APIRouter(prefix="/api", tags=["demo"])


@router.get(
    "/test",
    response_model=MessageResponseModel,
    status_code=status.HTTP_200_OK,
    summary="Synchronous echo endpoint",
)
def test() -> MessageResponseModel:
    return MessageResponseModel(message=SUCCESS_MESSAGE)


@router.get(
    "/async_test",
    response_model=DataResponseModel,
    responses={500: {"model": ErrorResponseModel}},
    summary="Await a simulated slow operation",
)
@handle_http_errors
async def async_test() -> DataResponseModel:
    """
    Await the simulated operation and return its result.

    Returns:
        DataResponseModel: `{"message": "Success", "data": {...}}`, or a
        500 `{"message": "Error", "error": ...}` if the operation fails.
    """
    try:
        result = await simulated_operation()
    except Exception as ex:
        # Any failure of the dependency is reported, not propagated
        raise OperationFailure(str(ex) or type(ex).__name__) from ex

    return DataResponseModel(message=SUCCESS_MESSAGE, data=result)
