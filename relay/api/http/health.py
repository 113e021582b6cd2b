"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, status

from relay.dependencies import RegistryDep
from relay.schemas.response import HealthResponseModel

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponseModel,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(registry: RegistryDep) -> HealthResponseModel:
    """
    Report liveness and the number of registered relay connections.

    The relay has no external dependencies, so a running process is
    healthy.

    Returns:
        HealthResponseModel: Health status and active connection count.
    """
    return HealthResponseModel(
        status="healthy", active_connections=len(registry)
    )
