"""
Dependency injection configuration for FastAPI.

Managers are provided through FastAPI's Depends() system so tests can swap
them with app.dependency_overrides.

Example:
    ```python
    from fastapi import APIRouter
    from relay.dependencies import RegistryDep

    router = APIRouter()

    @router.get("/connections")
    async def connections(registry: RegistryDep) -> int:
        return len(registry)
    ```
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from relay.managers.cities_manager import CitiesManager
from relay.managers.connection_registry import ConnectionRegistry


@lru_cache
def get_cities_manager() -> CitiesManager:
    """
    Get cached cities manager instance.

    Returns:
        Cached CitiesManager configured from settings.
    """
    return CitiesManager()


def get_connection_registry(request: Request) -> ConnectionRegistry:
    """Return the registry owned by the running application."""
    return request.app.state.registry


CitiesManagerDep = Annotated[CitiesManager, Depends(get_cities_manager)]
RegistryDep = Annotated[ConnectionRegistry, Depends(get_connection_registry)]
