import asyncio
from typing import Any

from relay.settings import app_settings


async def simulated_operation(delay: float | None = None) -> dict[str, Any]:
    """
    Stand-in for a slow asynchronous dependency (API call, DB query, ...).

    Args:
        delay: Seconds to wait, defaults to ASYNC_OPERATION_DELAY_SECONDS.

    Returns:
        dict[str, Any]: Fixed result `{"data": "value"}`.
    """
    await asyncio.sleep(
        app_settings.ASYNC_OPERATION_DELAY_SECONDS if delay is None else delay
    )
    return {"data": "value"}
