import asyncio
from typing import Awaitable, Callable, TypeVar

from relay.api.ws.connection import Connection
from relay.constants import WS_CLOSE_TIMEOUT_SECONDS, WS_GOING_AWAY_CODE
from relay.exceptions import DuplicateConnectionError
from relay.logging import logger

T = TypeVar("T")


class ConnectionRegistry:
    """
    Set of relay connections currently registered for broadcasts.

    Connections are keyed by connection id. Every read and write of the
    membership goes through one asyncio lock; iteration happens over a copy
    taken under that lock, so peer I/O never runs while the lock is held.
    """

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection: object) -> bool:
        return (
            isinstance(connection, Connection)
            and connection.connection_id in self._connections
        )

    async def add(self, connection: Connection) -> None:
        """
        Register a new connection.

        Args:
            connection: Connection with an identity not registered yet.

        Raises:
            DuplicateConnectionError: If the identity is already registered.
        """
        async with self._lock:
            if connection.connection_id in self._connections:
                raise DuplicateConnectionError(
                    f"Connection {connection.connection_id} "
                    "is already registered"
                )
            self._connections[connection.connection_id] = connection

        logger.debug(
            f"{connection} added to registry "
            f"({len(self._connections)} registered)"
        )

    async def remove(self, connection: Connection) -> bool:
        """
        Unregister a connection. Removing an absent connection is a no-op.

        Returns:
            True if the connection was registered.
        """
        async with self._lock:
            removed = self._connections.pop(connection.connection_id, None)

        if removed is None:
            return False

        logger.debug(
            f"{connection} removed from registry "
            f"({len(self._connections)} registered)"
        )
        return True

    async def snapshot(self) -> list[Connection]:
        """Return the registered connections at this moment."""
        async with self._lock:
            return list(self._connections.values())

    async def for_each_except(
        self,
        sender: Connection,
        fn: Callable[[Connection], Awaitable[T]],
    ) -> list[T]:
        """
        Await `fn` once for every registered connection other than `sender`.

        Calls run concurrently over a snapshot of the membership. A
        connection added or removed while the calls are in flight may or
        may not be visited.

        Returns:
            Results of `fn`, in unspecified order.
        """
        async with self._lock:
            recipients = [
                connection
                for connection_id, connection in self._connections.items()
                if connection_id != sender.connection_id
            ]

        if not recipients:
            return []

        return list(await asyncio.gather(*[fn(conn) for conn in recipients]))

    async def close_all(self, code: int = WS_GOING_AWAY_CODE) -> int:
        """
        Close the transport of every registered connection.

        Used at shutdown; connection tasks unregister themselves when they
        observe the close.

        Returns:
            Number of connections a close was attempted on.
        """
        connections = await self.snapshot()

        async def close(connection: Connection) -> None:
            try:
                await asyncio.wait_for(
                    connection.websocket.close(code=code),
                    timeout=WS_CLOSE_TIMEOUT_SECONDS,
                )
            except (TimeoutError, OSError, RuntimeError) as ex:
                logger.warning(f"Failed to close {connection}: {ex!r}")

        await asyncio.gather(*[close(conn) for conn in connections])
        return len(connections)
