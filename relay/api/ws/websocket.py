from typing import Any

from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket, WebSocketDisconnect

from relay.api.ws.connection import Connection
from relay.api.ws.constants import ConnectionState
from relay.api.ws.dispatcher import BroadcastDispatcher
from relay.constants import WS_INTERNAL_ERROR_CODE, WS_NORMAL_CLOSURE_CODE
from relay.exceptions import MessageRejection, RecipientUnavailable
from relay.logging import clear_log_context, logger, set_log_context
from relay.managers.connection_registry import ConnectionRegistry
from relay.schemas.envelope import ErrorEnvelope
from relay.utils.metrics import (
    ws_connections_active,
    ws_connections_total,
    ws_messages_rejected_total,
)


class RelayWebSocketEndpoint(WebSocketEndpoint):  # type: ignore[misc]
    """
    WebSocket endpoint driving the lifecycle of one relay connection.

    One instance handles exactly one connection:

    - CONNECTING -> OPEN: the socket is accepted and registered.
    - OPEN -> OPEN: inbound frames are passed to `on_receive`.
    - OPEN -> CLOSING -> CLOSED: on close or transport error the connection
      is removed from the registry. Frames arriving afterwards are ignored.

    The registry and dispatcher are owned by the application and read from
    `app.state`.
    """

    encoding = None  # Receive text and binary frames undecoded

    registry: ConnectionRegistry
    dispatcher: BroadcastDispatcher
    connection: Connection | None = None

    async def dispatch(self) -> None:
        """
        Run the receive loop until the peer goes away.

        A `websocket.disconnect` event or WebSocketDisconnect is a close
        event and keeps its close code. Any other exception is a transport
        error: the connection is unregistered with code 1011 and the
        exception re-raised to the server.
        """
        websocket = WebSocket(
            self.scope, receive=self.receive, send=self.send
        )
        await self.on_connect(websocket)

        close_code = WS_NORMAL_CLOSURE_CODE

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.receive":
                    await self.on_receive(
                        websocket, self.frame_content(message)
                    )
                elif message["type"] == "websocket.disconnect":
                    close_code = int(
                        message.get("code") or WS_NORMAL_CLOSURE_CODE
                    )
                    break
        except WebSocketDisconnect as exc:
            close_code = exc.code
        except Exception as exc:
            close_code = WS_INTERNAL_ERROR_CODE
            raise exc
        finally:
            await self.on_disconnect(websocket, close_code)

    @staticmethod
    def frame_content(message: dict[str, Any]) -> str | bytes:
        """Return the raw text or bytes carried by a receive event."""
        if message.get("text") is not None:
            return message["text"]
        return message.get("bytes") or b""

    async def on_connect(self, websocket: WebSocket) -> None:
        """
        Accept the socket and register it for broadcasts.

        The connection id is attached to the log context so every record
        emitted by this connection task carries it.
        """
        await super().on_connect(websocket)

        app_state = self.scope["app"].state
        self.registry = app_state.registry
        self.dispatcher = app_state.dispatcher

        self.connection = Connection(websocket)
        set_log_context(connection_id=self.connection.connection_id[:8])

        await self.registry.add(self.connection)
        self.connection.transition(ConnectionState.OPEN)

        ws_connections_total.labels(status="accepted").inc()
        ws_connections_active.inc()
        logger.info(
            f"Client connected ({len(self.registry)} connections registered)"
        )

    async def on_disconnect(
        self, websocket: WebSocket, close_code: int
    ) -> None:
        """
        Unregister the connection. Safe to call more than once.
        """
        await super().on_disconnect(websocket, close_code)

        connection = self.connection
        if connection is None or connection.state is ConnectionState.CLOSED:
            return

        connection.transition(ConnectionState.CLOSING)
        if await self.registry.remove(connection):
            ws_connections_active.dec()
        connection.transition(ConnectionState.CLOSED)

        ws_connections_total.labels(
            status=(
                "errored"
                if close_code == WS_INTERNAL_ERROR_CODE
                else "closed"
            )
        ).inc()
        logger.info(f"Client disconnected with code {close_code}")
        clear_log_context()

    async def reject(self, rejection: MessageRejection) -> None:
        """
        Echo an error envelope for `rejection` to this connection only.
        """
        ws_messages_rejected_total.labels(reason=rejection.reason).inc()
        logger.debug(f"Rejected inbound message: {rejection.reason}")

        try:
            await self.connection.send_text(
                ErrorEnvelope.from_rejection(rejection).to_wire()
            )
        except RecipientUnavailable as ex:
            logger.debug(f"Could not report rejection: {ex.message}")
