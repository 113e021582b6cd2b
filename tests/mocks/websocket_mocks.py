"""
Mock factory functions for WebSocket testing.

Provides mocks for WebSocket transports, relay connections and relay
endpoints.
"""

import json
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from starlette.websockets import WebSocket, WebSocketState

from relay.api.ws.connection import Connection
from relay.api.ws.constants import ConnectionState


def create_mock_websocket(
    client_state: WebSocketState = WebSocketState.CONNECTED,
    application_state: WebSocketState = WebSocketState.CONNECTED,
):
    """
    Creates a mock WebSocket connection with common methods.

    Args:
        client_state: Client side state reported by the mock
        application_state: Application side state reported by the mock

    Returns:
        MagicMock: Mocked WebSocket instance
    """
    ws_mock = MagicMock(spec=WebSocket)

    # Send operations
    ws_mock.send_text = AsyncMock()
    ws_mock.send_json = AsyncMock()
    ws_mock.send_bytes = AsyncMock()

    # Connection lifecycle
    ws_mock.accept = AsyncMock()
    ws_mock.close = AsyncMock()

    # State and headers
    ws_mock.client_state = client_state
    ws_mock.application_state = application_state
    ws_mock.headers = {}
    ws_mock.query_params = {}

    return ws_mock


def create_open_connection(
    websocket=None, connection_id: str | None = None
) -> Connection:
    """
    Creates a Connection in the OPEN state around a mock WebSocket.

    Args:
        websocket: WebSocket mock, a new one is created if omitted
        connection_id: Optional fixed identity

    Returns:
        Connection: Open connection
    """
    if websocket is None:
        websocket = create_mock_websocket()
    connection = Connection(websocket, connection_id=connection_id)
    connection.transition(ConnectionState.OPEN)
    return connection


def create_relay_endpoint(registry, dispatcher, endpoint_cls=None):
    """
    Creates a relay endpoint instance bound to a fake application state.

    Args:
        registry: ConnectionRegistry the endpoint registers with
        dispatcher: BroadcastDispatcher used for broadcasts
        endpoint_cls: Endpoint class, defaults to the Relay consumer

    Returns:
        Endpoint instance ready for on_connect/on_receive/on_disconnect
    """
    if endpoint_cls is None:
        from relay.api.ws.consumers.relay import Relay

        endpoint_cls = Relay

    state = SimpleNamespace(registry=registry, dispatcher=dispatcher)
    scope = {"type": "websocket", "app": SimpleNamespace(state=state)}
    return endpoint_cls(scope=scope, receive=None, send=None)  # type: ignore


def sent_messages(ws_mock) -> list[dict[str, Any]]:
    """
    Decodes every text frame sent through a WebSocket mock.

    Args:
        ws_mock: Mock created by create_mock_websocket

    Returns:
        list[dict]: Sent messages in order
    """
    return [
        json.loads(call.args[0]) for call in ws_mock.send_text.await_args_list
    ]
