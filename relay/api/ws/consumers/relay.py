from fastapi import APIRouter
from starlette.websockets import WebSocket

from relay.api.ws.constants import ConnectionState
from relay.api.ws.validation import validate_message
from relay.api.ws.websocket import RelayWebSocketEndpoint
from relay.exceptions import MessageRejection
from relay.logging import logger
from relay.settings import app_settings
from relay.utils.metrics import ws_messages_received_total

router = APIRouter()


@router.websocket_route(app_settings.WS_PATH)
class Relay(RelayWebSocketEndpoint):
    """
    Broadcast relay endpoint.

    Every valid `{"type": ..., "payload": ...}` message is relayed to all
    other connected clients; invalid messages are answered with an error
    envelope sent to the sender only.
    """

    async def on_receive(
        self, websocket: WebSocket, data: str | bytes
    ) -> None:
        """
        Validate an inbound frame and broadcast it.

        Args:
            websocket: The WebSocket connection instance.
            data: Raw text or binary frame content.
        """
        if (
            self.connection is None
            or self.connection.state is not ConnectionState.OPEN
        ):
            logger.debug("Ignoring frame on a connection that is not open")
            return

        ws_messages_received_total.inc()

        try:
            envelope = validate_message(data)
        except MessageRejection as rejection:
            await self.reject(rejection)
            return

        await self.dispatcher.broadcast(self.connection, envelope)
