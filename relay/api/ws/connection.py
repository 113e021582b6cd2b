import asyncio
import uuid

from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from relay.api.ws.constants import ALLOWED_TRANSITIONS, ConnectionState
from relay.exceptions import InvalidStateTransition, RecipientUnavailable
from relay.settings import app_settings


class Connection:
    """
    Handle around one relay peer.

    Wraps the Starlette WebSocket with a stable identity, the lifecycle
    state and a fail-fast, time-bounded send. Two handles are equal when
    their connection ids are equal.
    """

    def __init__(
        self,
        websocket: WebSocket,
        connection_id: str | None = None,
        send_timeout: float | None = None,
    ) -> None:
        self.websocket = websocket
        self.connection_id = connection_id or str(uuid.uuid4())
        self.send_timeout = (
            send_timeout
            if send_timeout is not None
            else app_settings.WS_SEND_TIMEOUT_SECONDS
        )
        self.state = ConnectionState.CONNECTING

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Connection):
            return NotImplemented
        return self.connection_id == other.connection_id

    def __hash__(self) -> int:
        return hash(self.connection_id)

    def __repr__(self) -> str:
        return (
            f"Connection(id={self.connection_id[:8]}, "
            f"state={self.state.value})"
        )

    def transition(self, new_state: ConnectionState) -> None:
        """
        Move the connection to `new_state`.

        Raises:
            InvalidStateTransition: If the lifecycle does not allow the move.
        """
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidStateTransition(
                f"Connection {self.connection_id} cannot go from "
                f"{self.state} to {new_state}"
            )
        self.state = new_state

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    @property
    def is_writable(self) -> bool:
        """Whether a frame sent now can reach the peer."""
        return (
            self.is_open
            and self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_text(self, text: str) -> None:
        """
        Send one text frame to the peer.

        Fails immediately when the connection is not writable and gives up
        after `send_timeout` seconds. Nothing is queued or retried.

        Raises:
            RecipientUnavailable: If the frame could not be handed to the
                transport.
        """
        if not self.is_writable:
            raise RecipientUnavailable(
                f"Connection {self.connection_id} is not writable "
                f"({self.state})"
            )

        try:
            await asyncio.wait_for(
                self.websocket.send_text(text), timeout=self.send_timeout
            )
        except TimeoutError as ex:
            raise RecipientUnavailable(
                f"Connection {self.connection_id} did not accept the frame "
                f"within {self.send_timeout}s"
            ) from ex
        except (WebSocketDisconnect, OSError, RuntimeError) as ex:
            # WebSocketDisconnect: Client disconnected
            # OSError: Network errors
            # RuntimeError: WebSocket in invalid state
            raise RecipientUnavailable(
                f"Connection {self.connection_id} send failed: {ex!r}"
            ) from ex
