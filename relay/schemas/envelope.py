from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr

from relay.api.ws.constants import ERROR_ENVELOPE_TYPE
from relay.exceptions import MessageRejection


class Envelope(BaseModel):  # type: ignore[misc]
    """
    Unit of exchange on the relay.

    Attributes:
        type: Message kind chosen by the sender.
        payload: Arbitrary JSON value, never inspected by the relay.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: StrictStr
    payload: Any

    def to_wire(self) -> str:
        """Serialize to the JSON text sent over the WebSocket."""
        return self.model_dump_json()


class ErrorPayload(BaseModel):  # type: ignore[misc]
    message: str


class ErrorEnvelope(Envelope):
    """Envelope echoed to a sender whose message was rejected."""

    type: StrictStr = ERROR_ENVELOPE_TYPE
    payload: ErrorPayload

    @classmethod
    def from_rejection(cls, rejection: MessageRejection) -> "ErrorEnvelope":
        return cls(payload=ErrorPayload(message=rejection.message))
