from enum import StrEnum

# `type` of the envelope echoed to a sender whose message was rejected
ERROR_ENVELOPE_TYPE = "error"


class ConnectionState(StrEnum):
    """
    Lifecycle states of a relay connection.

    Attributes:
        CONNECTING: Accepted by the transport, not yet registered.
        OPEN: Registered; receives broadcasts and may send messages.
        CLOSING: Close or transport error observed, removal pending.
        CLOSED: Removed from the registry. Terminal.
    """

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"

    def __str__(self):
        """
        Returns a string representation in the format "ConnectionState.OPEN<open>".
        """
        return f"{__class__.__name__}.{self.name}<{self.value}>"


# Allowed lifecycle transitions. Inbound data keeps an OPEN connection OPEN.
ALLOWED_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.CONNECTING: frozenset(
        {ConnectionState.OPEN, ConnectionState.CLOSING}
    ),
    ConnectionState.OPEN: frozenset({ConnectionState.CLOSING}),
    ConnectionState.CLOSING: frozenset({ConnectionState.CLOSED}),
    ConnectionState.CLOSED: frozenset(),
}
