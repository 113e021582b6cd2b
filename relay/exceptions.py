"""
Custom exception classes for the application.

Every exception derives from AppException, which carries a human-readable
message and the HTTP status code used when the error reaches an HTTP
endpoint. WebSocket message rejections additionally carry a machine-readable
reason code.
"""


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        http_status: HTTP status code for REST API responses.
    """

    http_status: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ============================================================================
# Inbound WebSocket message rejections
# ============================================================================


class MessageRejection(AppException):
    """
    Inbound WebSocket message failed validation.

    Rejections are reported back to the offending sender only and never
    reach the broadcast fan-out.

    Attributes:
        reason: Stable identifier of the failed validation step.
    """

    http_status = 400
    reason: str = "REJECTED"
    default_message = "Invalid message format"


class MalformedEncoding(MessageRejection):
    """Raw frame is not well-formed JSON."""

    reason = "MALFORMED_ENCODING"
    default_message = "Invalid JSON"


class InvalidMessage(MessageRejection):
    """Decoded JSON value is not an object."""

    reason = "INVALID_MESSAGE"
    default_message = "Invalid message"


class InvalidType(MessageRejection):
    """The `type` key is absent or is not a string."""

    reason = "INVALID_TYPE"
    default_message = "Invalid type"


class MissingPayload(MessageRejection):
    """The `payload` key is absent."""

    reason = "MISSING_PAYLOAD"
    default_message = "Missing payload"


# ============================================================================
# Delivery and lifecycle
# ============================================================================


class RecipientUnavailable(AppException):
    """
    A broadcast recipient could not accept a frame.

    Raised when the recipient is not in a writable state, disconnected
    mid-send or did not accept the frame within the send timeout. The
    dispatcher skips the recipient; the error is never reported to a peer.
    """

    default_message = "Recipient unavailable"


class DuplicateConnectionError(AppException):
    """A connection with the same identity is already registered."""

    default_message = "Connection already registered"


class InvalidStateTransition(AppException):
    """A connection lifecycle event is not allowed in the current state."""

    default_message = "Invalid connection state transition"


# ============================================================================
# Peripheral HTTP collaborators
# ============================================================================


class UpstreamFetchFailure(AppException):
    """
    Fetching or decoding data from an upstream service failed.

    HTTP Status: 500 Internal Server Error
    """

    http_status = 500
    default_message = "Upstream fetch failed"


class OperationFailure(AppException):
    """
    The simulated asynchronous operation failed.

    HTTP Status: 500 Internal Server Error
    """

    http_status = 500
    default_message = "Operation failed"
