import json

from relay.exceptions import (
    InvalidMessage,
    InvalidType,
    MalformedEncoding,
    MissingPayload,
)
from relay.schemas.envelope import Envelope


def _decode(raw: str | bytes) -> object:
    data = json.loads(raw)
    # json.loads accepts NaN/Infinity, overflows 1e400 to inf and keeps lone
    # surrogate escapes; none of them survive strict re-encoding
    json.dumps(data, ensure_ascii=False, allow_nan=False).encode("utf-8")
    return data


def validate_message(raw: str | bytes) -> Envelope:
    """
    Parse an inbound WebSocket frame into an Envelope.

    Checks run in a fixed order and the first failing check decides the
    rejection:

    1. The frame must be well-formed JSON that can be relayed unchanged:
       no NaN or infinite numbers, no lone surrogates, nesting within the
       decoder limit (MalformedEncoding).
    2. The decoded value must be a JSON object (InvalidMessage).
    3. `type` must be present and a string (InvalidType).
    4. `payload` must be present, `null` included (MissingPayload).

    The payload is returned as decoded, without further inspection.

    Args:
        raw: Text or binary frame content.

    Returns:
        Envelope: The validated envelope.

    Raises:
        MessageRejection: One of the subclasses listed above.
    """
    try:
        data = _decode(raw)
    except (ValueError, TypeError, RecursionError) as ex:
        # JSONDecodeError, UnicodeDecodeError and UnicodeEncodeError are
        # ValueError subclasses
        raise MalformedEncoding() from ex

    if not isinstance(data, dict):
        raise InvalidMessage()

    if not isinstance(data.get("type"), str):
        raise InvalidType()

    if "payload" not in data:
        raise MissingPayload()

    return Envelope(type=data["type"], payload=data["payload"])
