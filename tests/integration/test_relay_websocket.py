"""
End-to-end tests of the WebSocket relay through the full application.

A connection is registered by the time it answers its first message, so
each client is synchronized with an invalid-message round trip before it
is expected to receive broadcasts.
"""

import pytest


def sync(ws):
    """Round-trip an invalid frame so the connection is known registered."""
    ws.send_text("sync")
    assert ws.receive_json() == {
        "type": "error",
        "payload": {"message": "Invalid JSON"},
    }


def active_connections(client) -> int:
    return client.get("/health").json()["active_connections"]


class TestBroadcast:
    def test_message_reaches_other_clients_only(self, client):
        with (
            client.websocket_connect("/") as a,
            client.websocket_connect("/") as b,
            client.websocket_connect("/") as c,
        ):
            for ws in (a, b, c):
                sync(ws)

            a.send_text('{"type": "chat", "payload": {"text": "hello"}}')

            expected = {"type": "chat", "payload": {"text": "hello"}}
            assert b.receive_json() == expected
            assert c.receive_json() == expected

            # If A had received its own message it would come first
            sync(a)

    def test_binary_frames_are_relayed(self, client):
        with (
            client.websocket_connect("/") as a,
            client.websocket_connect("/") as b,
        ):
            sync(a)
            sync(b)

            a.send_bytes(b'{"type": "move", "payload": [3, 4]}')

            assert b.receive_json() == {"type": "move", "payload": [3, 4]}

    def test_extra_keys_are_not_relayed(self, client):
        with (
            client.websocket_connect("/") as a,
            client.websocket_connect("/") as b,
        ):
            sync(a)
            sync(b)

            a.send_text('{"type": "t", "payload": null, "from": "admin"}')

            assert b.receive_json() == {"type": "t", "payload": None}

    def test_messages_from_one_sender_keep_their_order(self, client):
        with (
            client.websocket_connect("/") as a,
            client.websocket_connect("/") as b,
        ):
            sync(a)
            sync(b)

            for i in range(5):
                a.send_json({"type": "seq", "payload": i})

            assert [b.receive_json()["payload"] for _ in range(5)] == list(
                range(5)
            )

    def test_single_client_receives_nothing(self, client):
        with client.websocket_connect("/") as a:
            sync(a)

            a.send_text('{"type": "t", "payload": 1}')

            sync(a)


class TestRejections:
    @pytest.mark.parametrize(
        "raw, message",
        [
            ("{not json", "Invalid JSON"),
            ('"just a string"', "Invalid message"),
            ('{"type": 42, "payload": 1}', "Invalid type"),
            ('{"payload": 1}', "Invalid type"),
            ('{"type": "t"}', "Missing payload"),
        ],
    )
    def test_error_goes_to_sender_only(self, client, raw, message):
        with (
            client.websocket_connect("/") as a,
            client.websocket_connect("/") as b,
        ):
            sync(a)
            sync(b)

            a.send_text(raw)

            assert a.receive_json() == {
                "type": "error",
                "payload": {"message": message},
            }

            # B's next frame is its own sync answer, not A's error
            sync(b)

    def test_connection_survives_rejections(self, client):
        with (
            client.websocket_connect("/") as a,
            client.websocket_connect("/") as b,
        ):
            sync(a)
            sync(b)

            a.send_text("[]")
            a.receive_json()
            a.send_text('{"type": "ok", "payload": true}')

            assert b.receive_json() == {"type": "ok", "payload": True}


class TestLifecycle:
    def test_closed_client_is_unregistered(self, client):
        with client.websocket_connect("/") as a:
            sync(a)
            with client.websocket_connect("/") as b:
                sync(b)
                assert active_connections(client) == 2

            assert active_connections(client) == 1

        assert active_connections(client) == 0

    def test_closed_client_misses_later_broadcasts(self, client):
        with (
            client.websocket_connect("/") as a,
            client.websocket_connect("/") as c,
        ):
            sync(a)
            sync(c)

            with client.websocket_connect("/") as b:
                sync(b)

            a.send_text('{"type": "t", "payload": "after"}')

            assert c.receive_json() == {"type": "t", "payload": "after"}
            assert active_connections(client) == 2


class TestUnrelayableInput:
    """Frames that decode as JSON but cannot be relayed unchanged."""

    @pytest.mark.parametrize(
        "raw",
        [
            '{"type": "chat", "payload": "\\ud800"}',
            '{"type": "chat", "payload": 1e400}',
            '{"type": "chat", "payload": '
            + "[" * 100_000
            + "]" * 100_000
            + "}",
        ],
        ids=["lone-surrogate", "float-overflow", "deep-nesting"],
    )
    def test_rejected_and_sender_stays_connected(self, client, raw):
        with (
            client.websocket_connect("/") as a,
            client.websocket_connect("/") as b,
        ):
            sync(a)
            sync(b)

            a.send_text(raw)

            assert a.receive_json() == {
                "type": "error",
                "payload": {"message": "Invalid JSON"},
            }

            a.send_text('{"type": "chat", "payload": "still here"}')

            assert b.receive_json() == {
                "type": "chat",
                "payload": "still here",
            }
            assert active_connections(client) == 2
