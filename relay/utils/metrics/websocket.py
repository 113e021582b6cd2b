"""
Prometheus metrics for the WebSocket relay.

Tracks connections, inbound messages, validation rejections and the outcome
of every per-recipient delivery attempt.
"""

from relay.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_gauge,
    _get_or_create_histogram,
)

# WebSocket Connection Metrics
ws_connections_active = _get_or_create_gauge(
    "ws_connections_active", "Number of registered WebSocket connections"
)

ws_connections_total = _get_or_create_counter(
    "ws_connections_total",
    "Total WebSocket connections",
    ["status"],  # accepted, closed, errored
)

# Message Metrics
ws_messages_received_total = _get_or_create_counter(
    "ws_messages_received_total", "Total WebSocket messages received"
)

ws_messages_rejected_total = _get_or_create_counter(
    "ws_messages_rejected_total",
    "Total inbound WebSocket messages rejected by validation",
    ["reason"],
)

ws_messages_broadcast_total = _get_or_create_counter(
    "ws_messages_broadcast_total",
    "Total validated messages handed to the broadcast dispatcher",
)

ws_deliveries_total = _get_or_create_counter(
    "ws_deliveries_total",
    "Per-recipient delivery attempts",
    ["outcome"],  # delivered, skipped
)

ws_broadcast_duration_seconds = _get_or_create_histogram(
    "ws_broadcast_duration_seconds",
    "Time to fan out one message to all recipients",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
)


__all__ = [
    "ws_connections_active",
    "ws_connections_total",
    "ws_messages_received_total",
    "ws_messages_rejected_total",
    "ws_messages_broadcast_total",
    "ws_deliveries_total",
    "ws_broadcast_duration_seconds",
]
