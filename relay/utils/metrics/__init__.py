"""
Prometheus metrics definitions.

Metrics are organized into submodules by subsystem (HTTP, WebSocket) and
re-exported here:

    from relay.utils.metrics import ws_connections_active
"""

from relay.utils.metrics._helpers import _get_or_create_gauge
from relay.utils.metrics.http import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
    upstream_fetch_total,
)
from relay.utils.metrics.websocket import (
    ws_broadcast_duration_seconds,
    ws_connections_active,
    ws_connections_total,
    ws_deliveries_total,
    ws_messages_broadcast_total,
    ws_messages_received_total,
    ws_messages_rejected_total,
)

# Application Info
app_info = _get_or_create_gauge(
    "app_info",
    "Application information",
    ["version", "python_version", "environment"],
)

__all__ = [
    # HTTP metrics
    "http_requests_total",
    "http_request_duration_seconds",
    "http_requests_in_progress",
    "upstream_fetch_total",
    # WebSocket metrics
    "ws_connections_active",
    "ws_connections_total",
    "ws_messages_received_total",
    "ws_messages_rejected_total",
    "ws_messages_broadcast_total",
    "ws_deliveries_total",
    "ws_broadcast_duration_seconds",
    # Application metrics
    "app_info",
]
