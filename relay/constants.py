"""
Application-level constants for hardcoded relay behavior.

These values are part of the wire protocol or of internal safety limits and
are not meant to be changed through environment variables.

For configurable values (ports, timeouts, upstream URLs, etc.), see
relay/settings.py.
"""

# ============================================================================
# Logging
# ============================================================================

# Maximum size of a single JSON log line pushed to Loki
LOKI_MAX_LOG_SIZE_BYTES = 256 * 1024


# ============================================================================
# WebSocket Protocol Constants (RFC 6455 close codes)
# ============================================================================

WS_NORMAL_CLOSURE_CODE = 1000

# Used for connections still registered when the process shuts down
WS_GOING_AWAY_CODE = 1001

# Used when a connection task dies on an unexpected exception
WS_INTERNAL_ERROR_CODE = 1011

# Timeout (seconds) when closing WebSocket connections during shutdown
WS_CLOSE_TIMEOUT_SECONDS = 5


# ============================================================================
# Peripheral HTTP endpoints
# ============================================================================

SUCCESS_MESSAGE = "Success"
ERROR_MESSAGE = "Error"
