"""Custom filters for uvicorn access logging."""

import copy
import logging
from typing import Any

from uvicorn.config import LOGGING_CONFIG


class ExcludeMetricsFilter(logging.Filter):
    """
    Logging filter to exclude monitoring endpoint requests from access logs.

    Keeps health checks and Prometheus scrapes out of uvicorn's access log.

    Note: uvicorn builds this filter from its logging config before the
    application starts, so settings are only read when filtering.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()

        from relay.settings import app_settings

        return not any(
            path in message for path in app_settings.LOG_EXCLUDED_PATHS
        )


def uvicorn_log_config() -> dict[str, Any]:
    """
    Return uvicorn's default logging config with ExcludeMetricsFilter
    attached to the access logger handler.
    """
    config = copy.deepcopy(LOGGING_CONFIG)
    config.setdefault("filters", {})["exclude_metrics"] = {
        "()": f"{__name__}.ExcludeMetricsFilter"
    }
    config["handlers"]["access"]["filters"] = ["exclude_metrics"]
    return config
