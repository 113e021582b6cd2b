# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from relay.api.ws.dispatcher import BroadcastDispatcher
from relay.logging import logger
from relay.managers.connection_registry import ConnectionRegistry
from relay.middlewares.correlation_id import CorrelationIDMiddleware
from relay.middlewares.logging_context import LoggingContextMiddleware
from relay.middlewares.prometheus import PrometheusMiddleware
from relay.routing import collect_subrouters
from relay.settings import app_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager for startup and shutdown.

    Startup operations:
    - Initializes the app_info Prometheus metric

    Shutdown operations (after uvicorn stopped accepting connections):
    - Closes every relay connection still registered with code 1001
    """
    logger.info("Application startup: initializing resources")

    from relay.utils.metrics import app_info

    app_info.labels(
        version=app_settings.APP_VERSION,
        python_version=f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        environment=app_settings.ENVIRONMENT,
    ).set(1)
    logger.info("Initialized Prometheus metrics")

    yield  # Application runs here

    logger.info("Application shutdown: closing relay connections")

    closed = await app.state.registry.close_all()
    if closed:
        logger.info(f"Closed {closed} relay connections during shutdown")

    logger.info("Application shutdown complete")


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    The application owns one ConnectionRegistry and one BroadcastDispatcher,
    stored on `app.state` for the WebSocket endpoint and the HTTP
    dependencies. Routers are collected by `relay.routing.collect_subrouters()`
    and the following middleware is added:
    - `CorrelationIDMiddleware`: correlation IDs for HTTP requests.
    - `LoggingContextMiddleware`: request fields in the log context.
    - `PrometheusMiddleware`: HTTP request metrics.
    """
    app = FastAPI(
        title="WebSocket relay",
        description="HTTP API alongside a WebSocket broadcast relay",
        version=app_settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.state.registry = ConnectionRegistry()
    app.state.dispatcher = BroadcastDispatcher(app.state.registry)

    # Collect routers
    app.include_router(collect_subrouters())

    # Middlewares (execute in REVERSE order of registration)
    # Execution flow: CorrelationIDMiddleware → LoggingContextMiddleware → PrometheusMiddleware
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    return app


app = application()  # Need for fastapi cli
