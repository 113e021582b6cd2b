"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for the application, the connection
registry and the broadcast dispatcher.
"""

import os

# Set environment variables for testing before importing relay modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ASYNC_OPERATION_DELAY_SECONDS", "0")
os.environ.setdefault("WS_SEND_TIMEOUT_SECONDS", "1")

import pytest
from fastapi.testclient import TestClient

from relay import application
from relay.api.ws.dispatcher import BroadcastDispatcher
from relay.managers.connection_registry import ConnectionRegistry


@pytest.fixture
def registry():
    """
    Provides an empty ConnectionRegistry.

    Returns:
        ConnectionRegistry: Fresh registry instance
    """
    return ConnectionRegistry()


@pytest.fixture
def dispatcher(registry):
    """
    Provides a BroadcastDispatcher bound to the registry fixture.

    Args:
        registry: Fixture providing the registry

    Returns:
        BroadcastDispatcher: Dispatcher instance
    """
    return BroadcastDispatcher(registry)


@pytest.fixture
def app():
    """
    Create a fresh FastAPI application.

    Returns:
        FastAPI: Application with its own registry and dispatcher.
    """
    return application()


@pytest.fixture
def client(app):
    """
    Create a test client running the application lifespan.

    All WebSocket sessions opened from this client share one event loop.

    Args:
        app: FastAPI application fixture.

    Yields:
        TestClient: FastAPI test client instance.
    """
    with TestClient(app) as test_client:
        yield test_client
