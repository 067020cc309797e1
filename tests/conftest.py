"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import socket
import threading
import time
import pytest
import pytest_asyncio
import httpx
from contextlib import closing
from typing import AsyncGenerator, Generator

import uvicorn
from fastapi import FastAPI
from fastapi.testclient import TestClient

from kvstore.config.settings import Settings
from kvstore.network.app import create_app
from kvstore.server import build_server
from kvstore.service.facade import KVService
from kvstore.storage.engine import KVEngine
from kvstore.storage.normalizer import ValueNormalizer


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def engine() -> KVEngine:
    """Create a fresh, empty KVEngine."""
    return KVEngine()


@pytest.fixture
def normalizer() -> ValueNormalizer:
    return ValueNormalizer()


@pytest.fixture
def service(engine: KVEngine) -> KVService:
    """Create a KVService backed by the engine fixture."""
    return KVService(engine=engine)


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def app_settings() -> Settings:
    return Settings(HOST='127.0.0.1', PORT=0, MAX_BODY_SIZE=4096, CONNECTION_TIMEOUT=5)


@pytest.fixture
def app(app_settings: Settings, engine: KVEngine) -> FastAPI:
    """Create the HTTP application over the engine fixture."""
    return create_app(app_settings, engine=engine)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    TestClient for the application.

    Entered as a context manager so startup and shutdown run around the test.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Async client calling the application in-process.

    Usage:
        @pytest.mark.asyncio
        async def test_something(async_client):
            response = await async_client.get("/key")
    """
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest.fixture
def server_settings(server_port: int) -> Settings:
    return Settings(HOST='127.0.0.1', PORT=server_port, MAX_BODY_SIZE=4096, CONNECTION_TIMEOUT=5)


@pytest.fixture
def server(server_settings: Settings) -> Generator[uvicorn.Server, None, None]:
    """
    Create and start a uvicorn server for testing.

    This fixture:
    1. Builds the server on a random free port
    2. Runs it in a background thread
    3. Yields the server once it accepts connections
    4. Signals it to exit after the test
    """
    srv = build_server(server_settings)
    thread = threading.Thread(target=srv.run, daemon=True)
    thread.start()

    # Wait for server to be ready
    deadline = time.monotonic() + 5
    while not srv.started:
        if time.monotonic() > deadline or not thread.is_alive():
            raise RuntimeError("uvicorn server did not start")
        time.sleep(0.01)

    yield srv

    # Cleanup
    srv.should_exit = True
    thread.join(timeout=5)


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create clients for the running server.

    Usage:
        def test_something(server, client_factory):
            with client_factory() as client:
                response = client.get("/key")
    """
    def factory() -> httpx.Client:
        return httpx.Client(base_url=f"http://127.0.0.1:{server_port}")
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
