"""Shared test fixtures for all test modules."""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from blockpulse.adapters.storage import InMemorySampleStorage, SQLiteSampleStorage


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for storage tests."""
    return str(tmp_path / "metrics.db")


@pytest.fixture
async def sqlite_storage(db_path: str) -> AsyncGenerator[SQLiteSampleStorage]:
    """Fixture providing an initialized, empty file-backed SQLite store."""
    storage = SQLiteSampleStorage(db_path)
    await storage.init()
    yield storage
    await storage.close()


@pytest.fixture
def memory_storage() -> InMemorySampleStorage:
    """Fixture providing an empty in-memory store."""
    return InMemorySampleStorage()


@pytest.fixture
def asgi_test_client() -> Callable[[Any], httpx.AsyncClient]:
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Returns a callable that accepts an ASGI app and returns a client with
    ASGITransport configured. The app's lifespan is not run, so no
    collector is started.

    Usage:
        async def test_something(asgi_test_client):
            app = create_app(settings, storage)
            async with asgi_test_client(app) as client:
                response = await client.get("/api/metrics")
    """

    def _get_client(app: Any) -> httpx.AsyncClient:
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
