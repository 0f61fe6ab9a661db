"""FastAPI application setup.

Wires the store, the fetchers and the collector together, and runs the
collector as a background task for the lifetime of the app.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from functools import partial

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blockpulse.adapters.fetchers import fetch_block_height, fetch_btc_price
from blockpulse.adapters.frameworks.fastapi import create_metrics_router
from blockpulse.adapters.storage import SQLiteSampleStorage
from blockpulse.config import Settings
from blockpulse.core.collector import Collector
from blockpulse.core.errors import StoreError
from blockpulse.core.ports import SampleStoragePort

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    storage: SampleStoragePort | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the blockpulse FastAPI application.

    Args:
        settings: Runtime settings. Defaults to ``Settings()``.
        storage: Storage adapter. Defaults to SQLite at ``settings.db_path``.
        transport: Optional httpx transport for the fetchers' client.

    Returns:
        Configured FastAPI application instance. The collector starts with
        the app's lifespan and is cancelled on shutdown.
    """
    settings = settings or Settings()
    if storage is None:
        storage = SQLiteSampleStorage(settings.db_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Open the store and start the collector on startup."""
        try:
            await storage.init()
        except StoreError:
            # Each append retries opening the store; keep serving
            logger.exception("Error creating metrics table")

        client = httpx.AsyncClient(
            timeout=settings.fetch_timeout_seconds, transport=transport
        )
        collector = Collector(
            storage,
            partial(fetch_block_height, client, settings.block_height_url),
            partial(fetch_btc_price, client, settings.btc_price_url),
            interval_seconds=settings.sample_interval_seconds,
        )
        app.state.collector = collector
        task = asyncio.create_task(collector.run_forever(), name="blockpulse-collector")
        app.state.collector_task = task
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            await client.aclose()
            await storage.close()

    app = FastAPI(title="blockpulse", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage
    app.include_router(create_metrics_router(storage, settings.history_limit))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["content-type"],
    )
    return app
