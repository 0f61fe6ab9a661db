"""FastAPI adapter for the metrics history endpoint."""

import logging

from fastapi import APIRouter, Response

from blockpulse.core.encoding import encode_samples
from blockpulse.core.errors import StoreError
from blockpulse.core.ports import SampleStoragePort

logger = logging.getLogger(__name__)


def create_metrics_router(
    storage: SampleStoragePort,
    history_limit: int = 50,
) -> APIRouter:
    """Create a FastAPI router with the /api/metrics endpoint.

    Args:
        storage: Storage adapter implementing SampleStoragePort.
        history_limit: Maximum number of samples returned per request.

    Returns:
        APIRouter with /api/metrics configured.
    """
    router = APIRouter()

    @router.get("/api/metrics")
    async def get_metrics() -> Response:
        """Return the most recent samples as a JSON array, newest first.

        Storage failures degrade to an empty array, never a 5xx.
        """
        try:
            samples = await storage.recent(history_limit)
        except StoreError:
            logger.exception("Error fetching metrics history")
            samples = []
        return Response(content=encode_samples(samples), media_type="application/json")

    return router
