"""SQLite storage adapter for samples."""

import logging

import aiosqlite

from blockpulse.adapters.storage.sqlite_base import AsyncConnectionManager
from blockpulse.core.errors import StoreError, StoreReadError, StoreWriteError
from blockpulse.core.models import Sample, validate_reading

logger = logging.getLogger(__name__)

_METRICS_SCHEMA = """
CREATE TABLE IF NOT EXISTS metrics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    block_height INTEGER NOT NULL,
    btc_price REAL NOT NULL,
    timestamp DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

# Never reuse the previous row's second, even if rows arrive faster than 1 Hz
_INSERT_SAMPLE = """
INSERT INTO metrics (block_height, btc_price, timestamp)
VALUES (?, ?, MAX(
    CURRENT_TIMESTAMP,
    COALESCE(
        (SELECT datetime(timestamp, '+1 second') FROM metrics ORDER BY id DESC LIMIT 1),
        CURRENT_TIMESTAMP
    )
))
"""

_SELECT_RECENT = """
SELECT id, block_height, btc_price, timestamp FROM metrics
ORDER BY id DESC
LIMIT ?
"""

_COUNT_SAMPLES = """
SELECT COUNT(*) FROM metrics
"""


class SQLiteSampleStorage:
    """SQLite implementation of SampleStoragePort.

    Stores samples in the ``metrics`` table through a single shared aiosqlite
    connection. Every operation holds the connection's lock for its whole
    duration, so readers never observe a partially written row.

    AUTOINCREMENT guarantees ids are never reused, even after the newest row
    is lost to a failed transaction. Timestamps come from SQLite's
    CURRENT_TIMESTAMP (UTC) at insert time and are unique per row: a row
    written within the same second as its predecessor is stamped one second
    after it.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._manager = AsyncConnectionManager(db_path, _METRICS_SCHEMA)

    @property
    def manager(self) -> AsyncConnectionManager:
        """The connection manager owning the shared handle."""
        return self._manager

    async def init(self) -> None:
        """Ensure the metrics table exists. Never touches existing rows."""
        try:
            await self._manager.initialize()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to create metrics table: {e}") from e
        logger.info("Metrics store ready", extra={"db_path": self._db_path})

    async def append(self, block_height: int, btc_price: float) -> int:
        """Write one sample and return its sequence id."""
        validate_reading(block_height, btc_price)
        try:
            async with self._manager.operation() as db:
                cursor = await db.execute(
                    _INSERT_SAMPLE, (block_height, float(btc_price))
                )
                sequence_id = cursor.lastrowid
                await db.commit()
        except (aiosqlite.Error, OverflowError) as e:
            raise StoreWriteError(f"Failed to append sample: {e}") from e
        if sequence_id is None:
            raise StoreWriteError("Insert returned no row id")
        return sequence_id

    async def _read_recent(self, limit: int) -> list[Sample]:
        """Read up to ``limit`` samples, newest first."""
        try:
            async with self._manager.operation() as db:
                async with db.execute(_SELECT_RECENT, (limit,)) as cursor:
                    rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreReadError(f"Failed to read samples: {e}") from e
        return [
            Sample(
                sequence_id=row[0],
                block_height=row[1],
                btc_price=row[2],
                observed_at=row[3],
            )
            for row in rows
        ]

    async def recent(self, limit: int) -> list[Sample]:
        """Return up to ``limit`` samples, newest first.

        A storage read failure is logged and degrades to an empty list.
        """
        if limit <= 0:
            return []
        try:
            return await self._read_recent(limit)
        except StoreReadError:
            logger.exception("Error fetching metrics history")
            return []

    async def count(self) -> int:
        """Return total number of samples in storage."""
        try:
            async with self._manager.operation() as db:
                async with db.execute(_COUNT_SAMPLES) as cursor:
                    row = await cursor.fetchone()
                    return row[0] if row else 0
        except aiosqlite.Error as e:
            raise StoreReadError(f"Failed to count samples: {e}") from e

    async def close(self) -> None:
        """Close the shared connection."""
        await self._manager.close()
