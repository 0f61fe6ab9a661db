"""Shared-handle connection manager for SQLite storage adapters."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

logger = logging.getLogger(__name__)


class AsyncConnectionManager:
    """Owns one aiosqlite connection and serializes every operation on it.

    All callers share a single database handle. Each store operation holds
    ``operation()`` for its whole duration, so an append is never interleaved
    with a read. The lock is created lazily to avoid binding an event loop
    at construction time.

    If an operation fails while holding the handle, its open transaction is
    rolled back before the lock is released, so the next caller always finds
    a clean handle.
    """

    def __init__(self, db_path: str, schema: str) -> None:
        self._db_path = db_path
        self._schema = schema
        self._conn: aiosqlite.Connection | None = None
        self._lock: asyncio.Lock | None = None
        self.recoveries = 0

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the operation lock (lazy to avoid event loop issues)."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def _open(self) -> aiosqlite.Connection:
        """Open the shared connection and apply the schema."""
        conn = await aiosqlite.connect(self._db_path)
        try:
            if self._db_path != ":memory:":
                await conn.execute("PRAGMA journal_mode=WAL")
            await conn.executescript(self._schema)
            await conn.commit()
        except BaseException:
            await conn.close()
            raise
        return conn

    async def initialize(self) -> None:
        """Open the handle if needed and ensure the schema exists.

        Idempotent: the schema only uses ``CREATE ... IF NOT EXISTS``.
        """
        async with self._get_lock():
            if self._conn is None:
                self._conn = await self._open()
            else:
                await self._conn.executescript(self._schema)
                await self._conn.commit()

    @asynccontextmanager
    async def operation(self) -> AsyncIterator[aiosqlite.Connection]:
        """Context manager granting exclusive use of the shared handle."""
        async with self._get_lock():
            if self._conn is None:
                self._conn = await self._open()
            try:
                yield self._conn
            except BaseException:
                await self._recover()
                raise

    async def _recover(self) -> None:
        """Reset the handle after its holder failed mid-transaction.

        Failures that left no transaction open need no recovery.
        """
        if self._conn is None:
            return
        try:
            in_transaction = self._conn.in_transaction
        except (aiosqlite.Error, ValueError):
            # Handle already closed underneath us; treat it as dirty
            in_transaction = True
        if not in_transaction:
            logger.debug("Store operation failed with no open transaction")
            return
        self.recoveries += 1
        logger.warning(
            "Store operation failed while holding the handle, recovering",
            extra={"db_path": self._db_path},
        )
        try:
            await self._conn.rollback()
        except aiosqlite.Error:
            # The handle itself is broken; reopen on next use
            logger.warning("Rollback failed, discarding connection")
            conn, self._conn = self._conn, None
            try:
                await conn.close()
            except aiosqlite.Error:
                logger.debug("Closing broken connection failed", exc_info=True)

    async def close(self) -> None:
        """Close the shared connection."""
        async with self._get_lock():
            if self._conn is not None:
                await self._conn.close()
                self._conn = None
