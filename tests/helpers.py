"""Test helpers shared across unit, integration and feature tests."""

import asyncio
import sqlite3
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from blockpulse.core.errors import FetchError, FetchErrorKind


class ScriptedFetcher:
    """Zero-argument async fetcher that replays a script of results.

    Each call takes the next item; exceptions are raised, anything else is
    returned. The last item repeats once the script runs out.
    """

    def __init__(self, *results: Any) -> None:
        self._results = list(results)
        self.calls = 0

    async def __call__(self) -> Any:
        index = min(self.calls, len(self._results) - 1)
        self.calls += 1
        result = self._results[index]
        if isinstance(result, BaseException):
            raise result
        return result


def fetch_failure(
    metric: str, kind: FetchErrorKind = FetchErrorKind.NETWORK
) -> FetchError:
    """Build a FetchError for scripting fetcher failures."""
    return FetchError(metric, kind, "simulated failure")


def upstream_transport(
    height: Callable[[httpx.Request], httpx.Response] | None = None,
    price: Callable[[httpx.Request], httpx.Response] | None = None,
) -> httpx.MockTransport:
    """Mock transport answering the block height and price endpoints.

    Defaults answer 800000 and 65000.5. Paths are matched by suffix so the
    default upstream URLs can be used unchanged.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/blocks/tip/height"):
            if height is not None:
                return height(request)
            return httpx.Response(200, text="800000")
        if request.url.path.endswith("/simple/price"):
            if price is not None:
                return price(request)
            return httpx.Response(200, json={"bitcoin": {"usd": 65000.5}})
        return httpx.Response(404)

    return httpx.MockTransport(handler)


async def wait_for(
    predicate: Callable[[], Awaitable[bool]], timeout: float = 2.0
) -> bool:
    """Poll an async predicate until it holds or ``timeout`` expires."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if await predicate():
            return True
        await asyncio.sleep(0.01)
    return await predicate()


def execute_sql(db_path: str, sql: str, params: tuple[Any, ...] = ()) -> list[Any]:
    """Run one statement on a separate sqlite3 connection and commit.

    Used to tamper with a database behind a store's back.
    """
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute(sql, params).fetchall()
        conn.commit()
        return rows
    finally:
        conn.close()
