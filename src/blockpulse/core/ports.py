"""Port interfaces for storage and fetch adapters.

These protocols define the contracts that adapters must implement.
The collector and the query service depend only on these interfaces,
not on concrete implementations.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from blockpulse.core.models import Sample

# A fetcher is a zero-argument coroutine function returning one scalar.
# Adapters bind their HTTP client and URL with functools.partial.
BlockHeightFetcher = Callable[[], Awaitable[int]]
PriceFetcher = Callable[[], Awaitable[float]]


@runtime_checkable
class SampleStoragePort(Protocol):
    """Port for the append-only sample store.

    Adapters implementing this protocol persist samples and serve the most
    recent ones. Examples: InMemorySampleStorage, SQLiteSampleStorage.
    """

    async def init(self) -> None:
        """Ensure the schema exists. Safe to call on every start."""
        ...

    async def append(self, block_height: int, btc_price: float) -> int:
        """Durably write one sample and return its sequence id.

        Raises:
            StoreWriteError: If the sample could not be written.
            ValueError: If the reading is out of range.
        """
        ...

    async def recent(self, limit: int) -> list[Sample]:
        """Return up to ``limit`` samples, newest first.

        Returns an empty list when the store is empty.
        """
        ...

    async def count(self) -> int:
        """Return the total number of stored samples."""
        ...

    async def close(self) -> None:
        """Release any held resources."""
        ...
