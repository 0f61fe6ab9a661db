"""In-memory storage adapter for samples."""

import asyncio
from datetime import UTC, datetime, timedelta

from blockpulse.core.models import Sample, validate_reading

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class InMemorySampleStorage:
    """In-memory implementation of SampleStoragePort.

    Stores samples in a list. Suitable for testing and for running without
    a database file where persistence is not required.
    """

    def __init__(self) -> None:
        self._samples: list[Sample] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def init(self) -> None:
        """Nothing to create; existing samples are kept."""

    async def append(self, block_height: int, btc_price: float) -> int:
        """Write one sample and return its sequence id."""
        validate_reading(block_height, btc_price)
        async with self._lock:
            observed_at = datetime.now(UTC).strftime(_TIMESTAMP_FORMAT)
            if self._samples and observed_at <= self._samples[-1].observed_at:
                previous = datetime.strptime(
                    self._samples[-1].observed_at, _TIMESTAMP_FORMAT
                )
                observed_at = (previous + timedelta(seconds=1)).strftime(
                    _TIMESTAMP_FORMAT
                )
            sample = Sample(
                sequence_id=self._next_id,
                block_height=block_height,
                btc_price=float(btc_price),
                observed_at=observed_at,
            )
            self._next_id += 1
            self._samples.append(sample)
            return sample.sequence_id

    async def recent(self, limit: int) -> list[Sample]:
        """Return up to ``limit`` samples, newest first."""
        if limit <= 0:
            return []
        async with self._lock:
            return list(reversed(self._samples[-limit:]))

    async def count(self) -> int:
        """Return total number of samples in storage."""
        return len(self._samples)

    async def close(self) -> None:
        """Nothing to release."""
