"""Collector loop: fetch both metrics each tick and append on joint success."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from blockpulse.core.errors import FetchError, StoreWriteError
from blockpulse.core.ports import BlockHeightFetcher, PriceFetcher, SampleStoragePort

logger = logging.getLogger(__name__)


class RoundStatus(str, Enum):
    """Outcome of a single collection round."""

    WRITTEN = "written"
    FETCH_FAILED = "fetch_failed"
    WRITE_FAILED = "write_failed"


@dataclass(frozen=True)
class RoundResult:
    """Result object for Collector.run_round.

    Attributes:
        status: What happened in the round.
        sequence_id: Id of the appended sample, set only when WRITTEN.
        errors: Fetch or write errors that caused the round to be dropped.
    """

    status: RoundStatus
    sequence_id: int | None = None
    errors: list[Exception] = field(default_factory=list)


class Collector:
    """Samples both metrics on a fixed period and appends them to storage.

    Rounds run strictly one after another. A round writes a sample only when
    both fetchers succeed; any failure is logged and the round is dropped.
    The fixed period is the only retry mechanism.

    Example:
        ```python
        collector = Collector(
            storage,
            partial(fetch_block_height, client),
            partial(fetch_btc_price, client),
            interval_seconds=20,
        )
        task = asyncio.create_task(collector.run_forever())
        ```
    """

    def __init__(
        self,
        storage: SampleStoragePort,
        fetch_block_height: BlockHeightFetcher,
        fetch_btc_price: PriceFetcher,
        interval_seconds: float = 20.0,
    ) -> None:
        self._storage = storage
        self._fetch_block_height = fetch_block_height
        self._fetch_btc_price = fetch_btc_price
        self._interval = interval_seconds
        self.sampling = False

    async def run_round(self) -> RoundResult:
        """Run one round: fetch both metrics, then append if both succeeded."""
        self.sampling = True
        try:
            height_result, price_result = await asyncio.gather(
                self._fetch_block_height(),
                self._fetch_btc_price(),
                return_exceptions=True,
            )
            errors: list[Exception] = []
            for metric, result in (
                ("block_height", height_result),
                ("btc_price", price_result),
            ):
                if isinstance(result, FetchError):
                    logger.error("Error fetching %s: %s", metric, result)
                    errors.append(result)
                elif isinstance(result, Exception):
                    logger.error(
                        "Unexpected error fetching %s",
                        metric,
                        exc_info=result,
                    )
                    errors.append(result)
                elif isinstance(result, BaseException):
                    # Cancellation and interpreter exits are not round failures
                    raise result
            if errors:
                return RoundResult(status=RoundStatus.FETCH_FAILED, errors=errors)

            logger.info(
                "Fetched block height and BTC price: %s, %s",
                height_result,
                price_result,
            )
            try:
                sequence_id = await self._storage.append(height_result, price_result)
            except (StoreWriteError, ValueError) as e:
                logger.error("Error saving metrics: %s", e)
                return RoundResult(status=RoundStatus.WRITE_FAILED, errors=[e])

            logger.info(
                "Saved metrics",
                extra={
                    "sequence_id": sequence_id,
                    "block_height": height_result,
                    "btc_price": price_result,
                },
            )
            return RoundResult(status=RoundStatus.WRITTEN, sequence_id=sequence_id)
        finally:
            self.sampling = False

    async def run_forever(self) -> None:
        """Run rounds on the fixed period until cancelled.

        The first round starts immediately. A round that overruns the period
        delays the next one instead of stacking rounds.
        """
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        logger.info(
            "Collector started", extra={"interval_seconds": self._interval}
        )
        try:
            while True:
                try:
                    await self.run_round()
                except Exception:
                    logger.exception("Collector round failed unexpectedly")
                next_tick += self._interval
                now = loop.time()
                if next_tick < now:
                    next_tick = now
                await asyncio.sleep(next_tick - now)
        finally:
            logger.info("Collector stopped")
