"""blockpulse - chain tip height and BTC price telemetry collector.

Samples both metrics on a fixed period, appends them to a SQLite log and
serves the most recent samples at ``GET /api/metrics``.
"""

from blockpulse.adapters.storage import InMemorySampleStorage, SQLiteSampleStorage
from blockpulse.config import Settings
from blockpulse.core.collector import Collector, RoundResult, RoundStatus
from blockpulse.core.errors import (
    BlockpulseError,
    ConfigError,
    FetchError,
    FetchErrorKind,
    StoreError,
    StoreReadError,
    StoreWriteError,
)
from blockpulse.core.models import Sample
from blockpulse.core.ports import SampleStoragePort

__all__ = [
    "BlockpulseError",
    "Collector",
    "ConfigError",
    "FetchError",
    "FetchErrorKind",
    "InMemorySampleStorage",
    "RoundResult",
    "RoundStatus",
    "SQLiteSampleStorage",
    "Sample",
    "SampleStoragePort",
    "Settings",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
]
