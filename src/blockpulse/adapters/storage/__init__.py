"""Storage adapters implementing SampleStoragePort."""

from blockpulse.adapters.storage.in_memory import InMemorySampleStorage
from blockpulse.adapters.storage.sqlite_samples import SQLiteSampleStorage

__all__ = [
    "InMemorySampleStorage",
    "SQLiteSampleStorage",
]
