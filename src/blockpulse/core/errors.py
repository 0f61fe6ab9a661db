"""Exception hierarchy shared by fetchers, storage and the collector."""

from enum import Enum


class BlockpulseError(Exception):
    """Base class for all blockpulse errors."""


class FetchErrorKind(str, Enum):
    """Why a fetch failed."""

    NETWORK = "network"
    PARSE = "parse"


class FetchError(BlockpulseError):
    """A fetcher could not produce its value.

    Attributes:
        metric: Name of the metric being fetched (e.g. "block_height").
        kind: NETWORK for transport errors and non-2xx responses,
            PARSE for malformed payloads.
    """

    def __init__(self, metric: str, kind: FetchErrorKind, message: str) -> None:
        super().__init__(f"{metric} fetch failed ({kind.value}): {message}")
        self.metric = metric
        self.kind = kind


class StoreError(BlockpulseError):
    """Base class for storage failures."""


class StoreWriteError(StoreError):
    """An append could not be made durable. No row was written."""


class StoreReadError(StoreError):
    """A read could not be served by the storage backend."""


class ConfigError(BlockpulseError):
    """A configuration value is missing or invalid."""
