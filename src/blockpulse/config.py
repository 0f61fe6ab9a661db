"""Runtime settings.

Every setting has a default matching the baseline behavior and can be
overridden with a ``BLOCKPULSE_*`` environment variable.
"""

import math
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from blockpulse.adapters.fetchers import BLOCK_HEIGHT_URL, BTC_PRICE_URL
from blockpulse.core.errors import ConfigError

ENV_PREFIX = "BLOCKPULSE_"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    """Collector and server settings.

    Attributes:
        sample_interval_seconds: Period between collection rounds.
        history_limit: Number of samples returned by /api/metrics.
        listen_host: Interface the HTTP server binds to.
        listen_port: Port the HTTP server binds to.
        db_path: SQLite database file (":memory:" for a throwaway store).
        block_height_url: Endpoint returning the chain tip height.
        btc_price_url: Endpoint returning the BTC spot price.
        fetch_timeout_seconds: Per-request timeout for both fetchers.
        log_level: Console log level.
    """

    sample_interval_seconds: float = 20.0
    history_limit: int = 50
    listen_host: str = "0.0.0.0"
    listen_port: int = 8080
    db_path: str = "metrics.db"
    block_height_url: str = BLOCK_HEIGHT_URL
    btc_price_url: str = BTC_PRICE_URL
    fetch_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not (
            math.isfinite(self.sample_interval_seconds)
            and self.sample_interval_seconds > 0
        ):
            raise ConfigError("sample_interval_seconds must be finite and > 0")
        if self.history_limit < 1:
            raise ConfigError("history_limit must be >= 1")
        if not 1 <= self.listen_port <= 65535:
            raise ConfigError("listen_port must be between 1 and 65535")
        if not (
            math.isfinite(self.fetch_timeout_seconds)
            and self.fetch_timeout_seconds > 0
        ):
            raise ConfigError("fetch_timeout_seconds must be finite and > 0")
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {sorted(VALID_LOG_LEVELS)}")
        if not self.db_path:
            raise ConfigError("db_path must not be empty")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``BLOCKPULSE_*`` variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Raises:
            ConfigError: If a variable cannot be parsed or is out of range.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            # Every field's default carries its type (float, int or str)
            parse: Callable[[str], Any] = type(f.default)
            try:
                values[f.name] = parse(raw.strip())
            except ValueError as e:
                raise ConfigError(
                    f"{ENV_PREFIX}{f.name.upper()}: cannot parse {raw!r}"
                ) from e
        return cls(**values)
