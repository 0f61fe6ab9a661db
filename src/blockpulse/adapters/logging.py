"""Console logging setup for blockpulse.

Log calls across the package pass structured fields through ``extra=``.
ConsoleFormatter appends those fields to the message as ``key=value`` pairs
so they show up on the console alongside every fetch and save event.
"""

import logging
import sys

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def extra_attributes(record: logging.LogRecord) -> dict[str, str | int | float | bool]:
    """Return the scalar fields passed to a logging call via ``extra=``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_LOGRECORD_ATTRS
        and not key.startswith("_")
        and isinstance(value, (str, int, float, bool))
    }


class ConsoleFormatter(logging.Formatter):
    """Formatter that renders extra fields after the message.

    Example:
        ```python
        logger.info("Saved metrics", extra={"sequence_id": 7})
        # 2024-01-01 00:00:00,000 INFO blockpulse.core.collector: Saved metrics sequence_id=7
        ```
    """

    def __init__(self, fmt: str = DEFAULT_FORMAT) -> None:
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, then append its extra fields."""
        text = super().format(record)
        attributes = extra_attributes(record)
        if not attributes:
            return text
        suffix = " ".join(f"{key}={value}" for key, value in attributes.items())
        first_line, sep, rest = text.partition("\n")
        return f"{first_line} {suffix}{sep}{rest}"


def configure_logging(level: str = "INFO") -> logging.Handler:
    """Install a console handler on the ``blockpulse`` logger.

    Calling this again replaces the previously installed handler.

    Args:
        level: Log level name (e.g. "DEBUG", "INFO").

    Returns:
        The installed handler.
    """
    root = logging.getLogger("blockpulse")
    for existing in list(root.handlers):
        if getattr(existing, "_blockpulse_console", False):
            root.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ConsoleFormatter())
    handler._blockpulse_console = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level.upper())
    return handler
