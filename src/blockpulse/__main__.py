"""Entry point: ``python -m blockpulse``."""

import logging

import uvicorn
from dotenv import load_dotenv

from blockpulse.adapters.logging import configure_logging
from blockpulse.app import create_app
from blockpulse.config import Settings

logger = logging.getLogger("blockpulse")


def main() -> None:
    """Load settings, configure logging and serve until killed."""
    load_dotenv()
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info(
        "Starting backend",
        extra={"host": settings.listen_host, "port": settings.listen_port},
    )
    uvicorn.run(
        create_app(settings),
        host=settings.listen_host,
        port=settings.listen_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
