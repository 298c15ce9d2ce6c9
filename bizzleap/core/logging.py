"""Logging configuration."""

import logging
import sys

from bizzleap.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure the root logger from settings."""
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }
    level = level_map.get(settings.LOG_LEVEL.lower(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logging.getLogger("uvicorn").setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(level)
    # SQL echo only in debug mode
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )

    logging.getLogger(__name__).info("Logging configured at level: %s", settings.LOG_LEVEL)
