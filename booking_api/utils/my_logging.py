# booking_api/utils/my_logging.py
"""Logging configuration for the booking service"""
import logging
import sys
from typing import Optional

from booking_api.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every query/connection at INFO
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic",
    "redis",
    "httpx",
    "uvicorn.access",
)


def setup_logging(verbose: bool = True, level: Optional[str] = None):
    """
    Configure root logging once per process.

    ``level`` overrides LOG_LEVEL; with ``verbose=False`` only warnings from
    the service itself and errors from QUIET_LOGGERS get through.
    """
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    root_level = getattr(logging, level_name, logging.INFO) if verbose else logging.WARNING

    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    quiet_level = logging.WARNING if verbose else logging.ERROR
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger("booking_api").info(
        f"Logging configured at {logging.getLevelName(root_level)} "
        f"(booking lock backend: {settings.BOOKING_LOCK_BACKEND})"
    )
