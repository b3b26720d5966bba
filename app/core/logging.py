"""Structured logging configuration.

Configures the root logger with a structured format including timestamp,
level, and module name.  The level comes from ``settings.LOG_LEVEL`` unless
an explicit override is passed (tests use this).
"""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "uvicorn.access", "apscheduler")


def setup_logging(level: str | None = None) -> None:
    """Install a single stdout handler on the root logger.

    Calling this more than once replaces the previous handler instead of
    stacking duplicates.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(
        logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
