from __future__ import annotations

import logging
import sys
from typing import Iterable

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-request chatter from the web server and the HTTP client.
QUIET_LOGGERS = ("uvicorn.access", "watchfiles", "httpx", "httpcore")


def configure_logging(level: str = "INFO", *, quiet: Iterable[str] = QUIET_LOGGERS) -> int:
    """Send every log record to stdout in one format; returns the level applied.

    Safe to call again: existing root handlers are replaced.
    """
    numeric_level = logging.getLevelName(str(level or "").upper())
    invalid = not isinstance(numeric_level, int)
    if invalid:
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    if invalid:
        logging.getLogger(__name__).warning("Invalid log level %r, using INFO", level)
    return numeric_level
