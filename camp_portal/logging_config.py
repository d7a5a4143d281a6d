"""
Logging setup shared by the portal API and the admin scripts.

Every line reads: 2026-01-06T14:05:52Z [source] LEVEL message

LOG_LEVEL selects the verbosity:
- INFO (default): submissions, room changes, sign-ups
- DEBUG: allocator walks and role resolution per session generation
- TRACE: the PocketBase query behind each repository call
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVELS = {"TRACE": TRACE, "DEBUG": logging.DEBUG, "INFO": logging.INFO}


class ISO8601Formatter(logging.Formatter):
    """UTC timestamp, bracketed source tag, level name, message."""

    def __init__(self, source: str = "portal"):
        super().__init__()
        self.source = source

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        line = f"{timestamp} [{self.source}] {record.levelname} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access lines for GET /health below DEBUG."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno <= logging.DEBUG:
            return True
        return '"GET /health ' not in record.getMessage()


def _level_from_env(debug: bool | None) -> int:
    if debug:
        return logging.DEBUG
    return _LEVELS.get(os.getenv("LOG_LEVEL", "").upper(), logging.INFO)


def configure_logging(
    source: str = "portal",
    level: int | None = None,
    debug: bool | None = None,
) -> logging.Logger:
    """Install the portal handler on the root logger and on uvicorn's loggers.

    Args:
        source: Tag shown in brackets, e.g. "api" or "report"
        level: Explicit level; otherwise taken from `debug` or LOG_LEVEL
        debug: Force DEBUG

    Returns:
        The root logger
    """
    if level is None:
        level = _level_from_env(debug)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ISO8601Formatter(source=source))

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)

    # uvicorn.error propagates into "uvicorn"; access lines go through their own logger
    for name in ("uvicorn", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers[:] = [handler]
        uvicorn_logger.setLevel(level)
        uvicorn_logger.propagate = False
    access_logger = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, HealthCheckFilter) for f in access_logger.filters):
        access_logger.addFilter(HealthCheckFilter())

    # The pocketbase SDK talks through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
