"""Opt-in logging for ckmsquantile.

Nothing is printed by default: the package logger only carries a
NullHandler. Estimators report each flush at DEBUG on
``ckmsquantile.estimator`` (or on a logger passed at construction) with the
flush counters attached to the record, which ``JsonFormatter`` writes out as
fields.

    import ckmsquantile

    ckmsquantile.enable_console_logging("DEBUG")
    ckmsquantile.enable_file_logging("flushes.log", json=True)
    ckmsquantile.configure_from_env()

Environment variables read by ``configure_from_env``:
    CKMS_LOGGING: level name (DEBUG, INFO, ...)
    CKMS_LOG_FILE: rotating log file path
    CKMS_LOG_JSON: "1" for one JSON object per line
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
]

LOGGER_NAME = "ckmsquantile"

ENV_LEVEL = "CKMS_LOGGING"
ENV_FILE = "CKMS_LOG_FILE"
ENV_JSON = "CKMS_LOG_JSON"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"

# Counters the estimator attaches to each flush record.
FLUSH_FIELDS = ("merged", "retained", "removed", "count")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, flush counters included when present."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in FLUSH_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def _install[H: logging.Handler](handler: H, level: str | int, formatter: logging.Formatter) -> H:
    logger = logging.getLogger(LOGGER_NAME)
    handler.setFormatter(formatter)
    logger.setLevel(_level(level))
    logger.addHandler(handler)
    return handler


def enable_console_logging(level: str | int = "INFO", fmt: str = DEFAULT_FORMAT) -> logging.StreamHandler:
    """Log to stderr as plain text."""
    return _install(logging.StreamHandler(), level, logging.Formatter(fmt))


def enable_json_logging(level: str | int = "INFO") -> logging.StreamHandler:
    """Log to stderr as JSON lines."""
    return _install(logging.StreamHandler(), level, JsonFormatter())


def enable_file_logging(
    path: str | Path,
    level: str | int = "INFO",
    *,
    json: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> RotatingFileHandler:
    """Log to a size-rotated file, creating its directory.

    Args:
        path: Log file.
        level: Level name or number.
        json: Write JSON lines instead of plain text.
        max_bytes: Size at which the file rolls over.
        backup_count: Rolled-over files kept.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    formatter = JsonFormatter() if json else logging.Formatter(DEFAULT_FORMAT)
    return _install(handler, level, formatter)


def configure_from_env() -> logging.Handler | None:
    """Enable logging from the CKMS_* variables.

    Returns the installed handler, or None when neither a level nor a file
    is set.
    """
    level = os.environ.get(ENV_LEVEL, "")
    log_file = os.environ.get(ENV_FILE, "")
    as_json = os.environ.get(ENV_JSON, "") == "1"

    if not level and not log_file:
        return None
    level = level or "INFO"

    if log_file:
        return enable_file_logging(log_file, level, json=as_json)
    if as_json:
        return enable_json_logging(level)
    return enable_console_logging(level)


def set_level(level: str | int) -> None:
    logging.getLogger(LOGGER_NAME).setLevel(_level(level))


def disable_logging() -> None:
    """Close every installed handler and mute the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        if isinstance(handler, logging.NullHandler):
            continue
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.CRITICAL + 1)
