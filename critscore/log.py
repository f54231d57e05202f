"""
Logging setup for critscore.

Logs go to stderr; stdout may be carrying the CSV output.

Two log environments:
    dev: human-readable lines
    json: one JSON object per line, for log collectors
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

ENV_DEV = "dev"
ENV_JSON = "json"
ENVS = [ENV_DEV, ENV_JSON]


class JsonFormatter(logging.Formatter):
    """Formats each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(
    level: str = "INFO",
    stream: Optional[TextIO] = None,
    env: str = ENV_DEV,
) -> logging.Logger:
    """
    Configure the package logger with a single stream handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Destination stream (default: stderr)
        env: Output format, "dev" or "json"

    Returns:
        The configured "critscore" logger
    """
    logger = logging.getLogger("critscore")
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()  # Re-running main() must not stack handlers

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    if env == ENV_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Remove handlers installed by configure_logging (useful for testing)."""
    logger = logging.getLogger("critscore")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
