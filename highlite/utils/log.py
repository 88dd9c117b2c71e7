"""
Diagnostic logging for highlite.

Highlighted text is the tool's output and goes to stdout. Everything
else (warnings about undecodable lines, journal exits, debug summaries)
goes through the standard logging module to stderr, so it never mixes
with the highlighted stream.

Log Line Format:
    <timestamp> [<logger>] <LEVEL> <message>

Example:
    2024-01-15T12:00:00Z [highlite.pipeline] WARNING line 7: cannot decode as UTF-8
"""

from __future__ import annotations

import datetime
import logging
import os
import sys

ROOT_LOGGER = "highlite"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class UtcFormatter(logging.Formatter):
    """Format records with a compact ISO 8601 UTC timestamp."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s [%(name)s] %(levelname)s %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return (
            datetime.datetime.fromtimestamp(record.created, datetime.timezone.utc)
            .isoformat(timespec="seconds")
            # Replace the verbose +00:00 suffix with the more compact Z
            .replace("+00:00", "Z")
        )


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the highlite namespace."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def default_level() -> int:
    """Level from HIGHLITE_LOG_LEVEL, WARNING when unset or unknown."""
    name = os.environ.get("HIGHLITE_LOG_LEVEL", "WARNING").upper()
    return LOG_LEVELS.get(name, logging.WARNING)


def configure_logging(level: int | None = None, stream=None) -> logging.Logger:
    """
    Attach a stderr handler to the highlite root logger.

    Calling this again replaces the handler rather than adding a second
    one, so tests and repeated CLI invocations don't duplicate output.

    Args:
        level: Logging level; defaults to default_level().
        stream: Destination stream; defaults to sys.stderr at call time.

    Returns:
        logging.Logger: The configured highlite root logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(default_level() if level is None else level)

    for handler in list(logger.handlers):
        if getattr(handler, "_highlite", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(UtcFormatter())
    handler._highlite = True
    logger.addHandler(handler)
    # Keep records away from any handlers an embedding app put on root
    logger.propagate = False
    return logger
