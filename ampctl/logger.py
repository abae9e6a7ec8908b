"""Timestamped logging to a log file, optionally echoed to stdout."""

from __future__ import annotations

import enum
import logging
import sys
from datetime import datetime
from typing import Optional

LOGGER_NAME = "ampctl"
TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"
MAX_MESSAGE = 510


class LogPriority(enum.IntEnum):
    CRIT = 0
    WARN = 1
    INFO = 2
    DEBUG = 3

    @property
    def level(self) -> int:
        """The matching standard logging level."""
        return _TO_LEVEL[self]

    @classmethod
    def from_level(cls, level: int) -> LogPriority:
        if level >= logging.ERROR:
            return cls.CRIT
        if level >= logging.WARNING:
            return cls.WARN
        if level >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


_TO_LEVEL = {
    LogPriority.CRIT: logging.CRITICAL,
    LogPriority.WARN: logging.WARNING,
    LogPriority.INFO: logging.INFO,
    LogPriority.DEBUG: logging.DEBUG,
}

_NAMES = {
    LogPriority.CRIT: "CRIT",
    LogPriority.WARN: "WARN",
    LogPriority.INFO: "INFO",
    LogPriority.DEBUG: "DBUG",
}


def priority_name(priority) -> str:
    """Four letter tag of a priority, or NONE when it is not known."""
    try:
        return _NAMES[LogPriority(priority)]
    except ValueError:
        return "NONE"


def format_line(priority, message: str, when: Optional[datetime] = None) -> str:
    """Build one log line: timestamp, priority tag and message."""
    if when is None:
        when = datetime.now()
    stamp = when.strftime(TIMESTAMP_FORMAT)
    return f"{stamp} {priority_name(priority)}: {message[:MAX_MESSAGE]}"


class RigFormatter(logging.Formatter):
    """Formats records in the rig's log line layout."""

    def format(self, record: logging.LogRecord) -> str:
        priority = LogPriority.from_level(record.levelno)
        when = datetime.fromtimestamp(record.created)
        return format_line(priority, record.getMessage(), when)


_handlers: list[logging.Handler] = []


def _root() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    return logger


def setup_logging(path, echo: bool = True) -> logging.Logger:
    """Open the log file for appending and attach handlers.

    Messages go nowhere unless the log file could be opened; when it is open,
    they are echoed to stdout as well if ``echo`` is set.
    """
    logger = _root()
    logger.setLevel(logging.DEBUG)
    if _handlers:
        return logger
    try:
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError:
        return logger
    formatter = RigFormatter()
    file_handler.setFormatter(formatter)
    _handlers.append(file_handler)
    if echo:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(formatter)
        _handlers.append(stream)
    for handler in _handlers:
        logger.addHandler(handler)
    return logger


def shutdown_logging() -> None:
    """Detach and close the handlers set up by setup_logging."""
    logger = logging.getLogger(LOGGER_NAME)
    while _handlers:
        handler = _handlers.pop()
        logger.removeHandler(handler)
        handler.close()