"""Logging utilities for the live log service."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .buffer import LogBuffer, LogLevel

CONSOLE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
CAPTURE_FORMAT = "%(name)s: %(message)s"


def level_for(levelno: int) -> LogLevel:
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARNING
    return LogLevel.MESSAGE


class LogBufferHandler(logging.Handler):
    """Forwards every log record into a :class:`LogBuffer`.

    Records emitted by the same thread while it is already inside ``emit``
    are dropped so a logging formatter or filter cannot feed itself.
    """

    def __init__(self, buffer: LogBuffer, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.buffer = buffer
        self._local = threading.local()
        self.setFormatter(logging.Formatter(CAPTURE_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(self._local, "active", False):
            return
        self._local.active = True
        try:
            msg = self.format(record)
            self.buffer.record(level_for(record.levelno), msg)
        except Exception:  # pylint: disable=broad-except
            self.handleError(record)
        finally:
            self._local.active = False

    def attach(self, logger: Optional[logging.Logger] = None) -> None:
        target = logger or logging.getLogger()
        if self not in target.handlers:
            target.addHandler(self)

    def detach(self, logger: Optional[logging.Logger] = None) -> None:
        (logger or logging.getLogger()).removeHandler(self)


def configure_logging(
    buffer_handler: LogBufferHandler,
    *,
    level: str = "INFO",
    log_file: str | None = None,
) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    formatter = logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(buffer_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
