"""Live log capture and browser viewer."""

from .buffer import LogBuffer, LogEntry, LogLevel
from .config import ServiceConfig, load_config
from .logging_utils import LogBufferHandler
from .service import LiveLogService

__all__ = [
    "LiveLogService",
    "LogBuffer",
    "LogBufferHandler",
    "LogEntry",
    "LogLevel",
    "ServiceConfig",
    "load_config",
]
