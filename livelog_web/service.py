"""Composition root for embedding the live log viewer in a host application."""

from __future__ import annotations

import logging
from typing import Optional, Union

from .buffer import LogBuffer, LogLevel
from .config import ServiceConfig
from .logging_utils import LogBufferHandler
from .server import LogServer
from .web import create_app

_LOGGER = logging.getLogger(__name__)


class LiveLogService:
    """Owns the buffer, the capturing handler and the background server.

    ``logger`` is the logger whose records are captured (root by default).
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        buffer: Optional[LogBuffer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config or ServiceConfig()
        self.buffer = buffer if buffer is not None else LogBuffer()
        self._logger = logger
        self.log_handler = LogBufferHandler(self.buffer, level=self._config.logging.capture_levelno)
        viewer = self._config.viewer
        self.app = create_app(
            self.buffer,
            title=viewer.title,
            poll_intervals=viewer.poll_intervals_ms,
            default_interval_ms=viewer.default_interval_ms,
        )
        self.server = LogServer(self.app, host=self._config.web.host, port=self._config.web.port)

    @property
    def url(self) -> str:
        host = self.server.host
        if host in ("0.0.0.0", "::", ""):
            host = "localhost"
        return f"http://{host}:{self.server.port}/"

    def start(self) -> bool:
        self.log_handler.attach(self._logger)
        started = self.server.start()
        if not started:
            _LOGGER.warning("Live log viewer unavailable; log capture continues in memory")
        return started

    def stop(self) -> None:
        self.log_handler.detach(self._logger)
        self.server.stop()

    def record(self, level: Union[LogLevel, str], message: object) -> None:
        self.buffer.record(level, message)
