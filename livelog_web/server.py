"""Background HTTP server hosting the live log application."""

from __future__ import annotations

import asyncio
import logging
import socket
import threading
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI

LOGGER = logging.getLogger(__name__)


class LogServer:
    """Runs uvicorn on a daemon thread over a socket bound up front.

    Binding happens in :meth:`start` on the caller's thread so a busy port is
    reported as ``False`` instead of tearing down the host process.
    """

    def __init__(self, app: FastAPI, *, host: str = "0.0.0.0", port: int = 7788, backlog: int = 128) -> None:
        self.app = app
        self.host = host
        self._requested_port = port
        self._backlog = backlog
        self._socket: Optional[socket.socket] = None
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        if self._socket is not None:
            return self._socket.getsockname()[1]
        return self._requested_port

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _bind(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self._requested_port))
            sock.listen(self._backlog)
        except OSError:
            sock.close()
            raise
        return sock

    def start(self) -> bool:
        if self.running:
            return True
        try:
            self._socket = self._bind()
        except OSError as exc:
            LOGGER.error("Live log server could not bind %s:%s: %s", self.host, self._requested_port, exc)
            return False

        config = uvicorn.Config(self.app, log_config=None, access_log=False, lifespan="off")
        self._server = uvicorn.Server(config)
        # Signal handling belongs to the host process, not this thread.
        self._server.install_signal_handlers = lambda: None
        self._thread = threading.Thread(
            target=self._run,
            args=(self._server, self._socket),
            name="livelog-server",
            daemon=True,
        )
        self._thread.start()
        LOGGER.info("Live log server listening on %s:%s", self.host, self.port)
        return True

    def _run(self, server: uvicorn.Server, sock: socket.socket) -> None:
        try:
            asyncio.run(server.serve(sockets=[sock]))
        except SystemExit:
            LOGGER.error("Live log server exited during startup")
        except Exception:  # pylint: disable=broad-except
            LOGGER.exception("Live log server stopped unexpectedly")
        finally:
            sock.close()

    def wait_started(self, timeout: float = 5.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if self._server is not None and self._server.started:
                return True
            if not self.running:
                return False
            time.sleep(0.02)
        return False

    def stop(self, timeout: float = 5.0) -> None:
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout)
        if self._thread.is_alive():
            LOGGER.warning("Live log server did not stop within %.1fs", timeout)
        self._thread = None
        self._server = None
        self._socket = None


__all__ = ["LogServer"]
