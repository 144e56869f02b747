"""Development server entrypoint with auto-reload support.

Run with:

  LIVELOG_CONFIG=./config.local.yaml \
  uvicorn livelog_web.devserver:app --reload --host 127.0.0.1 --port 7788

Builds the same buffer and web app as the main service and emits a sample
line at every level so the viewer has something to show.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Optional

from .buffer import LogBuffer
from .config import config_path_from_env, load_config
from .logging_utils import LogBufferHandler, configure_logging
from .web import create_app

LOGGER = logging.getLogger("livelog_web.demo")

HEARTBEAT_SECONDS = 2.0

cfg = load_config(config_path_from_env())
buffer = LogBuffer()
log_handler = LogBufferHandler(buffer, level=cfg.logging.capture_levelno)
configure_logging(log_handler, level=cfg.logging.level, log_file=cfg.logging.file)

app = create_app(
    buffer,
    title=f"{cfg.viewer.title} (dev)",
    poll_intervals=cfg.viewer.poll_intervals_ms,
    default_interval_ms=cfg.viewer.default_interval_ms,
)

_heartbeat: Optional[asyncio.Task] = None


async def _emit_samples() -> None:
    for tick in itertools.count(1):
        if tick % 10 == 0:
            LOGGER.error("Heartbeat %d: sample error", tick)
        elif tick % 5 == 0:
            LOGGER.warning("Heartbeat %d: sample warning", tick)
        else:
            LOGGER.info("Heartbeat %d", tick)
        await asyncio.sleep(HEARTBEAT_SECONDS)


@app.on_event("startup")
async def _on_startup() -> None:
    global _heartbeat
    _heartbeat = asyncio.create_task(_emit_samples(), name="livelog-heartbeat")


@app.on_event("shutdown")
async def _on_shutdown() -> None:
    if _heartbeat is not None:
        _heartbeat.cancel()
