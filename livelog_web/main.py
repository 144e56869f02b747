"""Entry point for running the live log viewer as a standalone service."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

import uvicorn

from . import config as config_module
from .buffer import LogBuffer
from .logging_utils import LogBufferHandler, configure_logging
from .web import create_app

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve captured log lines to a browser viewer")
    parser.add_argument(
        "--config",
        type=Path,
        default=config_module.config_path_from_env(),
        help=f"Path to YAML configuration file (default: ${config_module.CONFIG_ENV_VAR})",
    )
    parser.add_argument("--host", help="Override the bind address")
    parser.add_argument("--port", type=int, help="Override the TCP port")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the root logging level",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> config_module.ServiceConfig:
    cfg = config_module.load_config(args.config)
    if args.host or args.port:
        cfg.web = config_module.WebConfig(host=args.host or cfg.web.host, port=args.port or cfg.web.port)
    if args.log_level:
        cfg.logging.level = args.log_level
    return cfg


async def run_service(cfg: config_module.ServiceConfig) -> None:
    buffer = LogBuffer()
    log_handler = LogBufferHandler(buffer, level=cfg.logging.capture_levelno)
    configure_logging(log_handler, level=cfg.logging.level, log_file=cfg.logging.file)

    app = create_app(
        buffer,
        title=cfg.viewer.title,
        poll_intervals=cfg.viewer.poll_intervals_ms,
        default_interval_ms=cfg.viewer.default_interval_ms,
    )
    server_config = uvicorn.Config(
        app,
        host=cfg.web.host,
        port=cfg.web.port,
        loop="asyncio",
        log_config=None,
    )
    server = uvicorn.Server(server_config)
    LOGGER.info("Live log viewer listening on %s:%s", cfg.web.host, cfg.web.port)
    await server.serve()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    try:
        cfg = build_config(args)
    except config_module.ConfigurationError as exc:
        raise SystemExit(f"Configuration error: {exc}")
    asyncio.run(run_service(cfg))


if __name__ == "__main__":
    main()
