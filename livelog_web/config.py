"""Configuration loading utilities for the live log service."""

from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import yaml

DEFAULT_PORT = 7788
DEFAULT_POLL_INTERVALS_MS: Tuple[int, ...] = (100, 500, 1000, 5000, 10000, 30000)
CONFIG_ENV_VAR = "LIVELOG_CONFIG"

_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(RuntimeError):
    """Raised when the provided configuration file is invalid."""


@dataclass(slots=True)
class WebConfig:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigurationError("web host must not be empty")
        if not (0 < self.port < 65536):
            raise ConfigurationError(f"Invalid web port {self.port}")


@dataclass(slots=True)
class ViewerConfig:
    title: str = "Live Log"
    poll_intervals_ms: Tuple[int, ...] = DEFAULT_POLL_INTERVALS_MS
    default_interval_ms: int = 1000

    def __post_init__(self) -> None:
        self.poll_intervals_ms = tuple(int(value) for value in self.poll_intervals_ms)
        if not self.poll_intervals_ms:
            raise ConfigurationError("poll_intervals_ms must not be empty")
        if any(value <= 0 for value in self.poll_intervals_ms):
            raise ConfigurationError("poll_intervals_ms values must be > 0")
        if self.default_interval_ms not in self.poll_intervals_ms:
            raise ConfigurationError(
                f"default_interval_ms {self.default_interval_ms} is not one of {list(self.poll_intervals_ms)}"
            )


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    capture_level: str = "DEBUG"
    file: Optional[str] = None

    def __post_init__(self) -> None:
        self.level = str(self.level).upper()
        self.capture_level = str(self.capture_level).upper()
        if self.level not in _LEVEL_NAMES:
            raise ConfigurationError(f"Unknown logging level {self.level}")
        if self.capture_level not in _LEVEL_NAMES:
            raise ConfigurationError(f"Unknown capture level {self.capture_level}")

    @property
    def capture_levelno(self) -> int:
        return getattr(logging, self.capture_level)


@dataclass(slots=True)
class ServiceConfig:
    web: WebConfig = field(default_factory=WebConfig)
    viewer: ViewerConfig = field(default_factory=ViewerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _load_yaml(path: pathlib.Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Configuration file {path} does not exist") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Unable to parse YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("Top level of configuration must be a mapping")
    return data


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"{name} section must be a mapping when provided")
    return section


def load_config(path: Optional[pathlib.Path] = None) -> ServiceConfig:
    """Load configuration from a YAML file, or return defaults when ``path`` is None."""

    if path is None:
        return ServiceConfig()
    raw = _load_yaml(pathlib.Path(path))
    try:
        return ServiceConfig(
            web=WebConfig(**_section(raw, "web")),
            viewer=ViewerConfig(**_section(raw, "viewer")),
            logging=LoggingConfig(**_section(raw, "logging")),
        )
    except TypeError as exc:
        raise ConfigurationError(f"Invalid configuration in {path}: {exc}") from exc


def config_path_from_env() -> Optional[pathlib.Path]:
    raw = os.environ.get(CONFIG_ENV_VAR)
    return pathlib.Path(raw) if raw else None


__all__ = [
    "ConfigurationError",
    "LoggingConfig",
    "ServiceConfig",
    "ViewerConfig",
    "WebConfig",
    "config_path_from_env",
    "load_config",
]
