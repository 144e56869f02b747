"""Tests for configuration loading and the command line overrides."""

import logging
from pathlib import Path

import pytest

from livelog_web.config import (
    ConfigurationError,
    ServiceConfig,
    ViewerConfig,
    WebConfig,
    config_path_from_env,
    load_config,
)
from livelog_web.main import build_config, parse_args


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_path():
    cfg = load_config(None)
    assert cfg.web.host == "0.0.0.0"
    assert cfg.web.port == 7788
    assert cfg.viewer.default_interval_ms == 1000
    assert cfg.logging.capture_levelno == logging.DEBUG


def test_load_full_file(tmp_path):
    path = _write(
        tmp_path,
        """
web:
  host: 127.0.0.1
  port: 9000
viewer:
  title: Game Log
  poll_intervals_ms: [200, 800]
  default_interval_ms: 800
logging:
  level: debug
  capture_level: warning
  file: /tmp/livelog.log
""",
    )
    cfg = load_config(path)
    assert cfg.web == WebConfig(host="127.0.0.1", port=9000)
    assert cfg.viewer.title == "Game Log"
    assert cfg.viewer.poll_intervals_ms == (200, 800)
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.capture_levelno == logging.WARNING
    assert cfg.logging.file == "/tmp/livelog.log"


def test_empty_file_gives_defaults(tmp_path):
    assert load_config(_write(tmp_path, "")) == ServiceConfig()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="does not exist"):
        load_config(tmp_path / "absent.yaml")


def test_non_mapping_root(tmp_path):
    with pytest.raises(ConfigurationError, match="mapping"):
        load_config(_write(tmp_path, "- a\n- b\n"))


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigurationError, match="Unable to parse"):
        load_config(_write(tmp_path, "web: [unclosed\n"))


def test_unknown_key(tmp_path):
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_config(_write(tmp_path, "web:\n  listen: 1\n"))


def test_section_must_be_mapping(tmp_path):
    with pytest.raises(ConfigurationError, match="web section"):
        load_config(_write(tmp_path, "web: 8080\n"))


@pytest.mark.parametrize("port", [0, 70000])
def test_invalid_port(port):
    with pytest.raises(ConfigurationError, match="port"):
        WebConfig(port=port)


def test_default_interval_must_be_offered():
    with pytest.raises(ConfigurationError, match="default_interval_ms"):
        ViewerConfig(poll_intervals_ms=(100, 500), default_interval_ms=1000)


def test_unknown_log_level(tmp_path):
    with pytest.raises(ConfigurationError, match="logging level"):
        load_config(_write(tmp_path, "logging:\n  level: loud\n"))


def test_env_var_names_config(monkeypatch, tmp_path):
    monkeypatch.setenv("LIVELOG_CONFIG", str(tmp_path / "x.yaml"))
    assert config_path_from_env() == tmp_path / "x.yaml"
    monkeypatch.delenv("LIVELOG_CONFIG")
    assert config_path_from_env() is None


def test_cli_overrides(tmp_path):
    path = _write(tmp_path, "web:\n  port: 9000\n")
    args = parse_args(["--config", str(path), "--port", "9100", "--log-level", "WARNING"])
    cfg = build_config(args)
    assert cfg.web.port == 9100
    assert cfg.web.host == "0.0.0.0"
    assert cfg.logging.level == "WARNING"


def test_devserver_uses_configured_root_level(monkeypatch, tmp_path):
    import importlib
    import sys

    path = _write(tmp_path, "logging:\n  level: warning\n")
    monkeypatch.setenv("LIVELOG_CONFIG", str(path))
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    try:
        if "livelog_web.devserver" in sys.modules:
            importlib.reload(sys.modules["livelog_web.devserver"])
        else:
            importlib.import_module("livelog_web.devserver")
        assert root.level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)
