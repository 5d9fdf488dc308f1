"""Shared fixtures: keep every test away from the real config and log files."""

from __future__ import annotations

from pathlib import Path

import pytest

from applog import config, debug_channel, writer


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path: Path) -> Path:
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_dir / "config.json")
    return config_dir


@pytest.fixture(autouse=True)
def reset_process_state():
    yield
    writer.set_writer(None)
    debug_channel._channel = None


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "app.log"


@pytest.fixture
def log_writer(log_path: Path):
    w = writer.LogWriter(log_path, redact_exception_details=True)
    yield w
    w.close()


def read_entries(path: Path) -> list[str]:
    """Lines of a log file, without session separator lines."""
    return [
        line for line in path.read_text(encoding="utf-8").splitlines()
        if not line.startswith("--------")
    ]
