"""Tests for config module."""

import json

from applog import config
from applog.config import DEFAULTS, init_config_if_missing, load_config, save_config


class TestLoadConfig:
    def test_returns_dict(self):
        cfg = load_config()
        assert isinstance(cfg, dict)

    def test_has_all_default_keys(self):
        cfg = load_config()
        for key in DEFAULTS:
            assert key in cfg

    def test_default_max_bytes(self):
        assert load_config()["max_bytes"] == 100 * 1024 * 1024

    def test_default_log_path_is_unset(self):
        assert load_config()["log_path"] is None

    def test_plain_values_accepted(self):
        config.CONFIG_DIR.mkdir(parents=True)
        config.CONFIG_PATH.write_text(json.dumps({"max_bytes": 10}), encoding="utf-8")
        assert load_config()["max_bytes"] == 10

    def test_unreadable_file_falls_back_to_defaults(self, caplog):
        config.CONFIG_DIR.mkdir(parents=True)
        config.CONFIG_PATH.write_text("{not json", encoding="utf-8")
        assert load_config()["max_bytes"] == DEFAULTS["max_bytes"]["value"]
        assert "Could not read config" in caplog.text

    def test_invalid_values_replaced(self):
        save_config({"max_bytes": -5, "stdlib_level": "loud", "redact_exception_details": "yes"})
        cfg = load_config()
        assert cfg["max_bytes"] == DEFAULTS["max_bytes"]["value"]
        assert cfg["stdlib_level"] == "INFO"
        assert cfg["redact_exception_details"] is None

    def test_level_name_normalized(self):
        save_config({"stdlib_level": "warning"})
        assert load_config()["stdlib_level"] == "WARNING"


class TestSaveConfig:
    def test_round_trip_keeps_descriptions(self):
        save_config({"log_path": "/tmp/x.log"})
        data = json.loads(config.CONFIG_PATH.read_text(encoding="utf-8"))
        assert data["log_path"]["value"] == "/tmp/x.log"
        assert data["log_path"]["description"] == DEFAULTS["log_path"]["description"]
        assert load_config()["log_path"] == "/tmp/x.log"

    def test_init_only_once(self):
        assert init_config_if_missing() is True
        assert init_config_if_missing() is False
