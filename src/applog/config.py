"""Load, save, and validate the JSON config at ~/.config/applog/config.json."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "applog"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULTS: dict[str, dict[str, Any]] = {
    "log_path": {
        "value": None,
        "description": "Log file path. null = next to the running program, with a .log extension.",
    },
    "max_bytes": {
        "value": 100 * 1024 * 1024,
        "description": "Delete the log file and start over once it grows past this many bytes.",
    },
    "redact_exception_details": {
        "value": None,
        "description": "Log only the message of exception arguments. null = redact only under python -O.",
    },
    "debug_channel": {
        "value": True,
        "description": "Send DEBUG: trace lines to the platform debug output (ignored under python -O).",
    },
    "stdlib_level": {
        "value": "INFO",
        "description": "Minimum stdlib logging level forwarded into the log file: DEBUG, INFO, WARNING, ERROR.",
    },
}


_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _validate(values: dict[str, Any]) -> dict[str, Any]:
    """Replace out-of-range values with their defaults, warning about each one."""
    max_bytes = values.get("max_bytes")
    if not isinstance(max_bytes, int) or isinstance(max_bytes, bool) or max_bytes <= 0:
        logger.warning("Ignoring invalid max_bytes %r", max_bytes)
        values["max_bytes"] = DEFAULTS["max_bytes"]["value"]

    level = values.get("stdlib_level")
    if not isinstance(level, str) or level.upper() not in _LEVEL_NAMES:
        logger.warning("Ignoring invalid stdlib_level %r", level)
        values["stdlib_level"] = DEFAULTS["stdlib_level"]["value"]
    else:
        values["stdlib_level"] = level.upper()

    redact = values.get("redact_exception_details")
    if redact is not None and not isinstance(redact, bool):
        logger.warning("Ignoring invalid redact_exception_details %r", redact)
        values["redact_exception_details"] = None

    return values


def _ensure_dir() -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def load_config() -> dict[str, Any]:
    """Return a flat dict of {key: value} from the config file, merged with defaults."""
    values: dict[str, Any] = {k: v["value"] for k, v in DEFAULTS.items()}

    if CONFIG_PATH.exists():
        try:
            raw = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
            for key, entry in raw.items():
                if key.startswith("_"):
                    continue
                if isinstance(entry, dict) and "value" in entry:
                    values[key] = entry["value"]
                else:
                    values[key] = entry
        except (json.JSONDecodeError, OSError, AttributeError) as exc:
            logger.warning("Could not read config at %s: %s", CONFIG_PATH, exc)

    return _validate(values)


def save_config(values: dict[str, Any]) -> None:
    """Write current values back to the config file, preserving descriptions."""
    _ensure_dir()
    data: dict[str, Any] = {
        "_description": "applog configuration. Edit values below; descriptions are for reference."
    }
    for key, meta in DEFAULTS.items():
        data[key] = {
            "value": values.get(key, meta["value"]),
            "description": meta["description"],
        }
    CONFIG_PATH.write_text(
        json.dumps(data, indent=4, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    logger.info("Config saved to %s", CONFIG_PATH)


def get(key: str) -> Any:
    """Convenience: load config and return one value."""
    return load_config()[key]


def init_config_if_missing() -> bool:
    """Create default config file if it doesn't exist. Return True if created."""
    if CONFIG_PATH.exists():
        return False
    defaults = {k: v["value"] for k, v in DEFAULTS.items()}
    save_config(defaults)
    return True
