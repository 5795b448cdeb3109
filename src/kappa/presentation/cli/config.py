"""CLI configuration helpers for options persistence and logging."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

_DEFAULT_CONFIG: Dict[str, Any] = {
    "user_id": "local",
    "log_level": "WARNING",
    "downsample_window_minutes": 60,
    "rankings_limit": 50,
    "activity_limit": 100,
    "definitions_path": None,
}
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "KappaTracker"
        return Path.home() / "KappaTracker"
    return Path.home() / ".config" / "kappa_tracker"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_progress_store_path() -> Path:
    """Return the per-user progress store file."""
    return get_user_data_dir() / "progress.json"


def debug_enabled() -> bool:
    """Return True only when KAPPA_DEBUG is explicitly set to '1'."""
    return os.getenv("KAPPA_DEBUG") == "1"


def _positive_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
    user_id = raw.get("user_id")
    log_level = raw.get("log_level")
    definitions_path = raw.get("definitions_path")
    return {
        "user_id": user_id if isinstance(user_id, str) and user_id.strip() else _DEFAULT_CONFIG["user_id"],
        "log_level": log_level.upper()
        if isinstance(log_level, str) and log_level.upper() in _LOG_LEVELS
        else _DEFAULT_CONFIG["log_level"],
        "downsample_window_minutes": _positive_int(
            raw.get("downsample_window_minutes"), _DEFAULT_CONFIG["downsample_window_minutes"]
        ),
        "rankings_limit": _positive_int(raw.get("rankings_limit"), _DEFAULT_CONFIG["rankings_limit"]),
        "activity_limit": _positive_int(raw.get("activity_limit"), _DEFAULT_CONFIG["activity_limit"]),
        "definitions_path": definitions_path if isinstance(definitions_path, str) else None,
    }


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return dict(_DEFAULT_CONFIG)
    except (OSError, json.JSONDecodeError):
        return dict(_DEFAULT_CONFIG)
    if not isinstance(raw, dict):
        return dict(_DEFAULT_CONFIG)
    return _normalize(raw)


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = _normalize(config)
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def configure_logging(config: Dict[str, Any]) -> logging.Logger:
    """Attach a console handler to the package logger once."""
    logger = logging.getLogger("kappa")
    level_name = "DEBUG" if debug_enabled() else config.get("log_level", _DEFAULT_CONFIG["log_level"])
    logger.setLevel(getattr(logging, level_name, logging.WARNING))
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(console_handler)
    return logger
