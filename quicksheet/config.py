# SPDX-License-Identifier: MIT
"""Configuration reader for quicksheet.

Reads and writes settings.json, the single JSON document holding user
preferences. Keys are addressed with dot notation, e.g.
``copyToggles.includeUnits``.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from quicksheet.paths import PathResolver


def get_settings_path() -> Path:
    """Get path to settings.json.

    Returns:
        Path to settings.json, respecting QUICKSHEET_SETTINGS env var.
    """
    custom = os.environ.get("QUICKSHEET_SETTINGS")
    if custom:
        return Path(custom)
    return PathResolver.config_dir() / "settings.json"


def load_settings() -> Dict[str, Any]:
    """Load the whole settings document.

    Returns:
        Settings dict, or empty dict if missing or unreadable.
    """
    settings_path = get_settings_path()
    if not settings_path.exists():
        return {}
    try:
        with open(settings_path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(data: Dict[str, Any]) -> None:
    """Atomically replace settings.json with ``data``."""
    settings_path = get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=settings_path.parent, prefix=".settings-")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        os.replace(tmp, settings_path)
    except BaseException:
        os.unlink(tmp)
        raise


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value by dot-notation key.

    Args:
        key: Dot-notation key like "copyToggles.includeUnits"
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    current: Any = load_settings()
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def get_bool_setting(key: str, default: bool = False) -> bool:
    """Get a boolean setting.

    Converts string "true", "1", "yes" to True.
    """
    value = get_setting(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def get_int_setting(key: str, default: int = 0) -> int:
    """Get an integer setting, or default if conversion fails."""
    value = get_setting(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_float_setting(key: str, default: float = 0.0) -> float:
    """Get a float setting, or default if conversion fails."""
    value = get_setting(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
