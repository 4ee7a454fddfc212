"""
YAML → typed settings loader.

User settings live in <data dir>/settings.yaml, where the data dir is
$LIFTWISE_HOME or ~/.liftwise. The file is deep-merged over the Python
defaults from config.py, so only changed keys need to be listed:

    adaptive: false
    increments:
      barbell: 2.5
      dumbbell: 2.0
      cable: 2.5
      machine: 5.0

Usage:
    from liftwise.core.engine.config_loader import load_increment_settings
    settings = load_increment_settings()

If the file exists but cannot be parsed, or a value is of the wrong type or
out of range, a warning is issued and the defaults are used.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import (
    DEFAULT_ADAPTIVE,
    DEFAULT_BARBELL_INCREMENT,
    DEFAULT_CABLE_INCREMENT,
    DEFAULT_DUMBBELL_INCREMENT,
    DEFAULT_MACHINE_INCREMENT,
    MAX_INCREMENT_KG,
)
from ..models import EquipmentIncrementSettings
from ..progression import build_increment_settings

SETTINGS_FILENAME = "settings.yaml"

DEFAULT_SETTINGS: dict[str, Any] = {
    "adaptive": DEFAULT_ADAPTIVE,
    "increments": {
        "barbell": DEFAULT_BARBELL_INCREMENT,
        "dumbbell": DEFAULT_DUMBBELL_INCREMENT,
        "cable": DEFAULT_CABLE_INCREMENT,
        "machine": DEFAULT_MACHINE_INCREMENT,
    },
}

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; warn and return {} if it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(
            f"liftwise: ignoring settings file {path} ({exc}); using defaults.",
            stacklevel=3,
        )
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(
            f"liftwise: settings file {path} is not a mapping; using defaults.",
            stacklevel=3,
        )
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_data_dir() -> Path:
    """Return $LIFTWISE_HOME if set, else ~/.liftwise."""
    override = os.environ.get("LIFTWISE_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".liftwise"


def get_settings_path(data_dir: Path | None = None) -> Path:
    """Return the settings.yaml path inside the data dir."""
    return (data_dir or get_data_dir()) / SETTINGS_FILENAME


def load_user_settings(data_dir: Path | None = None) -> dict[str, Any]:
    """
    Load the merged settings mapping.

    Load order (later overrides earlier):
    1. DEFAULT_SETTINGS from config.py constants
    2. <data dir>/settings.yaml, if present

    Returns:
        Merged settings dict
    """
    config = _deep_merge({}, DEFAULT_SETTINGS)
    path = get_settings_path(data_dir)
    if path.exists():
        config = _deep_merge(config, _load_yaml_file(path))
    return config


def _checked_increment(key: str, value: Any) -> float | None:
    """Return a usable increment, or None (with a warning) to fall back to the default."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 < value <= MAX_INCREMENT_KG:
        warnings.warn(
            f"liftwise: invalid {key} increment {value!r} in settings; using default.",
            stacklevel=4,
        )
        return None
    return float(value)


def settings_from_dict(data: dict[str, Any]) -> EquipmentIncrementSettings:
    """
    Build EquipmentIncrementSettings from a settings mapping.

    Each increment must be a number with 0 < value ≤ 100 kg and adaptive
    must be a YAML boolean. Any other value is reported with a warning and
    replaced by its default; the remaining keys are kept.
    """
    increments = data.get("increments")
    if increments is None:
        increments = {}
    elif not isinstance(increments, dict):
        warnings.warn(
            f"liftwise: increments must be a mapping, got {increments!r}; using defaults.",
            stacklevel=3,
        )
        increments = {}

    adaptive = data.get("adaptive")
    if adaptive is not None and not isinstance(adaptive, bool):
        warnings.warn(
            f"liftwise: adaptive must be true or false, got {adaptive!r}; using default.",
            stacklevel=3,
        )
        adaptive = None

    return build_increment_settings(
        barbell=_checked_increment("barbell", increments.get("barbell")),
        dumbbell=_checked_increment("dumbbell", increments.get("dumbbell")),
        cable=_checked_increment("cable", increments.get("cable")),
        machine=_checked_increment("machine", increments.get("machine")),
        adaptive=adaptive,
    )


def load_increment_settings(data_dir: Path | None = None) -> EquipmentIncrementSettings:
    """Load the user's increment settings (defaults where unset)."""
    return settings_from_dict(load_user_settings(data_dir))


def save_user_settings(settings: EquipmentIncrementSettings, data_dir: Path | None = None) -> Path:
    """
    Write increment settings to settings.yaml.

    Args:
        settings: Settings to persist
        data_dir: Data dir (default: get_data_dir())

    Returns:
        Path written
    """
    path = get_settings_path(data_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "adaptive": settings.adaptive,
        "increments": {
            "barbell": settings.barbell,
            "dumbbell": settings.dumbbell,
            "cable": settings.cable,
            "machine": settings.machine,
        },
    }
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, sort_keys=False)
    return path
