"""Configuration getter functions."""

import os
from pathlib import Path
from typing import Any

from .env_loader import load_global_config, load_project_config

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def get_config(key: str, data_dir: Path | None = None, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Data directory .env file
    3. Global config file
    4. Default value
    """
    # 1. Check environment variable
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    # 2. Check data dir .env file
    project_config = load_project_config(data_dir)
    if key in project_config:
        return project_config[key]

    # 3. Check global config
    global_config = load_global_config()
    if key in global_config:
        return global_config[key]

    # 4. Return default
    return default


def get_bool(key: str, data_dir: Path | None = None, default: bool = False) -> bool:
    """Read a boolean flag; unrecognised values fall back to the default."""
    value = get_config(key, data_dir)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def get_float(key: str, data_dir: Path | None = None, default: float = 0.0) -> float:
    """Read a float; unparsable values fall back to the default."""
    value = get_config(key, data_dir)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
