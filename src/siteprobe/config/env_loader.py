"""Environment and config-file loading."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

ENV_KEYS = (
    "SITEPROBE_DATA_DIR",
    "SITEPROBE_VERIFY_TLS",
    "SITEPROBE_ALLOW_ACTIVE_AUTH",
    "SITEPROBE_TIMEOUT_SCALE",
    "SITEPROBE_VERBOSE",
)


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from .env file."""
    env_vars = {}
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    # Remove quotes if present
                    value = value.strip().strip("\"'")
                    env_vars[key.strip()] = value
    return env_vars


def global_config_path() -> Path:
    return Path.home() / ".siteprobe" / "config.yml"


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.siteprobe/config.yml."""
    config_path = global_config_path()
    if not config_path.exists():
        return {}
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a mapping", config_path)
        return {}
    return data


def get_data_dir() -> Path:
    """Resolve the directory holding the scan database and .env file."""
    data_root = os.environ.get("SITEPROBE_DATA_DIR")
    if data_root:
        return Path(data_root)
    configured = load_global_config().get("SITEPROBE_DATA_DIR")
    if configured:
        return Path(str(configured)).expanduser()
    return Path.home() / ".siteprobe"


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the scan database path."""
    return (data_dir or get_data_dir()) / "scans.db"


def get_env_path(data_dir: Path | None = None) -> Path:
    """Get the data directory .env path."""
    return (data_dir or get_data_dir()) / ".env"


def load_project_config(data_dir: Path | None = None) -> dict[str, str]:
    """Load configuration from the data directory .env file."""
    return load_env_file(get_env_path(data_dir))
