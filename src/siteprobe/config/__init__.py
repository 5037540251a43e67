"""
Configuration management for siteprobe.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. Data directory .env file (<data dir>/.env)
3. Global config file (~/.siteprobe/config.yml)
4. Default values (lowest priority)
"""

from .env_loader import (
    ENV_KEYS,
    get_data_dir,
    get_db_path,
    get_env_path,
    load_env_file,
    load_global_config,
    load_project_config,
)
from .getters import get_bool, get_config, get_float
from .settings import ScanSettings, load_settings

__all__ = [
    "ENV_KEYS",
    "ScanSettings",
    "get_bool",
    "get_config",
    "get_data_dir",
    "get_db_path",
    "get_env_path",
    "get_float",
    "load_env_file",
    "load_global_config",
    "load_project_config",
    "load_settings",
]
