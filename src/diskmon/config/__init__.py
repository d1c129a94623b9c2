"""
Configuration management for the diskmon package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with a cached singleton.
"""

from .manager import (
    DEFAULT_CONFIG_FILE_PATH,
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    set_config_path,
)
from .loader import load_main_config, load_toml_file
from .validators import (
    validate_app_config,
    validate_monitor_config,
    validate_output_config,
    validate_probe_config,
    validate_runner_config,
)

__all__ = [
    # Main interface
    "DEFAULT_CONFIG_FILE_PATH",
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "validate_app_config",
    "validate_monitor_config",
    "validate_output_config",
    "validate_probe_config",
    "validate_runner_config",
]
