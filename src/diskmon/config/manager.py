"""
Configuration management and singleton pattern.

This module provides the main configuration loading interface, caching the
loaded configuration so it is read only once per process.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_app_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[AppConfig] = None

# Default configuration file shipped at the repository root. It is optional:
# when it is absent (e.g. an installed wheel) the built-in defaults apply.
DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"

_CONFIG_FILE_PATH = DEFAULT_CONFIG_FILE_PATH
# A path chosen with set_config_path() must exist.
_CONFIG_PATH_EXPLICIT = False


def set_config_path(config_path: Optional[Path]) -> None:
    """
    Set a custom configuration file path.

    Passing None restores the default, optional, configuration path.

    Args:
        config_path: Path to a config.toml file, or None
    """
    global _CONFIG_FILE_PATH, _CONFIG_PATH_EXPLICIT, _CONFIG
    if config_path is None:
        _CONFIG_FILE_PATH = DEFAULT_CONFIG_FILE_PATH
        _CONFIG_PATH_EXPLICIT = False
    else:
        _CONFIG_FILE_PATH = Path(config_path)
        _CONFIG_PATH_EXPLICIT = True
    _CONFIG = None
    logger.debug(f"Configuration path set to: {_CONFIG_FILE_PATH}")


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.
    """
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path, required: bool) -> AppConfig:
    """
    Load and validate the configuration file.

    Raises:
        FileNotFoundError: If a required configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the file is malformed
    """
    if not config_path.exists() and not required:
        logger.debug(f"No configuration file at {config_path}, using built-in defaults")
        return AppConfig()

    try:
        sections = load_main_config(config_path)
        app_config = validate_app_config(sections)
        logger.debug(f"Loaded configuration from {config_path}")
        return app_config
    except Exception as e:
        handle_config_error(
            error=e,
            context=f"loading {config_path}",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> AppConfig:
    """
    Get the application configuration, loading it on first use.

    Returns:
        The cached AppConfig instance

    Raises:
        FileNotFoundError: If an explicitly set configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the file is malformed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH, required=_CONFIG_PATH_EXPLICIT)
    return _CONFIG


def is_config_loaded() -> bool:
    """Check if configuration has been loaded and cached."""
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "config_path_explicit": _CONFIG_PATH_EXPLICIT,
    }
