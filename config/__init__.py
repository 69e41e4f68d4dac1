"""Configuration module for the Buckingham Vault filter engine."""

from .settings import config, FilterConfig, DataConfig, LoggingConfig, Config
from .config_loader import (
    ConfigurationError,
    load_filter_modules,
    load_presets,
    clear_config_cache,
    get_module_definitions,
    get_builtin_presets,
)
from .logging_config import setup_logging, get_logger

__all__ = [
    # Settings
    "config",
    "FilterConfig",
    "DataConfig",
    "LoggingConfig",
    "Config",
    # YAML loader
    "ConfigurationError",
    "load_filter_modules",
    "load_presets",
    "clear_config_cache",
    "get_module_definitions",
    "get_builtin_presets",
    # Logging
    "setup_logging",
    "get_logger",
]
