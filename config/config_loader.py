"""YAML Configuration Loader for the filter engine.

Loads and caches module filter schemas and built-in presets from YAML files
with fallback to defaults.
"""

from pathlib import Path
from typing import Any, Dict, List
from functools import lru_cache
import yaml

# Get config directory
CONFIG_DIR = Path(__file__).parent


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""

    pass


def _load_yaml_file(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of YAML file in config directory

    Returns:
        Parsed YAML content as dictionary

    Raises:
        ConfigurationError: If file cannot be loaded
    """
    filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise ConfigurationError(f"Configuration file not found: {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing {filename}: {e}")
    except IOError as e:
        raise ConfigurationError(f"Error reading {filename}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"{filename} must contain a mapping at top level")
    return data


@lru_cache(maxsize=1)
def load_filter_modules() -> Dict[str, Any]:
    """Load filter_modules.yaml configuration."""
    try:
        return _load_yaml_file("filter_modules.yaml")
    except ConfigurationError:
        # Minimal fallback: a searchable deals module
        return {
            "modules": {
                "deals": {
                    "fields": [
                        {
                            "id": "search",
                            "type": "text-search",
                            "label": "Search Deals",
                            "sort_order": 1,
                        },
                    ]
                }
            }
        }


@lru_cache(maxsize=1)
def load_presets() -> Dict[str, Any]:
    """Load presets.yaml configuration."""
    try:
        return _load_yaml_file("presets.yaml")
    except ConfigurationError:
        return {"presets": {}}


def clear_config_cache() -> None:
    """Clear all cached configuration data."""
    load_filter_modules.cache_clear()
    load_presets.cache_clear()


def get_module_definitions() -> Dict[str, Dict[str, Any]]:
    """Get the raw field definitions keyed by module name."""
    return load_filter_modules().get("modules", {}) or {}


def get_builtin_presets(module: str) -> List[Dict[str, Any]]:
    """Get the raw built-in preset definitions for a module."""
    return list((load_presets().get("presets", {}) or {}).get(module, []) or [])
