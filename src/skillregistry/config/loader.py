"""
Configuration loader for skillregistry.

Loads and merges configuration from multiple sources:
1. Default values
2. Config file (~/.skillregistry/config.yaml)
3. Environment variables (SKILLREGISTRY_*)
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from skillregistry.config.schema import RegistryConfig
from skillregistry.storage.paths import get_global_config_path

ENV_PREFIX = "SKILLREGISTRY_"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary (empty if the file does not exist).

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Configuration in {path} must be a YAML mapping")
    return content


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Merge rules:
    - Scalar values and lists: override replaces base
    - Dicts: recursive deep merge
    - Keys with a '+' prefix holding a list: append to the base list
    - null/None value: remove key from result

    Examples:
        >>> deep_merge({"base_paths": ["/a"]}, {"+base_paths": ["/b"]})
        {'base_paths': ['/a', '/b']}
    """
    result = base.copy()

    for key, value in override.items():
        if key.startswith("+") and isinstance(value, list):
            actual_key = key[1:]
            existing = result.get(actual_key)
            if isinstance(existing, list):
                result[actual_key] = existing + [item for item in value if item not in existing]
            else:
                result[actual_key] = value

        elif value is None:
            result.pop(key, None)

        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)

        else:
            result[key] = value

    return result


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value to the appropriate type.

    Returns:
        Parsed value (bool, int, list, or string).
    """
    if value.lower() in ("true", "yes", "1", "on"):
        return True
    if value.lower() in ("false", "no", "0", "off"):
        return False

    if re.match(r"^-?\d+$", value):
        return int(value)

    if "," in value:
        return [item.strip() for item in value.split(",") if item.strip()]

    return value


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    SKILLREGISTRY_<KEY>=<value> sets the top-level key <key>, e.g.
    SKILLREGISTRY_BASE_PATHS=/a,/b or SKILLREGISTRY_DEBUG=true.
    SKILLREGISTRY_HOME is handled separately.

    Args:
        config: Configuration dictionary to modify.

    Returns:
        Configuration with environment overrides applied.
    """
    result = config.copy()

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX) or key == f"{ENV_PREFIX}HOME":
            continue

        config_key = key[len(ENV_PREFIX) :].lower()
        parsed = _parse_env_value(value)

        if config_key == "base_paths" and not isinstance(parsed, list):
            parsed = [p for p in str(value).split(os.pathsep) if p]

        result[config_key] = parsed

    return result


def load_config(config_path: Path | None = None, skip_env: bool = False) -> RegistryConfig:
    """
    Load and merge configuration from all sources.

    Args:
        config_path: Config file to read. Defaults to ~/.skillregistry/config.yaml.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated RegistryConfig.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    config_dict = RegistryConfig().model_dump()

    file_config = load_yaml_file(config_path or get_global_config_path())
    config_dict = deep_merge(config_dict, file_config)

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return RegistryConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


# Singleton for cached config
_cached_config: RegistryConfig | None = None


def get_config(reload: bool = False) -> RegistryConfig:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from disk.

    Returns:
        RegistryConfig instance.
    """
    global _cached_config

    if _cached_config is None or reload:
        _cached_config = load_config()

    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    global _cached_config
    _cached_config = None
