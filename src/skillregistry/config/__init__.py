"""
Configuration for skillregistry.

Usage:
    from skillregistry.config import get_config

    config = get_config()
    print(config.base_paths)
"""

from skillregistry.config.loader import (
    ConfigurationError,
    clear_config_cache,
    deep_merge,
    get_config,
    load_config,
    load_yaml_file,
)
from skillregistry.config.schema import RegistryConfig, RendererFormat

__all__ = [
    "ConfigurationError",
    "RegistryConfig",
    "RendererFormat",
    "clear_config_cache",
    "deep_merge",
    "get_config",
    "load_config",
    "load_yaml_file",
]
