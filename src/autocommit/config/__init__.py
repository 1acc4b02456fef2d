"""Configuration loading, schema, and defaults."""

from autocommit.config.loader import ConfigError, get_config_path, load_config
from autocommit.config.schema import AutocommitConfig, ProviderConfig

__all__ = [
    "AutocommitConfig",
    "ConfigError",
    "ProviderConfig",
    "get_config_path",
    "load_config",
]
