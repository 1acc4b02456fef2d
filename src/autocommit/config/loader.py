"""Locate and load config.toml (or config.yaml) and apply env var overrides."""

from __future__ import annotations

import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from autocommit.config.schema import AutocommitConfig, ProviderConfig

APP_DIR = "autocommit"
CONFIG_FILENAME = "config.toml"
_YAML_SUFFIXES = (".yaml", ".yml")


class ConfigError(Exception):
    """Raised when config is missing, malformed, or unreadable."""


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/autocommit``, falling back to ``~/.config/autocommit``."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / APP_DIR


def get_config_path(override: Optional[str] = None) -> Path:
    if override:
        return Path(override).expanduser()
    return get_config_dir() / CONFIG_FILENAME


def _parse_file(path: Path) -> Dict[str, Any]:
    try:
        if path.suffix in _YAML_SUFFIXES:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Failed to parse {path}: top level must be a table")
    return data


def _expect(value: Any, kind: type, key: str) -> Any:
    if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
        raise ConfigError(f"'{key}' must be a {kind.__name__}")
    return value


def _build_provider(entry: Any, name: Optional[str] = None) -> ProviderConfig:
    if not isinstance(entry, dict):
        raise ConfigError("each provider entry must be a table")
    name = name or entry.get("name")
    if not isinstance(name, str) or not name:
        raise ConfigError("provider entry is missing 'name'")
    fields = {}
    # "apikey" / "baseurl" are the key spellings of older YAML configs
    for key, aliases in (
        ("api_key", ("api_key", "apikey")),
        ("model", ("model",)),
        ("endpoint", ("endpoint", "baseurl")),
    ):
        for alias in aliases:
            if alias in entry and entry[alias] is not None:
                fields[key] = _expect(entry[alias], str, f"providers.{name}.{alias}")
                break
    return ProviderConfig(name=name, **fields)


def _build_providers(raw: Any) -> List[ProviderConfig]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        return [_build_provider(entry, name) for name, entry in raw.items()]
    if isinstance(raw, list):
        return [_build_provider(entry) for entry in raw]
    raise ConfigError("'providers' must be a list of tables or a mapping")


def _merge_env_overrides(cfg: AutocommitConfig) -> None:
    """Apply AUTOCOMMIT_* environment variable overrides."""
    if val := os.environ.get("AUTOCOMMIT_PROVIDER"):
        cfg.default_provider = val
    providers = []
    for provider in cfg.providers:
        key = os.environ.get(f"AUTOCOMMIT_{provider.name.upper()}_API_KEY")
        if key:
            provider = replace(provider, api_key=key)
        providers.append(provider)
    cfg.providers = providers


def parse_config(raw: Dict[str, Any]) -> AutocommitConfig:
    """Build an AutocommitConfig from a parsed document, ignoring unknown keys."""
    defaults = AutocommitConfig()
    return AutocommitConfig(
        default_provider=_expect(raw.get("default_provider", defaults.default_provider), str, "default_provider"),
        system_prompt=_expect(raw.get("system_prompt") or "", str, "system_prompt"),
        auto_add=_expect(raw.get("auto_add", defaults.auto_add), bool, "auto_add"),
        auto_push=_expect(raw.get("auto_push", defaults.auto_push), bool, "auto_push"),
        push_on_eof=_expect(raw.get("push_on_eof", defaults.push_on_eof), bool, "push_on_eof"),
        providers=_build_providers(raw.get("providers")),
    )


def load_config(config_override: Optional[str] = None) -> AutocommitConfig:
    """Load, validate, and return an AutocommitConfig."""
    path = get_config_path(config_override)
    if not path.is_file():
        raise ConfigError(
            f"Config file not found at {path}. Run 'autocommit config init' to create one."
        )
    cfg = parse_config(_parse_file(path))
    _merge_env_overrides(cfg)
    return cfg
