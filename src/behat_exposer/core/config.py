from __future__ import annotations

import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping
import tomllib

_CONFIG_CACHE: dict | None = None

CONFIG_SECTION = "behat"


def config_path() -> Path:
    override = os.environ.get("BEHAT_EXPOSER_CONFIG_PATH")
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base).expanduser() if base else (Path.home() / ".config")
    return root / "behat-exposer" / "config.toml"


def load_config() -> dict:
    path = config_path()
    if not path.exists():
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ValueError(f"Invalid config file: {path}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file structure: {path}")
    return data


def get_config() -> dict:
    global _CONFIG_CACHE
    if _CONFIG_CACHE is None:
        _CONFIG_CACHE = load_config()
    return _CONFIG_CACHE


def reset_config_cache() -> None:
    global _CONFIG_CACHE
    _CONFIG_CACHE = None


def get_config_value(*keys: str, default: object | None = None) -> object | None:
    current: object = get_config()
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


class Config:
    """Read-only option lookup handed to the runner and the execution service.

    Recognised keys: `config` (the runner's own config file), `workspace`
    (directory for staged feature files), `command` and `keep_staged`.
    """

    def __init__(self, options: Mapping[str, Any] | None = None) -> None:
        self._options = MappingProxyType(dict(options or {}))

    def get_option(self, key: str) -> Any:
        return self._options.get(key)

    def __repr__(self) -> str:
        return f"Config({dict(self._options)!r})"


def build_config(**overrides: Any) -> Config:
    """Merge the `[behat]` table, the workspace env override and explicit overrides.

    Overrides set to None are ignored so unset CLI options fall through.
    """
    from behat_exposer.core import paths

    section = get_config_value(CONFIG_SECTION, default={})
    if not isinstance(section, dict):
        raise ValueError(f"Invalid [{CONFIG_SECTION}] section in config file: {config_path()}")
    options: dict[str, Any] = dict(section)
    workspace = paths.workspace_dir()
    if workspace is not None:
        options["workspace"] = str(workspace)
    options.update({key: value for key, value in overrides.items() if value is not None})
    return Config(options)
