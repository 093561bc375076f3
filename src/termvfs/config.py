# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration loading for hosts of the terminal filesystem.

Sources are layered in order: a TOML or YAML file, ``TERMVFS_*`` environment
variables, then explicit overrides (usually parsed CLI flags). Example file::

    [storage]
    backend = "file"
    path = "~/.local/state/termvfs/state.json"

    [shell]
    home = "/sandbox"

    [snapshot]
    max_items = 50
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Literal, cast, get_args

import yaml

from .errors import ConfigError
from .filesystem import (
    DEFAULT_HOME,
    DEFAULT_SNAPSHOT_ITEMS,
    DEFAULT_SNAPSHOT_PREVIEW,
    DEFAULT_STORAGE_KEY,
)

StoreBackend = Literal["memory", "file", "redis"]

DEFAULT_CONFIG_PATH: Final[Path] = Path("~/.config/termvfs/config.toml")
DEFAULT_STATE_PATH: Final[str] = "~/.local/state/termvfs/state.json"
DEFAULT_REDIS_URL: Final[str] = "redis://localhost:6379/0"

ENV_STORE = "TERMVFS_STORE"
ENV_STATE_PATH = "TERMVFS_STATE_PATH"
ENV_STORAGE_KEY = "TERMVFS_STORAGE_KEY"
ENV_REDIS_URL = "TERMVFS_REDIS_URL"
ENV_HOME = "TERMVFS_HOME"

_ENV_FIELDS: Final[Mapping[str, str]] = {
    ENV_STORE: "store_backend",
    ENV_STATE_PATH: "state_path",
    ENV_STORAGE_KEY: "storage_key",
    ENV_REDIS_URL: "redis_url",
    ENV_HOME: "home",
}

# (section, key) -> field name
_SECTION_FIELDS: Final[Mapping[tuple[str, str], str]] = {
    ("storage", "backend"): "store_backend",
    ("storage", "path"): "state_path",
    ("storage", "key"): "storage_key",
    ("storage", "redis_url"): "redis_url",
    ("shell", "home"): "home",
    ("snapshot", "root"): "snapshot_root",
    ("snapshot", "max_items"): "snapshot_max_items",
    ("snapshot", "max_preview"): "snapshot_max_preview",
}


@dataclass(frozen=True, slots=True)
class ShellConfig:
    """Resolved configuration for a terminal host."""

    store_backend: StoreBackend = "memory"
    state_path: str = DEFAULT_STATE_PATH
    storage_key: str = DEFAULT_STORAGE_KEY
    redis_url: str = DEFAULT_REDIS_URL
    home: str = DEFAULT_HOME
    snapshot_root: str = DEFAULT_HOME
    snapshot_max_items: int = DEFAULT_SNAPSHOT_ITEMS
    snapshot_max_preview: int = DEFAULT_SNAPSHOT_PREVIEW


def load_config(
    path: Path | Mapping[str, Any] | None = None,
    cli_overrides: object | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ShellConfig:
    """Load and validate the terminal configuration.

    Parameters
    ----------
    path:
        Configuration file. ``None`` falls back to
        ``~/.config/termvfs/config.toml`` when it exists. Tests may pass a
        mapping to skip file I/O.
    cli_overrides:
        Mapping or namespace whose non-``None`` values win over every other
        source. Keys mirror ``ShellConfig`` field names.
    env:
        Optional environment mapping. Defaults to :data:`os.environ`.
    """

    env_map = os.environ if env is None else env

    if isinstance(path, Mapping):
        raw: dict[str, object] = dict(path)
    else:
        raw = _load_config_file(path)

    config = _normalise_config(raw)
    for variable, field_name in _ENV_FIELDS.items():
        if variable in env_map:
            config[field_name] = env_map[variable]
    config.update(_materialise_overrides(cli_overrides))
    return _build_config(config)


def _load_config_file(path: Path | None) -> dict[str, object]:
    explicit = path is not None
    config_path = (path if path is not None else DEFAULT_CONFIG_PATH).expanduser()
    if not config_path.exists():
        if not explicit:
            return {}
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    suffix = config_path.suffix.lower()
    data: object
    if suffix == ".toml" or not suffix:
        with config_path.open("rb") as handle:
            try:
                data = tomllib.load(handle)
            except tomllib.TOMLDecodeError as error:
                raise ConfigError(f"Invalid TOML in {config_path}: {error}") from error
    elif suffix in {".yaml", ".yml"}:
        with config_path.open("r", encoding="utf-8") as handle:
            try:
                data = yaml.safe_load(handle) or {}
            except yaml.YAMLError as error:
                raise ConfigError(f"Invalid YAML in {config_path}: {error}") from error
    else:
        raise ConfigError(f"Unsupported configuration format: {config_path.suffix}")

    if not isinstance(data, MutableMapping):
        raise ConfigError("Configuration file must contain a mapping at the root.")
    return {str(key): value for key, value in cast(Mapping[object, object], data).items()}


def _normalise_config(raw: Mapping[str, object]) -> dict[str, object]:
    config: dict[str, object] = {}
    for field_name in ShellConfig.__dataclass_fields__:
        if field_name in raw:
            config[field_name] = raw[field_name]

    for (section_name, key), field_name in _SECTION_FIELDS.items():
        section = raw.get(section_name)
        if section is None:
            continue
        if not isinstance(section, Mapping):
            raise ConfigError(f"[{section_name}] must be a table of settings.")
        value = cast(Mapping[str, object], section).get(key)
        if value is not None and field_name not in config:
            config[field_name] = value
    return config


def _materialise_overrides(overrides: object | None) -> dict[str, object]:
    if overrides is None:
        return {}
    if isinstance(overrides, Mapping):
        items = dict(cast(Mapping[str, object], overrides))
    elif hasattr(overrides, "__dict__"):
        items = {key: getattr(overrides, key) for key in vars(overrides)}
    else:
        raise TypeError("CLI overrides must be a mapping or support attribute access.")
    fields = ShellConfig.__dataclass_fields__
    return {key: value for key, value in items.items() if key in fields and value is not None}


def _build_config(config: Mapping[str, object]) -> ShellConfig:
    backend = _coerce_str(config.get("store_backend", "memory"), "store_backend").lower()
    if backend not in get_args(StoreBackend):
        raise ConfigError(f"Unknown store backend: {backend!r}")

    defaults = ShellConfig()
    return ShellConfig(
        store_backend=cast(StoreBackend, backend),
        state_path=_coerce_str(config.get("state_path", defaults.state_path), "state_path"),
        storage_key=_coerce_str(
            config.get("storage_key", defaults.storage_key), "storage_key"
        ),
        redis_url=_coerce_str(config.get("redis_url", defaults.redis_url), "redis_url"),
        home=_coerce_absolute(config.get("home", defaults.home), "home"),
        snapshot_root=_coerce_absolute(
            config.get("snapshot_root", defaults.snapshot_root), "snapshot_root"
        ),
        snapshot_max_items=_coerce_positive_int(
            config.get("snapshot_max_items", defaults.snapshot_max_items),
            "snapshot_max_items",
        ),
        snapshot_max_preview=_coerce_positive_int(
            config.get("snapshot_max_preview", defaults.snapshot_max_preview),
            "snapshot_max_preview",
        ),
    )


def _coerce_str(value: object, field_name: str) -> str:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise ConfigError(f"{field_name} must be a non-empty string.")


def _coerce_absolute(value: object, field_name: str) -> str:
    text = _coerce_str(value, field_name)
    if not text.startswith("/"):
        raise ConfigError(f"{field_name} must be an absolute path, got {text!r}.")
    return text


def _coerce_positive_int(value: object, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be an integer.")
    try:
        number = int(cast(Any, value))
    except (TypeError, ValueError) as error:
        raise ConfigError(f"{field_name} must be an integer.") from error
    if number <= 0:
        raise ConfigError(f"{field_name} must be positive.")
    return number


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ENV_HOME",
    "ENV_REDIS_URL",
    "ENV_STATE_PATH",
    "ENV_STORAGE_KEY",
    "ENV_STORE",
    "ConfigError",
    "ShellConfig",
    "StoreBackend",
    "load_config",
]
