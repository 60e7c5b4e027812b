import copy
import os
from pathlib import Path
from typing import TypedDict

import tomli
import tomli_w

from ..store.snapshot import DEFAULT_DATA_FILENAME
from ..store.store import UpdateIdPolicy


class StoreConfig(TypedDict, total=False):
    data_file: str
    update_id_policy: str


class LoggingConfig(TypedDict, total=False):
    log_level: str


class Config(TypedDict, total=False):
    store: StoreConfig
    logging: LoggingConfig


def _xdg_dir(variable: str, fallback: Path) -> Path:
    xdg = os.environ.get(variable)
    if xdg:
        base = Path(xdg)
    else:
        base = fallback
    return base / "userstore"


def get_cache_dir() -> Path:
    return _xdg_dir("XDG_CACHE_HOME", Path.home() / ".cache")


def get_config_dir() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config")


def get_data_dir() -> Path:
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share")


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


def get_log_dir() -> Path:
    return get_cache_dir() / "log"


DEFAULT_CONFIG: Config = {
    "store": {
        "data_file": "",
        "update_id_policy": UpdateIdPolicy.REJECT.value,
    },
    "logging": {
        "log_level": "info",
    },
}


def load_config() -> Config:
    config_path = get_config_path()
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path.exists():
        with open(config_path, "rb") as f:
            user_config = tomli.load(f)
            _merge_config(config, user_config)

    return config


def save_config(config: Config) -> None:
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)


def _merge_config(base: dict, override: dict) -> None:
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_config(base[key], value)
        else:
            base[key] = value


def get_data_file(config: Config) -> Path:
    """Snapshot location: the configured path, or users_data.txt in the data dir."""
    configured = config.get("store", {}).get("data_file")
    if configured:
        return Path(configured).expanduser()
    return get_data_dir() / DEFAULT_DATA_FILENAME


def get_update_id_policy(config: Config) -> UpdateIdPolicy:
    value = config.get("store", {}).get("update_id_policy", UpdateIdPolicy.REJECT.value)
    try:
        return UpdateIdPolicy(str(value).lower())
    except ValueError:
        choices = ", ".join(p.value for p in UpdateIdPolicy)
        raise ValueError(f"Invalid store.update_id_policy {value!r} (expected one of: {choices})")


def get_log_level(config: Config) -> str:
    return str(config.get("logging", {}).get("log_level", "info")).upper()
