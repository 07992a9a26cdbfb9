from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Mapping

from aurkeep.util import expand_path, xdg_cache_home, xdg_config_home

DEFAULT_AUR_URL = "https://aur.archlinux.org"
DEFAULT_MAKEPKG_FLAGS = ("--syncdeps", "--install", "--needed", "--noconfirm")
CONFIG_NAMES = ("config.toml", "config.yaml", "config.yml", "config.json")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    pass


def default_store_dir() -> Path:
    return xdg_cache_home() / "aurkeep"


@dataclass(frozen=True)
class Settings:
    store_dir: Path = field(default_factory=default_store_dir)
    aur_url: str = DEFAULT_AUR_URL
    timeout: float = 30.0
    auto_confirm: bool = False
    makepkg_flags: tuple[str, ...] = DEFAULT_MAKEPKG_FLAGS
    sudo: str = "sudo"
    source: Path | None = None


def _require_str(value: Any, *, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{what}' must be a non-empty string")
    return value


def _require_bool(value: Any, *, what: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{what}' must be a boolean")
    return value


def _require_timeout(value: Any) -> float:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError("'timeout' must be a positive number of seconds")
    return float(value)


def _require_str_list(value: Any, *, what: str) -> tuple[str, ...]:
    if isinstance(value, list) and all(isinstance(x, str) and x for x in value):
        return tuple(value)
    raise ConfigError(f"'{what}' must be an array of non-empty strings")


def _load_json(text: str, path: Path) -> Any:
    try:
        return json.loads(text)
    except JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e


def _load_toml(text: str, path: Path) -> Any:
    # TOML parsing is in stdlib as of Python 3.11. On older Pythons, use tomli.
    try:
        import tomllib  # type: ignore
    except ImportError:  # pragma: no cover
        import tomli as tomllib  # type: ignore
    try:
        return tomllib.loads(text)
    except Exception as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def _load_yaml(text: str, path: Path) -> Any:
    import yaml

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None and hasattr(mark, "line") and hasattr(mark, "column"):
            line = int(mark.line) + 1
            col = int(mark.column) + 1
            raise ConfigError(f"Invalid YAML in {path} at line {line}, column {col}: {e}") from e
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def _parse_file(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    suffix = path.suffix.lower()
    if suffix == ".json":
        raw = _load_json(text, path)
    elif suffix == ".toml":
        raw = _load_toml(text, path)
    elif suffix in (".yaml", ".yml"):
        raw = _load_yaml(text, path)
    else:
        raise ConfigError(
            f"Unsupported config format for {path} (expected .toml, .yaml, .yml, .json)."
        )

    # An empty YAML document parses to None.
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a table/mapping at the top level")
    return raw


def _apply_mapping(settings: Settings, raw: Mapping[str, Any], *, path: Path) -> Settings:
    changes: dict[str, Any] = {}
    for key, value in raw.items():
        if key == "store_dir":
            changes["store_dir"] = expand_path(_require_str(value, what=key))
        elif key == "aur_url":
            changes["aur_url"] = _require_str(value, what=key).rstrip("/")
        elif key == "timeout":
            changes["timeout"] = _require_timeout(value)
        elif key == "auto_confirm":
            changes["auto_confirm"] = _require_bool(value, what=key)
        elif key == "makepkg_flags":
            changes["makepkg_flags"] = _require_str_list(value, what=key)
        elif key == "sudo":
            changes["sudo"] = _require_str(value, what=key)
        else:
            raise ConfigError(f"Unknown key {key!r} in {path}")
    return replace(settings, source=path, **changes)


def find_config_file() -> Path | None:
    base = xdg_config_home() / "aurkeep"
    for name in CONFIG_NAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def _env_bool(value: str, *, what: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"{what} must be a boolean (got {value!r})")


def load_settings(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """
    Build Settings from defaults, a config file and the environment.

    An explicit `path` must exist. Without one, the first of
    $XDG_CONFIG_HOME/aurkeep/config.{toml,yaml,yml,json} is used if present.
    AURKEEP_STORE_DIR and AURKEEP_NOCONFIRM override file values.
    """
    if env is None:
        env = os.environ

    settings = Settings()
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        config_path: Path | None = path
    else:
        config_path = find_config_file()

    if config_path is not None:
        settings = _apply_mapping(settings, _parse_file(config_path), path=config_path)

    store_env = env.get("AURKEEP_STORE_DIR")
    if store_env:
        settings = replace(settings, store_dir=expand_path(store_env))
    noconfirm_env = env.get("AURKEEP_NOCONFIRM")
    if noconfirm_env is not None:
        settings = replace(
            settings, auto_confirm=_env_bool(noconfirm_env, what="AURKEEP_NOCONFIRM")
        )
    return settings
