"""Configuration loading pipeline."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, cast

import yaml
from platformdirs import user_config_dir

from ..core.errors import ConfigurationError
from ..core.validation import validate_configuration, validate_watched
from .schema import Config, WatchedConfig, build_config, build_watched, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

__all__ = [
    "APP_NAME",
    "CONFIG_FILENAMES",
    "find_config_file",
    "load_mapping",
    "load_configuration",
    "load_watched",
]

APP_NAME = "journal2gelf"
CONFIG_FILENAMES = ("journal2gelf.toml", "journal2gelf.yaml", "journal2gelf.yml")

_ENV_PREFIX = "JOURNAL2GELF__"


def _load_toml(path: Path) -> Dict[str, Any]:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"{path}: top level must be a mapping")
    return {str(key): value for key, value in data.items()}


def _load_file(path: Path) -> Dict[str, Any]:
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return _load_yaml(path)
        return _load_toml(path)
    except FileNotFoundError:
        raise ConfigurationError(f"configuration file not found: {path}") from None
    except OSError as exc:
        raise ConfigurationError(f"cannot read configuration file {path}: {exc}") from exc
    except (tomllib.TOMLDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"cannot parse configuration file {path}: {exc}") from exc


def _merge(base: Dict[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in incoming.items():
        existing = base.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge(existing, value)
        elif isinstance(value, Mapping):
            base[key] = _merge({}, value)
        else:
            base[key] = value
    return base


def _candidate_dirs() -> Iterable[Path]:
    yield Path.cwd()
    yield Path(user_config_dir(APP_NAME))


def find_config_file() -> Path | None:
    """Return the first configuration file found in the working or user config directory."""

    for directory in _candidate_dirs():
        for filename in CONFIG_FILENAMES:
            path = directory / filename
            if path.is_file():
                return path
    return None


def _coerce_value(value: str) -> Any:
    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        return int(stripped)
    except ValueError:
        pass
    if stripped.startswith("[") or stripped.startswith("{"):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
    return stripped


def _env_config() -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for env_key, raw_value in os.environ.items():
        if not env_key.startswith(_ENV_PREFIX):
            continue
        path = env_key[len(_ENV_PREFIX) :].split("__")
        target: Dict[str, Any] = data
        for segment in path[:-1]:
            child = target.setdefault(segment.lower(), {})
            target = cast(Dict[str, Any], child)
        target[path[-1].lower()] = _coerce_value(raw_value)
    return data


def load_mapping(path: Path | None, overrides: Mapping[str, Any] | None = None) -> Dict[str, Any]:
    """Merge defaults, the file at ``path``, environment and ``overrides``."""

    result = default_config()
    for mapping in (
        _load_file(path) if path is not None else {},
        _env_config(),
        overrides or {},
    ):
        if mapping:
            _merge(result, mapping)
    return result


def load_configuration(path: Path | None = None, overrides: Mapping[str, Any] | None = None) -> Config:
    """Load and validate the full configuration used at startup."""

    config = build_config(load_mapping(path, overrides))
    validate_configuration(config)
    return config


def load_watched(path: Path, overrides: Mapping[str, Any] | None = None) -> WatchedConfig:
    """Re-read only the hot-reloadable part, as the config watcher does."""

    watched = build_watched(load_mapping(path, overrides))
    validate_watched(watched)
    return watched
