"""Settings loading: a YAML file plus COINFACADE_* environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml
from pydantic import ValidationError

from .settings import Settings

ENV_PREFIX = "COINFACADE_"
DEFAULT_CONFIG = "config.yml"
# read elsewhere, never part of Settings
RESERVED_ENV = {"CONFIG", "LOG_LEVEL"}
SECRET_KEYS = {"api_key", "api_secret", "private_key"}


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be a mapping, got: {type(loaded)!r}")
    return loaded


def _env_overrides(environ: Mapping[str, str]) -> Iterator[tuple[list[str], Any]]:
    """Yield (key path, value) for every COINFACADE_A__B__C variable.

    Values are parsed as YAML scalars, except secrets, which stay strings
    even when they look numeric.
    """
    for name, raw in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        remainder = name[len(ENV_PREFIX):]
        if remainder in RESERVED_ENV:
            continue
        path = [part.lower() for part in remainder.split("__") if part]
        if not path:
            continue
        if path[-1] in SECRET_KEYS:
            yield path, raw
            continue
        try:
            yield path, yaml.safe_load(raw)
        except yaml.YAMLError:
            yield path, raw


def _matching_key(node: dict[str, Any], key: str) -> str:
    # env names are upper-case; reuse the file's spelling, e.g. "Binance"
    for existing in node:
        if existing.lower() == key:
            return existing
    return key


def _merge(data: dict[str, Any], path: list[str], value: Any) -> None:
    node = data
    for part in path[:-1]:
        key = _matching_key(node, part)
        if not isinstance(node.get(key), dict):
            node[key] = {}
        node = node[key]
    node[_matching_key(node, path[-1])] = value


def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from YAML and apply environment overrides.

    Args:
        config_path: YAML file; defaults to $COINFACADE_CONFIG, then config.yml.
            A missing file yields defaults.
        environ: Environment to read overrides from; defaults to os.environ

    Raises:
        ValueError: If the file or the merged result is invalid
    """
    env = os.environ if environ is None else environ
    path = Path(config_path or env.get(f"{ENV_PREFIX}CONFIG", DEFAULT_CONFIG))

    data = _read_yaml(path)
    for key_path, value in _env_overrides(env):
        _merge(data, key_path, value)

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
