"""Configuration loading utilities."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable

import yaml


def load_config(path: Path) -> Dict[str, Any]:
    """Load a YAML config file.

    Parameters
    ----------
    path:
        Path to the YAML file.

    Returns
    -------
    dict
        Parsed configuration; an empty file yields an empty dict.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must map to a dict: {path}")
    return data


def deep_update(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``updates`` into ``base`` and return ``base``."""
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = deep_update(base[key], value)
        else:
            base[key] = value
    return base


def set_by_path(target: Dict[str, Any], path: str, value: Any) -> None:
    """Set ``target["a"]["b"] = value`` for ``path="a.b"``, creating dicts on the way."""
    parts = path.split(".")
    cursor = target
    for part in parts[:-1]:
        if not isinstance(cursor.get(part), dict):
            cursor[part] = {}
        cursor = cursor[part]
    cursor[parts[-1]] = value


def parse_set_overrides(values: Iterable[str]) -> Dict[str, Any]:
    """Parse ``--set key.path=value`` strings into a nested override dict.

    Values are parsed as YAML, so ``radius=3`` yields an int and
    ``key_color=[0, 255, 0]`` a list.
    """
    overrides: Dict[str, Any] = {}
    for raw in values:
        if "=" not in raw:
            raise ValueError(f"Invalid --set override '{raw}'. Expected key=value.")
        key, value_str = raw.split("=", 1)
        if not key or not value_str:
            raise ValueError(f"Invalid --set override '{raw}'. Expected key=value.")
        if any(not part for part in key.split(".")):
            raise ValueError(f"Invalid --set key '{key}'. Use dot notation like io.jpeg_quality.")
        try:
            value = yaml.safe_load(value_str)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML value for --set {key}: {exc}") from exc
        set_by_path(overrides, key, value)
    return overrides
