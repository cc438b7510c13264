"""Helpers for reading controller configuration files."""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional

import yaml

from .schema import ControllerConfig


def _merge_dict(base: MutableMapping[str, Any], updates: Mapping[str, Any]) -> MutableMapping[str, Any]:
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), Mapping):
            base[key] = _merge_dict(deepcopy(base[key]), value)
        else:
            base[key] = deepcopy(value)
    return base


def _parse_override(override: str) -> Dict[str, Any]:
    if "=" not in override:
        raise ValueError(f"Override '{override}' must be in key=value format")
    key, raw_value = override.split("=", 1)
    # JSON first so numbers and booleans keep their type
    try:
        value = json.loads(raw_value)
    except json.JSONDecodeError:
        value = raw_value
    nested_keys = key.split(".")
    current: Dict[str, Any] = {}
    cursor = current
    for nested_key in nested_keys[:-1]:
        cursor[nested_key] = {}
        cursor = cursor[nested_key]
    cursor[nested_keys[-1]] = value
    return current


def load_config(
    path: Optional[str | Path] = None,
    overrides: Optional[Iterable[str]] = None,
) -> ControllerConfig:
    """Load a :class:`ControllerConfig` from ``path`` with ``key.sub=value`` overrides.

    Without ``path`` the defaults are used as the base.
    """
    payload: Dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with path.open("r", encoding="utf-8") as handle:
            payload = deepcopy(yaml.safe_load(handle) or {})

    for override in overrides or ():
        payload = dict(_merge_dict(payload, _parse_override(override)))

    return ControllerConfig.model_validate(payload)
