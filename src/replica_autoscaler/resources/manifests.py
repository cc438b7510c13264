"""Reading resource manifests from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from .autoscaler import Autoscaler
from .workload import TargetWorkload

AUTOSCALER_KIND = "HorizontalRunnerAutoscaler"

Resource = Union[Autoscaler, TargetWorkload]


def parse_manifest(payload: Mapping[str, Any]) -> Resource:
    """Validate ``payload`` as an autoscaler or, for any other kind, a workload."""
    if not isinstance(payload, Mapping):
        raise ValueError("Manifest must be a mapping")
    if payload.get("kind") == AUTOSCALER_KIND:
        return Autoscaler.model_validate(payload)
    return TargetWorkload.model_validate(payload)


def load_manifest(path: str | Path) -> Resource:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Manifest not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    return parse_manifest(payload)
