"""Resource models.

Responsibility: Typed snapshots of the autoscaler resource, its persisted status
and the target workload, plus YAML manifest loading.
"""

from .autoscaler import (
    DEFAULT_SCALE_DOWN_DELAY,
    Autoscaler,
    AutoscalerSpec,
    AutoscalerStatus,
    CacheEntry,
    CacheEntryKey,
    CapacityReservation,
    ScaleTargetRef,
)
from .base import ObjectMeta, ensure_utc
from .manifests import load_manifest, parse_manifest
from .workload import DEFAULT_REPLICAS, TargetWorkload, WorkloadSpec

__all__ = [
    "DEFAULT_SCALE_DOWN_DELAY",
    "DEFAULT_REPLICAS",
    "Autoscaler",
    "AutoscalerSpec",
    "AutoscalerStatus",
    "CacheEntry",
    "CacheEntryKey",
    "CapacityReservation",
    "ObjectMeta",
    "ScaleTargetRef",
    "TargetWorkload",
    "WorkloadSpec",
    "ensure_utc",
    "load_manifest",
    "parse_manifest",
]
