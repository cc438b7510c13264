"""Reconcile loop pieces.

Responsibility: Loads autoscaler and target snapshots from a resource store,
runs the decision engine and applies the resulting patches, treating missing
or deleting resources as no-ops and re-deciding on write conflicts.
"""

from .reconciler import FAILURE_REASON, ReconcileResult, Reconciler
from .store import Event, InMemoryResourceStore, ResourceStore

__all__ = [
    "FAILURE_REASON",
    "ReconcileResult",
    "Reconciler",
    "Event",
    "InMemoryResourceStore",
    "ResourceStore",
]
