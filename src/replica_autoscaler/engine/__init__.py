"""Replica decision engine.

Responsibility: Turns an autoscaler snapshot and its target workload into patch
intents, combining the persisted decision cache, the scale-down debounce, the
capacity reservation overlay and the replica ceiling.
"""

from .cache import DEFAULT_CACHE_TTL, lookup, prepare_append
from .decision import Decision, PersistenceGateway, ReplicaDecisionEngine, StatusPatch, TargetPatch
from .evaluators import CallableDemandEvaluator, DemandEvaluator, StaticDemandEvaluator
from .hysteresis import accept_candidate, is_scale_out
from .reservations import active_reservation_total

__all__ = [
    "DEFAULT_CACHE_TTL",
    "lookup",
    "prepare_append",
    "Decision",
    "PersistenceGateway",
    "ReplicaDecisionEngine",
    "StatusPatch",
    "TargetPatch",
    "CallableDemandEvaluator",
    "DemandEvaluator",
    "StaticDemandEvaluator",
    "accept_candidate",
    "is_scale_out",
    "active_reservation_total",
]
