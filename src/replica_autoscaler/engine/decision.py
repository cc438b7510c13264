"""Replica decision engine.

Combines the decision cache, the scale-down debounce, the capacity reservation
overlay and the replica ceiling into a pair of patch intents. Nothing here
writes to a store; callers hand the intents to a persistence gateway.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from ..config.schema import EngineConfig
from ..core.exceptions import EvaluatorFailure
from ..core.logging import log_with_context
from ..resources import (
    Autoscaler,
    AutoscalerStatus,
    CacheEntry,
    CacheEntryKey,
    TargetWorkload,
    ensure_utc,
)
from . import cache
from .evaluators import DemandEvaluator
from .hysteresis import accept_candidate, is_scale_out
from .reservations import active_reservation_total

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetPatch:
    """Sets the target workload's replica count."""

    replicas: int

    def to_dict(self) -> Dict[str, Any]:
        return {"spec": {"replicas": self.replicas}}


@dataclass(frozen=True)
class StatusPatch:
    """Partial update of the autoscaler status; ``None`` fields are left untouched."""

    desired_replicas: Optional[int] = None
    last_successful_scale_out_time: Optional[datetime] = None
    cache_entries: Optional[List[CacheEntry]] = None

    def apply_to(self, status: AutoscalerStatus) -> AutoscalerStatus:
        updates: Dict[str, Any] = {}
        if self.desired_replicas is not None:
            updates["desired_replicas"] = self.desired_replicas
        if self.last_successful_scale_out_time is not None:
            updates["last_successful_scale_out_time"] = self.last_successful_scale_out_time
        if self.cache_entries is not None:
            updates["cache_entries"] = list(self.cache_entries)
        return status.model_copy(update=updates)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.desired_replicas is not None:
            payload["desiredReplicas"] = self.desired_replicas
        if self.last_successful_scale_out_time is not None:
            payload["lastSuccessfulScaleOutTime"] = self.last_successful_scale_out_time.isoformat()
        if self.cache_entries is not None:
            payload["cacheEntries"] = [entry.to_dict() for entry in self.cache_entries]
        return {"status": payload}


@dataclass(frozen=True)
class Decision:
    """Outcome of one :meth:`ReplicaDecisionEngine.decide` call."""

    baseline: int
    final: int
    current_replicas: int
    from_cache: bool
    candidate: Optional[int] = None
    reserved: int = 0
    target_patch: Optional[TargetPatch] = None
    status_patch: Optional[StatusPatch] = None

    @property
    def is_noop(self) -> bool:
        return self.target_patch is None and self.status_patch is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseline": self.baseline,
            "final": self.final,
            "currentReplicas": self.current_replicas,
            "fromCache": self.from_cache,
            "candidate": self.candidate,
            "reserved": self.reserved,
            "targetPatch": self.target_patch.to_dict() if self.target_patch else None,
            "statusPatch": self.status_patch.to_dict() if self.status_patch else None,
        }


class PersistenceGateway(Protocol):
    """Applies patch intents; raises ``WriteConflict`` on a stale snapshot."""

    def apply_target_patch(self, target: TargetWorkload, patch: TargetPatch) -> TargetWorkload: ...

    def apply_status_patch(self, autoscaler: Autoscaler, patch: StatusPatch) -> Autoscaler: ...


@dataclass
class ReplicaDecisionEngine:
    evaluator: DemandEvaluator
    config: EngineConfig = field(default_factory=EngineConfig)

    def decide(self, autoscaler: Autoscaler, target: TargetWorkload, now: datetime) -> Decision:
        """Compute patch intents for ``target`` and ``autoscaler.status``.

        Raises :class:`EvaluatorFailure` when the demand evaluator fails; no
        intents are produced in that case.
        """
        now = ensure_utc(now)
        status = autoscaler.status
        spec = autoscaler.spec
        current_replicas = target.current_replicas
        if spec.min_replicas is not None:
            LOGGER.debug("Ignoring minReplicas=%d on %s; only maxReplicas bounds the decision",
                         spec.min_replicas, autoscaler.identity)

        candidate: Optional[int] = None
        cached = cache.lookup(status, CacheEntryKey.DESIRED_REPLICAS, now)
        if cached is not None:
            baseline = cached
            LOGGER.debug("Using cached desired replicas %d for %s", cached, autoscaler.identity)
        else:
            candidate = self._evaluate(target, autoscaler)
            baseline = accept_candidate(
                status.desired_replicas,
                candidate,
                status.last_successful_scale_out_time,
                spec.scale_down_delay(self.config.default_scale_down_delay),
                now,
            )
            if baseline != candidate:
                LOGGER.debug(
                    "Holding %s at %d replicas; scale down to %d is still delayed",
                    autoscaler.identity,
                    baseline,
                    candidate,
                )

        reserved = active_reservation_total(spec.capacity_reservations, now)
        final = baseline + reserved
        if spec.max_replicas is not None and final > spec.max_replicas:
            final = spec.max_replicas

        target_patch = TargetPatch(replicas=final) if final != current_replicas else None
        status_patch = self._status_patch(status, final, baseline, now, cache_miss=cached is None)

        decision = Decision(
            baseline=baseline,
            final=final,
            current_replicas=current_replicas,
            from_cache=cached is not None,
            candidate=candidate,
            reserved=reserved,
            target_patch=target_patch,
            status_patch=status_patch,
        )
        log_with_context(
            LOGGER,
            logging.INFO,
            f"Decided {final} replicas for {autoscaler.identity} (current {current_replicas})",
            autoscaler=autoscaler.identity,
            baseline=baseline,
            final=final,
            reserved=reserved,
            from_cache=decision.from_cache,
        )
        return decision

    def _evaluate(self, target: TargetWorkload, autoscaler: Autoscaler) -> int:
        try:
            candidate = self.evaluator.evaluate(target, autoscaler)
        except EvaluatorFailure:
            raise
        except Exception as exc:
            raise EvaluatorFailure(
                f"Could not compute replicas: {exc}",
                metadata={"autoscaler": autoscaler.identity},
            ) from exc
        # bool is an int subclass; reject it along with floats and strings
        if isinstance(candidate, bool) or not isinstance(candidate, int) or candidate < 0:
            raise EvaluatorFailure(
                f"Evaluator returned an invalid replica count: {candidate!r}",
                metadata={"autoscaler": autoscaler.identity},
            )
        return candidate

    def _status_patch(
        self,
        status: AutoscalerStatus,
        final: int,
        baseline: int,
        now: datetime,
        *,
        cache_miss: bool,
    ) -> Optional[StatusPatch]:
        previous = status.desired_replicas
        # Unpublished status compares as the default single replica
        changed = final != (previous if previous is not None else 1)
        if not changed and not cache_miss:
            return None

        scale_out_time = now if changed and is_scale_out(previous, final) else None
        cache_entries = None
        if cache_miss:
            # The cached value is the debounced baseline, without reservations
            cache_entries = cache.prepare_append(
                status, CacheEntryKey.DESIRED_REPLICAS, baseline, now, self.config.cache_duration
            )
        return StatusPatch(
            desired_replicas=final,
            last_successful_scale_out_time=scale_out_time,
            cache_entries=cache_entries,
        )
