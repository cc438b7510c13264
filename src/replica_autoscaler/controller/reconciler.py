"""One-shot reconcile of a single autoscaler against its target workload."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from ..config.schema import ControllerConfig
from ..core.exceptions import EvaluatorFailure, NotFound, WriteConflict
from ..core.logging import correlation_scope
from ..core.retry import RetryError, RetryPolicy, retry_call
from ..engine.decision import Decision, ReplicaDecisionEngine
from ..engine.evaluators import DemandEvaluator
from ..resources import ensure_utc
from .store import EVENT_NORMAL, ResourceStore

LOGGER = logging.getLogger(__name__)

FAILURE_REASON = "RunnerAutoscalingFailure"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ReconcileResult:
    namespace: str
    name: str
    decision: Optional[Decision] = None
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


class Reconciler:
    """Reads both resources, decides, and writes the target then the status.

    A version conflict on either write restarts the whole cycle from a fresh
    read, up to ``config.max_conflict_retries`` attempts.
    """

    def __init__(
        self,
        store: ResourceStore,
        evaluator: DemandEvaluator,
        config: Optional[ControllerConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.config = config or ControllerConfig()
        self.engine = ReplicaDecisionEngine(evaluator, self.config.engine)
        self.clock = clock

    def reconcile(self, namespace: str, name: str, now: Optional[datetime] = None) -> ReconcileResult:
        policy = RetryPolicy(
            max_attempts=self.config.max_conflict_retries,
            retry_exceptions=(WriteConflict,),
        )
        with correlation_scope(f"{namespace}/{name}"):
            try:
                return retry_call(self._reconcile_once, namespace, name, now, policy=policy, on_retry=self._on_conflict)
            except RetryError as exc:
                LOGGER.error("Giving up on %s/%s after %d conflicting writes", namespace, name, exc.attempts)
                raise exc.last_exception from None

    def _on_conflict(self, attempt: int, exc: BaseException, delay: float) -> None:
        LOGGER.info("Write conflict on attempt %d, recomputing from a fresh read: %s", attempt, exc)

    def _reconcile_once(self, namespace: str, name: str, now: Optional[datetime]) -> ReconcileResult:
        moment = ensure_utc(now) if now is not None else self.clock()

        try:
            autoscaler = self.store.get_autoscaler(namespace, name)
        except NotFound:
            LOGGER.debug("Autoscaler %s/%s is gone", namespace, name)
            return ReconcileResult(namespace, name, skipped_reason="autoscaler not found")
        if autoscaler.metadata.is_deleting:
            return ReconcileResult(namespace, name, skipped_reason="autoscaler is being deleted")

        target_namespace, target_name = autoscaler.target_key
        try:
            target = self.store.get_target(target_namespace, target_name)
        except NotFound:
            LOGGER.debug("Target %s/%s of %s is gone", target_namespace, target_name, autoscaler.identity)
            return ReconcileResult(namespace, name, skipped_reason="target not found")
        if target.metadata.is_deleting:
            return ReconcileResult(namespace, name, skipped_reason="target is being deleted")

        try:
            decision = self.engine.decide(autoscaler, target, moment)
        except EvaluatorFailure as exc:
            self.store.record_event(autoscaler, EVENT_NORMAL, FAILURE_REASON, exc.message)
            LOGGER.error("Could not compute replicas for %s: %s", autoscaler.identity, exc.message)
            raise

        if decision.target_patch is not None:
            self.store.apply_target_patch(target, decision.target_patch)
            LOGGER.info(
                "Scaled %s from %d to %d replicas",
                target.identity,
                decision.current_replicas,
                decision.target_patch.replicas,
            )
        if decision.status_patch is not None:
            self.store.apply_status_patch(autoscaler, decision.status_patch)

        return ReconcileResult(namespace, name, decision=decision)
