"""Resource store contract and a dictionary-backed implementation."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Protocol, Tuple, TypeVar

from ..core.exceptions import NotFound, WriteConflict
from ..engine.decision import StatusPatch, TargetPatch
from ..resources import Autoscaler, TargetWorkload

__all__ = ["Event", "ResourceStore", "InMemoryResourceStore"]

EVENT_NORMAL = "Normal"

_Key = Tuple[str, str]
_R = TypeVar("_R", Autoscaler, TargetWorkload)


@dataclass(frozen=True)
class Event:
    involved_object: str
    type: str
    reason: str
    message: str
    timestamp: datetime


class ResourceStore(Protocol):
    """Read access, conditional writes and event recording for the reconciler."""

    def get_autoscaler(self, namespace: str, name: str) -> Autoscaler: ...

    def get_target(self, namespace: str, name: str) -> TargetWorkload: ...

    def apply_target_patch(self, target: TargetWorkload, patch: TargetPatch) -> TargetWorkload: ...

    def apply_status_patch(self, autoscaler: Autoscaler, patch: StatusPatch) -> Autoscaler: ...

    def record_event(self, autoscaler: Autoscaler, event_type: str, reason: str, message: str) -> None: ...


def _bump(resource: _R, **updates: object) -> _R:
    metadata = resource.metadata.model_copy(
        update={"resource_version": resource.metadata.resource_version + 1}
    )
    return resource.model_copy(update={"metadata": metadata, **updates})


class InMemoryResourceStore:
    """Keeps resources in memory with per-object resource versions.

    Writes succeed only when the caller's snapshot carries the stored
    resource version; otherwise :class:`WriteConflict` is raised.
    """

    def __init__(self) -> None:
        self._autoscalers: Dict[_Key, Autoscaler] = {}
        self._targets: Dict[_Key, TargetWorkload] = {}
        self._lock = threading.RLock()
        self.events: List[Event] = []

    @staticmethod
    def _key(resource: Autoscaler | TargetWorkload) -> _Key:
        return resource.metadata.namespace, resource.metadata.name

    def put_autoscaler(self, autoscaler: Autoscaler) -> Autoscaler:
        with self._lock:
            stored = _bump(autoscaler)
            self._autoscalers[self._key(autoscaler)] = stored
            return stored

    def put_target(self, target: TargetWorkload) -> TargetWorkload:
        with self._lock:
            stored = _bump(target)
            self._targets[self._key(target)] = stored
            return stored

    def delete_autoscaler(self, namespace: str, name: str) -> None:
        with self._lock:
            self._autoscalers.pop((namespace, name), None)

    def delete_target(self, namespace: str, name: str) -> None:
        with self._lock:
            self._targets.pop((namespace, name), None)

    def get_autoscaler(self, namespace: str, name: str) -> Autoscaler:
        with self._lock:
            try:
                return self._autoscalers[(namespace, name)]
            except KeyError:
                raise NotFound(f"Autoscaler {namespace}/{name} not found") from None

    def get_target(self, namespace: str, name: str) -> TargetWorkload:
        with self._lock:
            try:
                return self._targets[(namespace, name)]
            except KeyError:
                raise NotFound(f"Target {namespace}/{name} not found") from None

    def apply_target_patch(self, target: TargetWorkload, patch: TargetPatch) -> TargetWorkload:
        with self._lock:
            stored = self.get_target(target.metadata.namespace, target.metadata.name)
            self._check_version(stored, target)
            spec = stored.spec.model_copy(update={"replicas": patch.replicas})
            updated = _bump(stored, spec=spec)
            self._targets[self._key(updated)] = updated
            return updated

    def apply_status_patch(self, autoscaler: Autoscaler, patch: StatusPatch) -> Autoscaler:
        with self._lock:
            stored = self.get_autoscaler(autoscaler.metadata.namespace, autoscaler.metadata.name)
            self._check_version(stored, autoscaler)
            updated = _bump(stored, status=patch.apply_to(stored.status))
            self._autoscalers[self._key(updated)] = updated
            return updated

    def record_event(self, autoscaler: Autoscaler, event_type: str, reason: str, message: str) -> None:
        with self._lock:
            self.events.append(
                Event(
                    involved_object=autoscaler.identity,
                    type=event_type,
                    reason=reason,
                    message=message,
                    timestamp=datetime.now(timezone.utc),
                )
            )

    @staticmethod
    def _check_version(stored: _R, snapshot: _R) -> None:
        if stored.metadata.resource_version != snapshot.metadata.resource_version:
            raise WriteConflict(
                f"{stored.kind} {stored.metadata.identity} was modified "
                f"(have version {snapshot.metadata.resource_version}, "
                f"stored {stored.metadata.resource_version})",
                metadata={"identity": stored.metadata.identity},
            )
