"""Demand evaluator contract and simple adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from ..resources import Autoscaler, TargetWorkload


class DemandEvaluator(Protocol):
    """Produces a raw replica suggestion for ``target``; raises on failure."""

    def evaluate(self, target: TargetWorkload, autoscaler: Autoscaler) -> int: ...


@dataclass(frozen=True)
class StaticDemandEvaluator:
    replicas: int

    def evaluate(self, target: TargetWorkload, autoscaler: Autoscaler) -> int:
        return self.replicas


@dataclass(frozen=True)
class CallableDemandEvaluator:
    """Wraps a plain function with the evaluator signature."""

    func: Callable[[TargetWorkload, Autoscaler], int]

    def evaluate(self, target: TargetWorkload, autoscaler: Autoscaler) -> int:
        return self.func(target, autoscaler)
