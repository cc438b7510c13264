"""Exception hierarchy surfaced by the decision engine and the reconciler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class AutoscalerError(RuntimeError):
    message: str
    code: str = "autoscaler_error"
    metadata: Dict[str, Any] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        super().__init__(self.message)
        if self.metadata is None:
            self.metadata = {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "metadata": self.metadata}


@dataclass
class EvaluatorFailure(AutoscalerError):
    """The demand evaluator could not produce a replica suggestion."""

    code: str = "evaluator_failure"


@dataclass
class WriteConflict(AutoscalerError):
    """A patch was rejected because the persisted resource version moved on."""

    code: str = "write_conflict"


@dataclass
class NotFound(AutoscalerError):
    """The autoscaler or its target does not exist."""

    code: str = "not_found"
