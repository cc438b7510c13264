import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from replica_autoscaler.resources import Autoscaler, TargetWorkload  # noqa: E402

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "engine: decision engine tests")
    config.addinivalue_line("markers", "controller: reconciler and store tests")
    config.addinivalue_line("markers", "cli: command line tests")


def make_autoscaler(
    *,
    name="runner-hra",
    namespace="default",
    target="runners",
    desired=None,
    last_scale_out=None,
    cache_entries=(),
    max_replicas=None,
    delay_seconds=None,
    reservations=(),
    deleting=False,
):
    """Build an autoscaler from the camelCase wire form.

    ``cache_entries`` is a sequence of ``(value, expiration)`` pairs and
    ``reservations`` a sequence of ``(replicas, expiration)`` pairs.
    """
    metadata = {"name": name, "namespace": namespace}
    if deleting:
        metadata["deletionTimestamp"] = NOW - timedelta(seconds=5)
    spec = {
        "scaleTargetRef": {"name": target},
        "capacityReservations": [
            {"replicas": replicas, "expirationTime": expiration} for replicas, expiration in reservations
        ],
    }
    if max_replicas is not None:
        spec["maxReplicas"] = max_replicas
    if delay_seconds is not None:
        spec["scaleDownDelaySecondsAfterScaleUp"] = delay_seconds
    status = {
        "cacheEntries": [
            {"key": "DesiredReplicas", "value": value, "expirationTime": expiration}
            for value, expiration in cache_entries
        ],
    }
    if desired is not None:
        status["desiredReplicas"] = desired
    if last_scale_out is not None:
        status["lastSuccessfulScaleOutTime"] = last_scale_out
    return Autoscaler.model_validate(
        {"kind": "HorizontalRunnerAutoscaler", "metadata": metadata, "spec": spec, "status": status}
    )


def make_target(replicas=None, *, name="runners", namespace="default", deleting=False):
    metadata = {"name": name, "namespace": namespace}
    if deleting:
        metadata["deletionTimestamp"] = NOW - timedelta(seconds=5)
    spec = {} if replicas is None else {"replicas": replicas}
    return TargetWorkload.model_validate({"kind": "RunnerDeployment", "metadata": metadata, "spec": spec})


class CountingEvaluator:
    """Returns queued suggestions in order, repeating the last one, and counts calls."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def evaluate(self, target, autoscaler):
        self.calls += 1
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def autoscaler_factory():
    return make_autoscaler


@pytest.fixture
def target_factory():
    return make_target


@pytest.fixture
def counting_evaluator():
    return CountingEvaluator
