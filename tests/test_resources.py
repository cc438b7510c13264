"""Resource model and manifest tests."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from replica_autoscaler.resources import (
    Autoscaler,
    TargetWorkload,
    load_manifest,
    parse_manifest,
)

AUTOSCALER_MANIFEST = """
apiVersion: autoscaling.replica.dev/v1alpha1
kind: HorizontalRunnerAutoscaler
metadata:
  name: example-hra
  namespace: ci
spec:
  scaleTargetRef:
    name: example-runners
  maxReplicas: 8
  scaleDownDelaySecondsAfterScaleUp: 300
  capacityReservations:
    - replicas: 2
      expirationTime: "2024-05-01T13:00:00Z"
status:
  desiredReplicas: 3
  lastSuccessfulScaleOutTime: "2024-05-01T11:55:00Z"
  cacheEntries:
    - key: DesiredReplicas
      value: 3
      expirationTime: "2024-05-01T12:05:00Z"
"""


def test_load_autoscaler_manifest(tmp_path):
    path = tmp_path / "hra.yaml"
    path.write_text(AUTOSCALER_MANIFEST)

    autoscaler = load_manifest(path)

    assert isinstance(autoscaler, Autoscaler)
    assert autoscaler.identity == "ci/example-hra"
    assert autoscaler.target_key == ("ci", "example-runners")
    assert autoscaler.spec.max_replicas == 8
    assert autoscaler.spec.scale_down_delay() == timedelta(minutes=5)
    reservation = autoscaler.spec.capacity_reservations[0]
    assert reservation.expiration_time == datetime(2024, 5, 1, 13, tzinfo=timezone.utc)
    assert autoscaler.status.desired_replicas == 3
    assert autoscaler.status.cache_entries[0].value == 3


def test_wire_round_trip_keeps_camel_case(tmp_path):
    path = tmp_path / "hra.yaml"
    path.write_text(AUTOSCALER_MANIFEST)

    payload = load_manifest(path).to_dict()

    assert payload["spec"]["scaleTargetRef"]["name"] == "example-runners"
    assert payload["status"]["cacheEntries"][0]["key"] == "DesiredReplicas"
    assert "minReplicas" not in payload["spec"]


def test_workload_defaults():
    target = parse_manifest({"kind": "RunnerDeployment", "metadata": {"name": "runners"}})

    assert isinstance(target, TargetWorkload)
    assert target.current_replicas == 1
    assert target.metadata.namespace == "default"
    assert not target.metadata.is_deleting


def test_default_scale_down_delay(autoscaler_factory):
    assert autoscaler_factory().spec.scale_down_delay() == timedelta(minutes=10)
    assert autoscaler_factory().spec.scale_down_delay(timedelta(seconds=5)) == timedelta(seconds=5)


def test_naive_timestamps_are_utc(autoscaler_factory):
    autoscaler = autoscaler_factory(last_scale_out=datetime(2024, 5, 1, 12, 0))
    assert autoscaler.status.last_successful_scale_out_time.tzinfo == timezone.utc


def test_reservation_replicas_must_be_non_negative(autoscaler_factory, now):
    with pytest.raises(ValidationError):
        autoscaler_factory(reservations=[(-2, now)])


def test_snapshots_are_immutable(target_factory):
    target = target_factory(2)
    with pytest.raises(ValidationError):
        target.spec.replicas = 5


def test_manifest_must_be_mapping():
    with pytest.raises(ValueError):
        parse_manifest(["not", "a", "mapping"])


def test_missing_manifest(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_manifest(tmp_path / "nope.yaml")
