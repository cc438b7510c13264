"""Pydantic models for the autoscaler resource and its persisted status."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import Field

from .base import ObjectMeta, ResourceModel, Timestamp

DEFAULT_SCALE_DOWN_DELAY = timedelta(minutes=10)


class ScaleTargetRef(ResourceModel):
    kind: str = "RunnerDeployment"
    name: str


class CapacityReservation(ResourceModel):
    """A time-bounded additive replica boost."""

    replicas: int = Field(ge=0)
    expiration_time: Timestamp = Field(alias="expirationTime")

    def is_active(self, now: datetime) -> bool:
        return self.expiration_time > now


class AutoscalerSpec(ResourceModel):
    scale_target_ref: ScaleTargetRef = Field(alias="scaleTargetRef")
    min_replicas: Optional[int] = Field(default=None, alias="minReplicas", ge=0)
    max_replicas: Optional[int] = Field(default=None, alias="maxReplicas", ge=0)
    scale_down_delay_seconds_after_scale_up: Optional[int] = Field(
        default=None, alias="scaleDownDelaySecondsAfterScaleUp", ge=0
    )
    capacity_reservations: List[CapacityReservation] = Field(
        default_factory=list, alias="capacityReservations"
    )

    def scale_down_delay(self, default: timedelta = DEFAULT_SCALE_DOWN_DELAY) -> timedelta:
        if self.scale_down_delay_seconds_after_scale_up is None:
            return default
        return timedelta(seconds=self.scale_down_delay_seconds_after_scale_up)


class CacheEntryKey(str, Enum):
    DESIRED_REPLICAS = "DesiredReplicas"


class CacheEntry(ResourceModel):
    key: CacheEntryKey
    value: int
    expiration_time: Timestamp = Field(alias="expirationTime")

    def is_expired(self, now: datetime) -> bool:
        return self.expiration_time <= now


class AutoscalerStatus(ResourceModel):
    desired_replicas: Optional[int] = Field(default=None, alias="desiredReplicas")
    last_successful_scale_out_time: Optional[Timestamp] = Field(
        default=None, alias="lastSuccessfulScaleOutTime"
    )
    cache_entries: List[CacheEntry] = Field(default_factory=list, alias="cacheEntries")


class Autoscaler(ResourceModel):
    api_version: str = Field(default="autoscaling.replica.dev/v1alpha1", alias="apiVersion")
    kind: str = "HorizontalRunnerAutoscaler"
    metadata: ObjectMeta
    spec: AutoscalerSpec
    status: AutoscalerStatus = Field(default_factory=AutoscalerStatus)

    @property
    def identity(self) -> str:
        return self.metadata.identity

    @property
    def target_key(self) -> Tuple[str, str]:
        """Namespace and name of the workload this autoscaler drives."""
        return self.metadata.namespace, self.spec.scale_target_ref.name
