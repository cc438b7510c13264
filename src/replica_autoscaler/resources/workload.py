"""The scalable workload driven by an autoscaler."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import ObjectMeta, ResourceModel

DEFAULT_REPLICAS = 1


class WorkloadSpec(ResourceModel):
    replicas: Optional[int] = Field(default=None, ge=0)


class TargetWorkload(ResourceModel):
    api_version: str = Field(default="autoscaling.replica.dev/v1alpha1", alias="apiVersion")
    kind: str = "RunnerDeployment"
    metadata: ObjectMeta
    spec: WorkloadSpec = Field(default_factory=WorkloadSpec)

    @property
    def current_replicas(self) -> int:
        if self.spec.replicas is None:
            return DEFAULT_REPLICAS
        return self.spec.replicas

    @property
    def identity(self) -> str:
        return self.metadata.identity
