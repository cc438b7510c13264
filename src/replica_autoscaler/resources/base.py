"""Shared base model, timestamp handling and object metadata."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


Timestamp = Annotated[datetime, AfterValidator(ensure_utc)]


class ResourceModel(BaseModel):
    """Accepts both the camelCase wire form and snake_case field names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ObjectMeta(ResourceModel):
    name: str
    namespace: str = "default"
    resource_version: int = Field(default=0, alias="resourceVersion", ge=0)
    deletion_timestamp: Optional[Timestamp] = Field(default=None, alias="deletionTimestamp")

    @property
    def identity(self) -> str:
        return f"{self.namespace}/{self.name}"

    @property
    def is_deleting(self) -> bool:
        return self.deletion_timestamp is not None
