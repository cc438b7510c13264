"""Pydantic schemas defining configuration contracts."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_CACHE_DURATION_SECONDS = 600
DEFAULT_SCALE_DOWN_DELAY_SECONDS = 600


class EngineConfig(BaseModel):
    cache_duration_seconds: int = DEFAULT_CACHE_DURATION_SECONDS
    default_scale_down_delay_seconds: int = Field(default=DEFAULT_SCALE_DOWN_DELAY_SECONDS, ge=0)

    @property
    def cache_duration(self) -> timedelta:
        # Zero or negative means "not configured"
        if self.cache_duration_seconds > 0:
            return timedelta(seconds=self.cache_duration_seconds)
        return timedelta(seconds=DEFAULT_CACHE_DURATION_SECONDS)

    @property
    def default_scale_down_delay(self) -> timedelta:
        return timedelta(seconds=self.default_scale_down_delay_seconds)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_logs: bool = False
    log_dir: Optional[str] = None


class ControllerConfig(BaseModel):
    name: str = "replica-autoscaler-controller"
    engine: EngineConfig = Field(default_factory=EngineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    max_conflict_retries: int = Field(default=3, ge=1)
