"""Pydantic models for cache settings and statistics."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CAPACITY = 10000


class CacheSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    ttl_seconds: float = Field(..., gt=0)
    capacity: int = Field(DEFAULT_CAPACITY, gt=0)
    allow_duplicates: bool = False


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_mode: bool = Field(True, alias="json")

    model_config = ConfigDict(populate_by_name=True)


class ObservabilitySettings(BaseModel):
    enabled: bool = False
    metrics_port: int = 9310
    histogram_buckets: List[float] = Field(default_factory=lambda: [0.01, 0.1, 0.5, 1.0, 5.0])


class AppConfig(BaseModel):
    """Top level layout of ``config/address_cache.yaml``."""

    cache: CacheSettings
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


class CacheStats(BaseModel):
    size: int
    capacity: int
    ttl_seconds: float
    tracked_addresses: int
    closed: bool
    added: int = 0
    rejected: int = 0
    removed: int = 0
    taken: int = 0
    expired: int = 0
    discarded: int = 0
