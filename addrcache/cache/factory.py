"""Wire a cache up from ``config/address_cache.yaml``."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog

from addrcache.cache.aio import AsyncAddressCache
from addrcache.cache.cache import AddressCache
from addrcache.cache.clock import Clock
from addrcache.common.config import DEFAULT_CONFIG_PATH, load_config
from addrcache.common.logging import configure_logging
from addrcache.common.metrics import CacheMetrics

logger = structlog.get_logger(__name__)


def build_cache(
    relative_path: str = DEFAULT_CONFIG_PATH,
    *,
    base_dir: Optional[Path] = None,
    clock: Optional[Clock] = None,
    asynchronous: bool = False,
    start_exporter: bool = True,
):
    config = load_config(relative_path, base_dir=base_dir)
    configure_logging(config.logging.level, config.logging.json_mode)
    metrics = None
    if config.observability.enabled:
        metrics = CacheMetrics(config.observability.histogram_buckets)
        if start_exporter:  # pragma: no cover - binds a port
            metrics.start_exporter(config.observability.metrics_port)
    cls = AsyncAddressCache if asynchronous else AddressCache
    cache = cls.from_settings(config.cache, clock=clock, metrics=metrics)
    logger.info(
        "address_cache.configured",
        ttl=cache.ttl,
        capacity=cache.capacity,
        allow_duplicates=config.cache.allow_duplicates,
        metrics=metrics is not None,
    )
    return cache
