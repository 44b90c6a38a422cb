"""Prometheus metrics utilities."""
from __future__ import annotations

from typing import Iterable, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, start_http_server


class CacheMetrics:
    """Counters and gauges for one cache instance.

    Each instance owns its registry so several caches can live in one process.
    """

    def __init__(
        self,
        buckets: Iterable[float] = (0.01, 0.1, 0.5, 1.0, 5.0),
        registry: Optional[CollectorRegistry] = None,
    ):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.operations = Counter(
            "address_cache_operations_total",
            "Cache operations by outcome",
            ["operation", "status"],
            registry=self.registry,
        )
        self.expired = Counter(
            "address_cache_expired_total",
            "Occurrences dropped because their ttl elapsed",
            registry=self.registry,
        )
        self.size = Gauge(
            "address_cache_size",
            "Slots currently occupied",
            registry=self.registry,
        )
        self.take_wait = Histogram(
            "address_cache_take_wait_seconds",
            "Time take() spent waiting for a live address",
            buckets=tuple(buckets),
            registry=self.registry,
        )

    def record(self, operation: str, status: str) -> None:
        self.operations.labels(operation=operation, status=status).inc()

    def start_exporter(self, port: int) -> None:
        start_http_server(port, registry=self.registry)
