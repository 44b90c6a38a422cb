"""Bookkeeping shared by the threaded and asyncio caches."""
from __future__ import annotations

from datetime import timedelta
from typing import Dict, Hashable, Optional, Union

import structlog

from addrcache.cache.clock import Clock, MonotonicClock
from addrcache.cache.state import ADDED, AddressState, ScanResult
from addrcache.common.config import parse_settings
from addrcache.common.metrics import CacheMetrics
from addrcache.common.models import DEFAULT_CAPACITY, CacheSettings, CacheStats

logger = structlog.get_logger(__name__)

Duration = Union[float, int, timedelta]


def _to_seconds(ttl: Duration) -> float:
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return ttl


class BaseAddressCache:
    def __init__(
        self,
        ttl: Duration,
        capacity: int = DEFAULT_CAPACITY,
        *,
        allow_duplicates: bool = False,
        clock: Optional[Clock] = None,
        metrics: Optional[CacheMetrics] = None,
    ):
        self.settings = parse_settings(
            {
                "ttl_seconds": _to_seconds(ttl),
                "capacity": capacity,
                "allow_duplicates": allow_duplicates,
            }
        )
        self._state = AddressState(
            self.settings.ttl_seconds,
            self.settings.capacity,
            self.settings.allow_duplicates,
        )
        self._clock = clock or MonotonicClock()
        self._metrics = metrics
        self._closed = False
        self._counts: Dict[str, int] = dict.fromkeys(
            ("added", "rejected", "removed", "taken", "expired", "discarded"), 0
        )

    @classmethod
    def from_settings(
        cls,
        settings: CacheSettings,
        clock: Optional[Clock] = None,
        metrics: Optional[CacheMetrics] = None,
    ):
        return cls(
            settings.ttl_seconds,
            settings.capacity,
            allow_duplicates=settings.allow_duplicates,
            clock=clock,
            metrics=metrics,
        )

    @property
    def ttl(self) -> float:
        return self.settings.ttl_seconds

    @property
    def capacity(self) -> int:
        return self.settings.capacity

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._state)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(ttl={self.ttl}, capacity={self.capacity}, "
            f"size={len(self._state)})"
        )

    def _reject(self, operation: str, reason: str, address: Optional[Hashable] = None) -> bool:
        self._counts["rejected"] += 1
        logger.debug(f"address_cache.{operation}.rejected", reason=reason, address=str(address))
        self._record(operation, reason)
        return False

    def _note_add(self, address: Hashable, status: str) -> bool:
        if status != ADDED:
            return self._reject("add", status, address)
        self._counts["added"] += 1
        self._record("add", "ok")
        return True

    def _note_remove(self, address: Hashable, removed: bool) -> bool:
        if removed:
            self._counts["removed"] += 1
            logger.debug("address_cache.remove", address=str(address))
        self._record("remove", "ok" if removed else "missing")
        return removed

    def _note_scan(self, result: ScanResult) -> None:
        for address in result.expired:
            logger.info("address_cache.expired", address=str(address), ttl=self.ttl)
        if result.discarded:
            logger.warning("address_cache.orphan_slot", count=result.discarded)
        self._counts["expired"] += len(result.expired)
        self._counts["discarded"] += result.discarded
        if self._metrics is not None and result.expired:
            self._metrics.expired.inc(len(result.expired))
        self._record_size()

    def _note_take(self, address: Optional[Hashable], waited: float, reason: str = "ok") -> None:
        if address is not None:
            self._counts["taken"] += 1
        else:
            logger.debug("address_cache.take.empty", reason=reason, waited=waited)
        if self._metrics is not None:
            self._metrics.take_wait.observe(waited)
        self._record("take", reason)

    def _note_close(self) -> None:
        logger.info("address_cache.closed", size=len(self._state))

    def _snapshot(self) -> CacheStats:
        return CacheStats(
            size=len(self._state),
            capacity=self.capacity,
            ttl_seconds=self.ttl,
            tracked_addresses=self._state.tracked,
            closed=self._closed,
            **self._counts,
        )

    def _record(self, operation: str, status: str) -> None:
        if self._metrics is None:
            return
        self._metrics.record(operation, status)
        self._record_size()

    def _record_size(self) -> None:
        if self._metrics is not None:
            self._metrics.size.set(len(self._state))
