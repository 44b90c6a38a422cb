"""asyncio flavour of the address cache."""
from __future__ import annotations

import asyncio
import time
from typing import Hashable, Optional

import structlog

from addrcache.cache.base import BaseAddressCache
from addrcache.common.models import CacheStats

logger = structlog.get_logger(__name__)


class AsyncAddressCache(BaseAddressCache):
    """Same contract as :class:`AddressCache` for code running on an event loop.

    A waiting ``take`` can be cancelled with ``Task.cancel()``; the
    cancellation propagates and no address is consumed.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._cond = asyncio.Condition()

    async def add(self, address: Hashable) -> bool:
        async with self._cond:
            if address is None:
                return self._reject("add", "null")
            if self._closed:
                return self._reject("add", "closed", address)
            status = self._state.offer(address, self._clock.now())
            added = self._note_add(address, status)
            if added:
                self._cond.notify()
            return added

    async def remove(self, address: Hashable) -> bool:
        async with self._cond:
            if address is None:
                return self._reject("remove", "null")
            return self._note_remove(address, self._state.discard(address))

    async def peek(self) -> Optional[Hashable]:
        async with self._cond:
            return self._state.front()

    async def take(self, timeout: Optional[float] = None) -> Optional[Hashable]:
        started = time.monotonic()
        deadline = None if timeout is None else started + max(0.0, timeout)
        async with self._cond:
            while True:
                result = self._state.pop_live(self._clock.now())
                self._note_scan(result)
                if result.address is not None:
                    self._note_take(result.address, time.monotonic() - started)
                    return result.address
                if self._closed:
                    self._note_take(None, time.monotonic() - started, "closed")
                    return None
                try:
                    if deadline is None:
                        await self._cond.wait()
                        continue
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        self._note_take(None, time.monotonic() - started, "timeout")
                        return None
                    await asyncio.wait_for(self._cond.wait(), remaining)
                except asyncio.TimeoutError:
                    # lock is held again here; loop once more before giving up
                    continue
                except asyncio.CancelledError:
                    logger.debug("address_cache.take.cancelled")
                    raise

    async def purge_expired(self) -> int:
        async with self._cond:
            result = self._state.purge_expired(self._clock.now())
            self._note_scan(result)
            return len(result.expired)

    async def clear(self) -> int:
        async with self._cond:
            dropped = self._state.clear()
            self._record_size()
            return dropped

    async def close(self) -> None:
        async with self._cond:
            if self._closed:
                return
            self._closed = True
            self._note_close()
            self._cond.notify_all()

    async def stats(self) -> CacheStats:
        async with self._cond:
            return self._snapshot()

    async def contains(self, address: Hashable) -> bool:
        async with self._cond:
            return self._state.has_live(address, self._clock.now())

    async def __aenter__(self) -> "AsyncAddressCache":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
