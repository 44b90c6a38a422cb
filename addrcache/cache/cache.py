"""Thread-safe, bounded address cache with lazy expiration."""
from __future__ import annotations

import threading
import time
from typing import Hashable, Optional

from addrcache.cache.base import BaseAddressCache
from addrcache.common.models import CacheStats


class AddressCache(BaseAddressCache):
    """Bounded FIFO of addresses whose entries expire ``ttl`` seconds after insertion.

    ``add`` never blocks: it returns ``False`` when the address is ``None``,
    already live, or the cache is full. ``take`` blocks until a live address
    is available, the timeout elapses, or the cache is closed. Expired
    occurrences are only dropped when ``take`` (or ``purge_expired``) walks
    over them, so ``peek`` may still report one.

    ``remove`` drops the oldest occurrence of an address. If an expired
    occurrence is still queued ahead of a re-added live one, ``remove``
    drops the expired one and the address stays in the cache.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._cond = threading.Condition(threading.Lock())

    def add(self, address: Hashable) -> bool:
        with self._cond:
            if address is None:
                return self._reject("add", "null")
            if self._closed:
                return self._reject("add", "closed", address)
            status = self._state.offer(address, self._clock.now())
            added = self._note_add(address, status)
            if added:
                self._cond.notify()
            return added

    def remove(self, address: Hashable) -> bool:
        with self._cond:
            if address is None:
                return self._reject("remove", "null")
            return self._note_remove(address, self._state.discard(address))

    def peek(self) -> Optional[Hashable]:
        with self._cond:
            return self._state.front()

    def take(self, timeout: Optional[float] = None) -> Optional[Hashable]:
        """Remove and return the oldest live address.

        Waits forever when ``timeout`` is ``None``. Returns ``None`` with
        nothing consumed if the timeout elapses or the cache gets closed.
        """
        started = time.monotonic()
        deadline = None if timeout is None else started + max(0.0, timeout)
        with self._cond:
            while True:
                result = self._state.pop_live(self._clock.now())
                self._note_scan(result)
                if result.address is not None:
                    self._note_take(result.address, time.monotonic() - started)
                    return result.address
                if self._closed:
                    self._note_take(None, time.monotonic() - started, "closed")
                    return None
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    self._note_take(None, time.monotonic() - started, "timeout")
                    return None
                self._cond.wait(remaining)

    def purge_expired(self) -> int:
        with self._cond:
            result = self._state.purge_expired(self._clock.now())
            self._note_scan(result)
            return len(result.expired)

    def clear(self) -> int:
        with self._cond:
            dropped = self._state.clear()
            self._record_size()
            return dropped

    def close(self) -> None:
        """Stop accepting addresses and wake every waiting ``take``."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._note_close()
            self._cond.notify_all()

    def stats(self) -> CacheStats:
        with self._cond:
            return self._snapshot()

    def __contains__(self, address: Hashable) -> bool:
        with self._cond:
            return self._state.has_live(address, self._clock.now())

    def __enter__(self) -> "AddressCache":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
