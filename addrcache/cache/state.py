"""Unsynchronized cache state: the slot sequence and the per-address entries.

Both structures are only ever changed together inside one method of
:class:`AddressState`. Callers are expected to hold a single lock around
every call so readers never see one structure updated without the other.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Hashable, List, Optional

ADDED = "added"
FULL = "full"
DUPLICATE = "duplicate"


@dataclass
class AddressEntry:
    address: Hashable
    enqueued_at: float

    def age(self, now: float) -> float:
        return now - self.enqueued_at

    def is_expired(self, now: float, ttl: float) -> bool:
        return self.age(now) >= ttl


@dataclass
class ScanResult:
    """Outcome of one pass over the front of the slot sequence."""

    address: Optional[Hashable] = None
    expired: List[Hashable] = field(default_factory=list)
    discarded: int = 0


class AddressState:
    def __init__(self, ttl: float, capacity: int, allow_duplicates: bool = False):
        self.ttl = ttl
        self.capacity = capacity
        self.allow_duplicates = allow_duplicates
        self.order: Deque[Hashable] = deque()
        self.entries: Dict[Hashable, Deque[AddressEntry]] = {}

    def __len__(self) -> int:
        return len(self.order)

    @property
    def full(self) -> bool:
        return len(self.order) >= self.capacity

    @property
    def tracked(self) -> int:
        return len(self.entries)

    def has_live(self, address: Hashable, now: float) -> bool:
        occurrences = self.entries.get(address)
        # newest occurrence is the last one to expire
        return bool(occurrences) and not occurrences[-1].is_expired(now, self.ttl)

    def offer(self, address: Hashable, now: float) -> str:
        if self.full:
            return FULL
        if not self.allow_duplicates and self.has_live(address, now):
            return DUPLICATE
        self.entries.setdefault(address, deque()).append(AddressEntry(address, now))
        self.order.append(address)
        return ADDED

    def discard(self, address: Hashable) -> bool:
        try:
            self.order.remove(address)
        except ValueError:
            return False
        self._pop_entry(address)
        return True

    def front(self) -> Optional[Hashable]:
        return self.order[0] if self.order else None

    def pop_live(self, now: float) -> ScanResult:
        """Pop slots from the front until one holds a live entry.

        Slots without an entry are discarded and expired occurrences are
        dropped from both structures. ``result.address`` stays ``None`` when
        the sequence runs empty.
        """
        result = ScanResult()
        while self.order:
            address = self.order.popleft()
            entry = self._pop_entry(address)
            if entry is None:
                result.discarded += 1
                continue
            if entry.is_expired(now, self.ttl):
                result.expired.append(address)
                continue
            result.address = address
            break
        return result

    def purge_expired(self, now: float) -> ScanResult:
        # Only sweeps the front; stops at the first live occurrence.
        result = ScanResult()
        while self.order:
            address = self.order[0]
            occurrences = self.entries.get(address)
            if not occurrences:
                self.order.popleft()
                result.discarded += 1
                continue
            if not occurrences[0].is_expired(now, self.ttl):
                break
            self.order.popleft()
            self._pop_entry(address)
            result.expired.append(address)
        return result

    def clear(self) -> int:
        dropped = len(self.order)
        self.order.clear()
        self.entries.clear()
        return dropped

    def _pop_entry(self, address: Hashable) -> Optional[AddressEntry]:
        occurrences = self.entries.get(address)
        if not occurrences:
            self.entries.pop(address, None)
            return None
        entry = occurrences.popleft()
        if not occurrences:
            del self.entries[address]
        return entry
