"""
Lock-holding wrapper around RingHash for rings shared between threads.

RingHash itself does no locking. This wrapper takes a single re-entrant
lock around every call, which is enough when membership changes are rare
compared to lookups.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

import numpy as np

from .accept import AcceptFunction
from .hashing import HashFunction
from .ring import Key, RingHash
from .values import RingValue


class SynchronizedRingHash:
    """
    Thread-safe facade over a RingHash.

    Usage:
        ring = SynchronizedRingHash(RingHash(default_weight=100))
        ring.add_string("cache-a", "cache-b")

        # Several calls as one critical section
        with ring.locked() as inner:
            if "cache-c" not in inner:
                inner.add_string("cache-c")
    """

    def __init__(self, ring: RingHash = None):
        self._ring = ring if ring is not None else RingHash()
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[RingHash]:
        """Hold the lock and yield the wrapped ring."""
        with self._lock:
            yield self._ring

    @property
    def default_weight(self) -> int:
        return self._ring.default_weight

    @property
    def hash_fn(self) -> HashFunction:
        return self._ring.hash_fn

    @property
    def virtual_point_count(self) -> int:
        with self._lock:
            return self._ring.virtual_point_count

    def is_empty(self) -> bool:
        with self._lock:
            return self._ring.is_empty()

    def add(self, *values: RingValue) -> None:
        with self._lock:
            self._ring.add(*values)

    def add_string(self, *ring_ids: str) -> None:
        with self._lock:
            self._ring.add_string(*ring_ids)

    def add_string_with_weight(self, ring_id: str, weight: int) -> None:
        with self._lock:
            self._ring.add_string_with_weight(ring_id, weight)

    def add_with_weight(self, value: RingValue, weight: int) -> None:
        with self._lock:
            self._ring.add_with_weight(value, weight)

    def remove(self, ring_id: str) -> None:
        with self._lock:
            self._ring.remove(ring_id)

    def get(self, key: Key) -> Optional[str]:
        with self._lock:
            return self._ring.get(key)

    def get_n(self, key: Key, n: int, accept: AcceptFunction = None) -> List[str]:
        with self._lock:
            return self._ring.get_n(key, n, accept)

    def get_many(self, keys: Iterable[Key]) -> List[Optional[str]]:
        with self._lock:
            return self._ring.get_many(keys)

    def get_value(self, key: Key) -> Optional[RingValue]:
        with self._lock:
            return self._ring.get_value(key)

    def value_of(self, ring_id: str) -> RingValue:
        with self._lock:
            return self._ring.value_of(ring_id)

    def weight_of(self, ring_id: str) -> int:
        with self._lock:
            return self._ring.weight_of(ring_id)

    def nodes(self) -> List[str]:
        with self._lock:
            return self._ring.nodes()

    def positions(self) -> np.ndarray:
        with self._lock:
            return self._ring.positions()

    def ownership(self) -> Dict[str, float]:
        with self._lock:
            return self._ring.ownership()

    def __len__(self) -> int:
        with self._lock:
            return len(self._ring)

    def __contains__(self, ring_id: str) -> bool:
        with self._lock:
            return ring_id in self._ring

    def __repr__(self) -> str:
        with self._lock:
            return f"Synchronized{self._ring!r}"
