"""
Consistent hash ring with weighted virtual nodes.

Each registered node places one virtual point on the ring per unit of
weight. A key is routed to the first virtual point at or after its own
hash, wrapping around past the largest point, so adding or removing a node
only moves the keys that fall on that node's arcs.

The ring does no locking. Callers sharing a ring between threads must
serialize access themselves, e.g. with SynchronizedRingHash.
"""

import bisect
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

import numpy as np

from .accept import AcceptFunction, accept_any
from .errors import DuplicateNodeError, InvalidWeightError, NodeNotFoundError
from .hashing import HASH_SPACE, HashFunction, crc32
from .values import RingValue, StringValue

logger = logging.getLogger(__name__)

Key = Union[str, bytes]


@dataclass(frozen=True)
class RingEntry:
    """A registered node: its weight and the value it was added with."""
    weight: int
    value: RingValue


def validate_weight(weight, ring_id: str = None) -> int:
    """Return weight as an int, raising InvalidWeightError unless it is >= 1."""
    if isinstance(weight, bool) or not isinstance(weight, (int, np.integer)):
        raise InvalidWeightError(weight, ring_id)
    if weight < 1:
        raise InvalidWeightError(weight, ring_id)
    return int(weight)


class RingHash:
    """
    Consistent hashing ring mapping keys to weighted nodes.

    Usage:
        ring = RingHash(default_weight=100)
        ring.add_string("cache-a", "cache-b", "cache-c")

        ring.get("user:123")                          # "cache-b"
        ring.get_n("user:123", 2, accept_unique)      # ["cache-b", "cache-a"]

        ring.remove("cache-b")
    """

    def __init__(self, default_weight: int = 1, hash_fn: HashFunction = None):
        """
        Initialize an empty ring.

        Args:
            default_weight: Virtual points per node when no weight is given
            hash_fn: Maps bytes to an unsigned 32-bit integer (default: CRC-32)
        """
        self._default_weight = validate_weight(default_weight)
        self._hash_fn = hash_fn or crc32

        self._entries: Dict[str, RingEntry] = {}

        # Every node claiming a position, sorted; the first one owns it
        self._claims: Dict[int, List[str]] = {}
        self._hash_map: Dict[int, str] = {}
        self._point_count = 0

        # Sorted index over the distinct positions in _hash_map
        self._positions = np.empty(0, dtype=np.int64)
        self._owners: List[str] = []

    @property
    def default_weight(self) -> int:
        return self._default_weight

    @property
    def hash_fn(self) -> HashFunction:
        return self._hash_fn

    @property
    def virtual_point_count(self) -> int:
        """Total virtual points placed, i.e. the sum of all node weights."""
        return self._point_count

    def _hash(self, key: Key) -> int:
        if isinstance(key, str):
            key = key.encode("utf-8")
        hash_val = int(self._hash_fn(key))
        if not 0 <= hash_val < HASH_SPACE:
            raise ValueError(
                f"Hash function returned {hash_val}, outside the unsigned 32-bit range"
            )
        return hash_val

    def _replica_hashes(self, ring_id: str, weight: int) -> List[int]:
        return [self._hash(f"{i}{ring_id}") for i in range(weight)]

    def _rebuild(self) -> None:
        """Re-sort the ring index after the position table changed."""
        positions = sorted(self._hash_map)
        self._positions = np.array(positions, dtype=np.int64)
        self._owners = [self._hash_map[p] for p in positions]

    def _search(self, hash_val: int) -> int:
        """Index of the first position >= hash_val, wrapping to 0."""
        idx = int(np.searchsorted(self._positions, hash_val, side="left"))
        if idx == len(self._positions):
            idx = 0
        return idx

    def is_empty(self) -> bool:
        """Return True if no virtual points are on the ring."""
        return self._point_count == 0

    def add(self, *values: RingValue) -> None:
        """
        Add values with the default weight.

        Stops at the first failure. Values added before it stay on the ring.
        """
        for value in values:
            self.add_with_weight(value, self._default_weight)

    def add_string(self, *ring_ids: str) -> None:
        """
        Add plain string nodes with the default weight.

        Stops at the first failure. Ids added before it stay on the ring.
        """
        for ring_id in ring_ids:
            self.add_string_with_weight(ring_id, self._default_weight)

    def add_string_with_weight(self, ring_id: str, weight: int) -> None:
        """Add a plain string node with a custom weight."""
        self.add_with_weight(StringValue(ring_id), weight)

    def add_with_weight(self, value: RingValue, weight: int) -> None:
        """
        Register a value on the ring.

        Args:
            value: Node value; its ring_id() must not be registered yet
            weight: Number of virtual points to place

        Raises:
            DuplicateNodeError: If the ring id is already registered
            InvalidWeightError: If weight is not a positive integer
            ValueError: If hash_fn returns a value outside 0..2**32-1
        """
        ring_id = value.ring_id()
        if ring_id in self._entries:
            raise DuplicateNodeError(ring_id)
        weight = validate_weight(weight, ring_id)

        hashes = self._replica_hashes(ring_id, weight)
        self._entries[ring_id] = RingEntry(weight, value)

        for hash_val in hashes:
            claimants = self._claims.setdefault(hash_val, [])
            if claimants and claimants[0] != ring_id:
                logger.warning(
                    f"Virtual point {hash_val} of '{ring_id}' collides with '{claimants[0]}'"
                )
            bisect.insort(claimants, ring_id)
            self._hash_map[hash_val] = claimants[0]

        self._point_count += weight
        self._rebuild()
        logger.debug(f"Added node '{ring_id}' with {weight} virtual points")

    def remove(self, ring_id: str) -> None:
        """
        Remove a node and all of its virtual points.

        Raises:
            NodeNotFoundError: If no node with that id is registered
        """
        entry = self._entries.get(ring_id)
        if entry is None:
            raise NodeNotFoundError(ring_id)

        for hash_val in self._replica_hashes(ring_id, entry.weight):
            claimants = self._claims[hash_val]
            claimants.remove(ring_id)
            if claimants:
                self._hash_map[hash_val] = claimants[0]
            else:
                del self._claims[hash_val]
                del self._hash_map[hash_val]

        self._point_count -= entry.weight
        del self._entries[ring_id]
        self._rebuild()
        logger.debug(f"Removed node '{ring_id}' with {entry.weight} virtual points")

    def get(self, key: Key) -> Optional[str]:
        """
        Get the node responsible for a key.

        Returns:
            Ring id of the closest node, or None if the ring is empty
        """
        if self.is_empty():
            return None
        return self._owners[self._search(self._hash(key))]

    def get_n(
        self,
        key: Key,
        n: int,
        accept: AcceptFunction = None,
    ) -> List[str]:
        """
        Get up to n nodes for a key, walking clockwise from its position.

        Each distinct ring position is visited at most once, so the walk ends
        even when accept rejects everything.

        Args:
            key: The key to look up
            n: Maximum number of ring ids to return
            accept: Called as accept(chosen, candidate) for each position
                    visited; defaults to accept_any. Use accept_unique for
                    distinct replicas.

        Returns:
            Ring ids in walk order; fewer than n if the ring runs out
        """
        if self.is_empty() or n < 1:
            return []

        if accept is None:
            accept = accept_any

        start = self._search(self._hash(key))
        count = len(self._owners)

        out: List[str] = []
        for i in range(count):
            candidate = self._owners[(start + i) % count]
            if accept(out, candidate):
                out.append(candidate)
                if len(out) >= n:
                    break

        return out

    def get_many(self, keys: Iterable[Key]) -> List[Optional[str]]:
        """Look up many keys at once. Same results as get() per key."""
        keys = list(keys)
        if self.is_empty():
            return [None] * len(keys)

        hashes = np.fromiter(
            (self._hash(k) for k in keys), dtype=np.int64, count=len(keys)
        )
        idx = np.searchsorted(self._positions, hashes, side="left")
        idx[idx == len(self._positions)] = 0
        return [self._owners[i] for i in idx]

    def get_value(self, key: Key) -> Optional[RingValue]:
        """Get the value registered for the node responsible for a key."""
        ring_id = self.get(key)
        if ring_id is None:
            return None
        return self._entries[ring_id].value

    def value_of(self, ring_id: str) -> RingValue:
        """Get the value a node was registered with."""
        entry = self._entries.get(ring_id)
        if entry is None:
            raise NodeNotFoundError(ring_id)
        return entry.value

    def weight_of(self, ring_id: str) -> int:
        """Get the weight a node was registered with."""
        entry = self._entries.get(ring_id)
        if entry is None:
            raise NodeNotFoundError(ring_id)
        return entry.weight

    def nodes(self) -> List[str]:
        """Sorted ring ids of all registered nodes."""
        return sorted(self._entries)

    def positions(self) -> np.ndarray:
        """Copy of the sorted array of distinct virtual point positions."""
        return self._positions.copy()

    def ownership(self) -> Dict[str, float]:
        """
        Fraction of the hash space routed to each node.

        A position owns the arc from its predecessor (exclusive) up to
        itself (inclusive); the first position also owns the wrapped arc
        past the last one.

        Returns:
            Mapping of ring id to share; shares sum to 1.0 on a non-empty ring
        """
        if self.is_empty():
            return {}

        positions = self._positions
        arcs = np.diff(positions, prepend=positions[-1] - HASH_SPACE)

        ids = self.nodes()
        index = {ring_id: i for i, ring_id in enumerate(ids)}
        owner_idx = np.fromiter(
            (index[owner] for owner in self._owners),
            dtype=np.intp,
            count=len(self._owners),
        )
        totals = np.bincount(
            owner_idx, weights=arcs.astype(np.float64), minlength=len(ids)
        )
        totals /= totals.sum()

        return {ring_id: float(share) for ring_id, share in zip(ids, totals)}

    def __len__(self) -> int:
        """Number of registered nodes."""
        return len(self._entries)

    def __contains__(self, ring_id: str) -> bool:
        """Check if a node is registered."""
        return ring_id in self._entries

    def __repr__(self) -> str:
        return f"RingHash(nodes={len(self._entries)}, virtual_points={self._point_count})"
