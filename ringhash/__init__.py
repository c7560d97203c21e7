"""
ringhash - Consistent hashing ring with weighted virtual nodes

Routes keys to a changing set of nodes so that adding or removing a node
only remaps the keys that node owned or takes over.

Usage:
    from ringhash import RingHash, accept_unique

    ring = RingHash(default_weight=100)
    ring.add_string("cache-a", "cache-b", "cache-c")
    ring.add_string_with_weight("cache-big", 200)

    # Primary node for a key
    node = ring.get("user:123:profile")

    # Three distinct replicas, clockwise from the key
    replicas = ring.get_n("user:123:profile", 3, accept_unique)

    # Attach a payload to a node
    from ringhash import RingValue

    class Shard(RingValue):
        def __init__(self, name, address):
            self.name = name
            self.address = address

        def ring_id(self):
            return self.name

    ring.add_with_weight(Shard("shard-7", "10.0.0.7:6379"), 50)
    ring.get_value("user:123:profile").address
"""

from .ring import RingHash, RingEntry
from .values import RingValue, StringValue
from .accept import accept_any, accept_unique, accept_distinct
from .hashing import crc32, md5_32, murmur3_32, create_hash_function
from .errors import (
    RingHashError,
    DuplicateNodeError,
    NodeNotFoundError,
    InvalidWeightError,
)
from .config import RingConfig, create_ring
from .synchronized import SynchronizedRingHash

__version__ = "0.1.0"

__all__ = [
    # Ring
    "RingHash",
    "RingEntry",
    "SynchronizedRingHash",
    # Values
    "RingValue",
    "StringValue",
    # Accept predicates
    "accept_any",
    "accept_unique",
    "accept_distinct",
    # Hash functions
    "crc32",
    "md5_32",
    "murmur3_32",
    "create_hash_function",
    # Errors
    "RingHashError",
    "DuplicateNodeError",
    "NodeNotFoundError",
    "InvalidWeightError",
    # Configuration
    "RingConfig",
    "create_ring",
]
