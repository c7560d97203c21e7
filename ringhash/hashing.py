"""
Hash functions for placing keys and virtual nodes on the ring.

A hash function takes bytes and returns an unsigned 32-bit integer.
Provides:
- crc32: CRC-32 (IEEE), the default
- md5_32: first 4 bytes of MD5, slower but better spread on short keys
- murmur3_32: MurmurHash3 x86 32-bit (via mmh3)
"""

import hashlib
import zlib
from typing import Callable

import mmh3

HashFunction = Callable[[bytes], int]

HASH_SPACE = 2 ** 32


def crc32(data: bytes) -> int:
    """CRC-32 checksum of data (IEEE polynomial)."""
    return zlib.crc32(data) & 0xFFFFFFFF


def md5_32(data: bytes) -> int:
    """Big-endian integer from the first 4 bytes of the MD5 digest."""
    return int.from_bytes(hashlib.md5(data).digest()[:4], "big")


def murmur3_32(data: bytes) -> int:
    """Unsigned 32-bit MurmurHash3 of data, seed 0."""
    return mmh3.hash(data, signed=False)


_HASH_FUNCTIONS = {
    "crc32": crc32,
    "md5": md5_32,
    "murmur3": murmur3_32,
}


def create_hash_function(name: str = "crc32") -> HashFunction:
    """
    Look up a built-in hash function by name.

    Args:
        name: One of "crc32", "md5", "murmur3"

    Returns:
        Hash function mapping bytes to an unsigned 32-bit integer
    """
    try:
        return _HASH_FUNCTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown hash function: {name}") from None


def available_hash_functions():
    """Names accepted by create_hash_function."""
    return sorted(_HASH_FUNCTIONS)
