"""
Ring configuration and construction.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Union

from .hashing import available_hash_functions, create_hash_function
from .ring import RingHash, validate_weight
from .synchronized import SynchronizedRingHash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RingConfig:
    """Settings used by create_ring."""
    default_weight: int = 1
    hash_function: str = "crc32"
    synchronized: bool = False  # wrap the ring in SynchronizedRingHash

    def __post_init__(self):
        validate_weight(self.default_weight)
        if self.hash_function not in available_hash_functions():
            raise ValueError(f"Unknown hash function: {self.hash_function}")


def create_ring(
    config: RingConfig = None,
    **overrides
) -> Union[RingHash, SynchronizedRingHash]:
    """
    Factory function to create an empty ring.

    Args:
        config: Ring settings (default: RingConfig())
        **overrides: RingConfig fields to override

    Returns:
        RingHash, or SynchronizedRingHash if config.synchronized is set
    """
    if config is None:
        config = RingConfig(**overrides)
    elif overrides:
        config = dataclasses.replace(config, **overrides)

    ring = RingHash(
        default_weight=config.default_weight,
        hash_fn=create_hash_function(config.hash_function),
    )
    logger.info(
        f"Created ring with hash={config.hash_function} "
        f"default_weight={config.default_weight} synchronized={config.synchronized}"
    )

    if config.synchronized:
        return SynchronizedRingHash(ring)
    return ring
