"""
Exceptions raised by the hash ring.

Every error is raised before the ring is mutated, so a failed call leaves
the registered nodes and the ring index exactly as they were.
"""


class RingHashError(Exception):
    """Base class for hash ring errors."""
    pass


class DuplicateNodeError(RingHashError, ValueError):
    """A node with the same ring id is already registered."""

    def __init__(self, ring_id: str):
        self.ring_id = ring_id
        super().__init__(f"A node with name '{ring_id}' already exists")


class NodeNotFoundError(RingHashError, LookupError):
    """No node with the given ring id is registered."""

    def __init__(self, ring_id: str):
        self.ring_id = ring_id
        super().__init__(f"No node with name '{ring_id}' found")


class InvalidWeightError(RingHashError, ValueError):
    """Weight is not a positive integer."""

    def __init__(self, weight, ring_id: str = None):
        self.weight = weight
        self.ring_id = ring_id
        if ring_id is None:
            message = f"Weight must be a positive integer, got {weight!r}"
        else:
            message = f"Weight for node '{ring_id}' must be a positive integer, got {weight!r}"
        super().__init__(message)
