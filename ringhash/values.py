"""
Node values that can be placed on the hash ring.

Any object can sit on the ring as long as it reports a stable ring id.
The ring stores the object itself, so callers can attach server addresses,
shard descriptors or any other payload to a ring position.
"""

from abc import ABC, abstractmethod


class RingValue(ABC):
    """Abstract base class for values registered on the ring."""

    @abstractmethod
    def ring_id(self) -> str:
        """
        Return the identifier of this value on the ring.

        Returns:
            A string that is unique among registered values and does not
            change while the value is registered
        """
        pass


class StringValue(RingValue):
    """A ring value that is just its own id."""

    def __init__(self, value: str):
        self._value = value

    @property
    def value(self) -> str:
        return self._value

    def ring_id(self) -> str:
        return self._value

    def __eq__(self, other) -> bool:
        if not isinstance(other, StringValue):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"StringValue({self._value!r})"
