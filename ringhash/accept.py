"""
Accept predicates for RingHash.get_n.

An accept predicate is called as accept(chosen, candidate), where chosen is
the list of ring ids already selected and candidate is the ring id about to
be selected. Returning True selects the candidate. This is how placement
strategies such as "one replica per availability zone" are expressed.
"""

from typing import Callable, Hashable, List

AcceptFunction = Callable[[List[str], str], bool]


def accept_any(chosen: List[str], candidate: str) -> bool:
    """Accept every candidate, including ids already chosen."""
    return True


def accept_unique(chosen: List[str], candidate: str) -> bool:
    """Accept only ids that have not been chosen yet."""
    return candidate not in chosen


def accept_distinct(group_of: Callable[[str], Hashable]) -> AcceptFunction:
    """
    Build a predicate that picks at most one node per group.

    Args:
        group_of: Maps a ring id to its group (zone, rack, host...)

    Returns:
        Accept predicate rejecting repeated ids and ids whose group is
        already represented in the chosen list

    Example:
        zones = {"a1": "eu", "a2": "eu", "b1": "us"}
        ring.get_n(key, 2, accept_distinct(zones.get))
    """
    def accept(chosen: List[str], candidate: str) -> bool:
        if candidate in chosen:
            return False
        group = group_of(candidate)
        return all(group_of(node) != group for node in chosen)

    return accept
