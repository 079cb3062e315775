"""
Standings primitives shared by the two aggregators
"""
from enum import Enum
from typing import List, Sequence


class SortDirection(str, Enum):
    """Which end of the points scale wins"""
    ASCENDING = "ascending"     # lowest total wins (rank-points)
    DESCENDING = "descending"   # highest total wins (record-relative points)

    @property
    def lower_is_better(self) -> bool:
        return self is SortDirection.ASCENDING


def assign_positions(entries: Sequence) -> List:
    """Number already-ordered entries 1..n in place"""
    for i, entry in enumerate(entries, 1):
        entry.position = i
    return list(entries)
