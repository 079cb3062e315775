"""
Point calculation

Two scoring conventions live here and must not be mixed up:
- rank-points: ordinal finishing position within one event, lower is better
- record-relative points: personal performance over an official record,
  higher is better, unbounded above
"""
from enum import Enum
from typing import Optional

from records.normalizer import parse_performance
from .exceptions import InvalidRank


# =====================================================
# Constants
# =====================================================

# Points for a performance equal to the reference record
RECORD_POINTS_SCALE = 1000.0


class RankFormula(str, Enum):
    """Rank-points formula"""
    RANK = "rank"   # 1st = 1, 2nd = 2, 3rd = 3 ...
    ODD = "odd"     # 1st = 1, 2nd = 3, 3rd = 5 ...


# =====================================================
# Rank-points
# =====================================================

def points_for_rank(rank: int, formula: RankFormula = RankFormula.RANK) -> int:
    """
    Points for a finishing rank within one event.

    Raises:
        InvalidRank: rank is not an integer or is below 1
    """
    if isinstance(rank, bool) or not isinstance(rank, int) or rank < 1:
        raise InvalidRank(rank)

    if RankFormula(formula) is RankFormula.ODD:
        return 2 * rank - 1
    return rank


# =====================================================
# Record-relative points
# =====================================================

def points_relative_to_magnitudes(
    personal: float,
    reference: float,
    scale: float = RECORD_POINTS_SCALE
) -> Optional[float]:
    """Points from already-parsed magnitudes; None when the reference is zero"""
    if reference == 0:
        return None
    return (personal / reference) * scale


def points_relative_to_record(
    personal_performance: str,
    reference_performance: str,
    scale: float = RECORD_POINTS_SCALE
) -> Optional[float]:
    """
    Points of a personal performance against a reference record.

    Formula: (personal / reference) * scale

    A reference that parses to zero (missing or unparseable) gives None: the
    event is excluded rather than scored. Zero or negative personal
    performances are scored as computed.
    """
    return points_relative_to_magnitudes(
        parse_performance(personal_performance),
        parse_performance(reference_performance),
        scale,
    )
