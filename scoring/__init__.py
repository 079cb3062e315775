"""
Highland Games scoring engine

- rank-points group leaderboards (lowest total wins)
- record-relative continental rankings (highest total wins)
"""
from .calculator import (
    RankFormula,
    RECORD_POINTS_SCALE,
    points_for_rank,
    points_relative_to_record,
    points_relative_to_magnitudes,
)
from .continental import (
    ContinentalRankingAggregator,
    ContinentalRanking,
    RankingEntry,
    EventBreakdown,
    BreakdownStatus,
    DuplicatePolicy,
    ReferenceRecord,
)
from .exceptions import ScoringError, InvalidRank, SnapshotError
from .leaderboard import (
    GroupLeaderboardAggregator,
    Leaderboard,
    LeaderboardEntry,
    EventScore,
)
from .standings import SortDirection

__all__ = [
    # Calculators
    "RankFormula",
    "RECORD_POINTS_SCALE",
    "points_for_rank",
    "points_relative_to_record",
    "points_relative_to_magnitudes",
    # Continental ranking
    "ContinentalRankingAggregator",
    "ContinentalRanking",
    "RankingEntry",
    "EventBreakdown",
    "BreakdownStatus",
    "DuplicatePolicy",
    "ReferenceRecord",
    # Group leaderboard
    "GroupLeaderboardAggregator",
    "Leaderboard",
    "LeaderboardEntry",
    "EventScore",
    # Shared
    "SortDirection",
    "ScoringError",
    "InvalidRank",
    "SnapshotError",
]
