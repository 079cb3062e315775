"""
Scoring engine errors
"""


class ScoringError(Exception):
    """Base class for scoring engine errors."""

    pass


class InvalidRank(ScoringError, ValueError):
    """Raised when a finishing rank is below 1 or not an integer.

    This means the result-entry stage produced corrupt data; it is never clamped.
    """

    def __init__(self, rank, event_id=None, athlete_id=None):
        self.rank = rank
        self.event_id = event_id
        self.athlete_id = athlete_id
        where = ""
        if event_id is not None or athlete_id is not None:
            where = f" (event={event_id}, athlete={athlete_id})"
        super().__init__(f"Rank must be an integer >= 1, got {rank!r}{where}")


class SnapshotError(ScoringError):
    """Raised when a ranking snapshot file cannot be loaded."""

    pass
