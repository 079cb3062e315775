"""
Group leaderboard

Sums rank-points per athlete over the events of a group. Lowest total wins.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Iterable, Sequence

from loguru import logger

from records.schemas import Competition, Event, Result
from .calculator import RankFormula, points_for_rank
from .exceptions import InvalidRank
from .standings import SortDirection, assign_positions


# =====================================================
# Data classes
# =====================================================

@dataclass
class EventScore:
    """Rank-points of one athlete in one event"""
    event_id: str
    event_name: str
    rank: int
    points: int
    performance: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_name": self.event_name,
            "rank": self.rank,
            "points": self.points,
            "performance": self.performance,
        }


@dataclass
class LeaderboardEntry:
    """Leaderboard line of one athlete"""
    athlete_id: str
    total_points: int
    results: List[EventScore]
    events_completed: int
    total_events: int
    position: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "athlete_id": self.athlete_id,
            "total_points": self.total_points,
            "events_completed": self.events_completed,
            "total_events": self.total_events,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class Leaderboard:
    """Ordered group leaderboard (ascending: lowest total first)"""
    entries: List[LeaderboardEntry]
    group_id: Optional[str] = None
    total_events: int = 0
    direction: SortDirection = field(default=SortDirection.ASCENDING, init=False)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_id": self.group_id,
            "direction": self.direction.value,
            "total_events": self.total_events,
            "entries": [e.to_dict() for e in self.entries],
        }


# =====================================================
# Aggregator
# =====================================================

class GroupLeaderboardAggregator:
    """Builds group leaderboards from event results

    Holds no state between calls: each call recomputes from the results given.
    """

    def __init__(self, formula: RankFormula = RankFormula.RANK):
        self.formula = RankFormula(formula)

    def leaderboard(
        self,
        results: Iterable[Result],
        events: Optional[Sequence[Event]] = None,
        group_id: Optional[str] = None
    ) -> Leaderboard:
        """
        Leaderboard of one group.

        Args:
            results: results of the group's events
            events: the group's events; when given, results of other events
                are ignored and event names are filled in
            group_id: carried through to the output

        Returns:
            Leaderboard ordered by total points ascending, then events
            completed descending, then athlete id ascending

        Raises:
            InvalidRank: a result has a rank below 1
        """
        event_names: Optional[Dict[str, str]] = None
        if events is not None:
            event_names = {e.id: e.name for e in events}

        per_athlete: Dict[str, List[EventScore]] = defaultdict(list)
        seen_events = set()
        ignored = 0

        for result in results:
            if event_names is not None and result.event_id not in event_names:
                ignored += 1
                continue

            try:
                points = points_for_rank(result.rank, self.formula)
            except InvalidRank:
                raise InvalidRank(result.rank, result.event_id, result.athlete_id) from None

            seen_events.add(result.event_id)
            per_athlete[result.athlete_id].append(EventScore(
                event_id=result.event_id,
                event_name=event_names[result.event_id] if event_names else result.event_id,
                rank=result.rank,
                points=points,
                performance=result.performance,
            ))

        if ignored:
            logger.debug(f"group {group_id}: {ignored} results outside the group ignored")

        total_events = len(event_names) if event_names is not None else len(seen_events)

        entries = [
            LeaderboardEntry(
                athlete_id=athlete_id,
                total_points=sum(s.points for s in scores),
                results=scores,
                events_completed=len(scores),
                total_events=total_events,
            )
            for athlete_id, scores in per_athlete.items()
        ]

        entries.sort(key=lambda e: (
            e.total_points,
            -e.events_completed,
            e.athlete_id
        ))
        assign_positions(entries)

        logger.debug(f"group {group_id}: leaderboard of {len(entries)} athletes over {total_events} events")
        return Leaderboard(entries=entries, group_id=group_id, total_events=total_events)

    def competition_leaderboards(
        self,
        competition: Competition,
        results: Iterable[Result]
    ) -> Dict[str, Leaderboard]:
        """One leaderboard per group of a competition, keyed by group id"""
        results = list(results)
        boards = {}
        for group in competition.groups:
            boards[group.id] = self.leaderboard(results, events=group.events, group_id=group.id)
        logger.info(f"{competition.name or competition.id}: {len(boards)} group leaderboards")
        return boards
