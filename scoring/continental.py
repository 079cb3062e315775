"""
Continental ranking

Normalises each athlete's personal bests against the official records of one
scope (e.g. "Europe") and sums the record-relative points. Highest total wins.
"""
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Dict, Any, Optional, Iterable, Union

from loguru import logger

from records.normalizer import parse_performance
from records.schemas import OfficialRecord, PersonalRecord
from .calculator import RECORD_POINTS_SCALE, points_relative_to_magnitudes
from .standings import SortDirection, assign_positions


class DuplicatePolicy(str, Enum):
    """What to do with several personal records of one athlete for one event"""
    KEEP_ALL = "keep_all"   # score every record supplied
    BEST = "best"           # keep the highest magnitude
    LATEST = "latest"       # keep the most recent (undated counts as oldest)


class BreakdownStatus(str, Enum):
    """Outcome of one personal record"""
    SCORED = "scored"
    NO_REFERENCE = "no_reference"            # no official record for the event in scope
    INVALID_REFERENCE = "invalid_reference"  # official record parses to zero


# =====================================================
# Data classes
# =====================================================

@dataclass(frozen=True)
class ReferenceRecord:
    """In-scope official record with its parsed magnitude"""
    event_name: str
    performance: str
    magnitude: float


@dataclass
class EventBreakdown:
    """Record-relative points of one personal record"""
    event_name: str
    performance: str
    magnitude: float
    status: BreakdownStatus
    reference_performance: Optional[str] = None
    reference_magnitude: Optional[float] = None
    points: Optional[float] = None

    @property
    def scored(self) -> bool:
        return self.status is BreakdownStatus.SCORED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_name": self.event_name,
            "performance": self.performance,
            "magnitude": self.magnitude,
            "status": self.status.value,
            "reference_performance": self.reference_performance,
            "reference_magnitude": self.reference_magnitude,
            "points": round(self.points, 2) if self.points is not None else None,
        }


@dataclass
class RankingEntry:
    """Continental ranking line of one athlete"""
    athlete_id: str
    total_points: float
    breakdown: List[EventBreakdown]
    position: int = 0

    @property
    def scored_events(self) -> int:
        return sum(1 for b in self.breakdown if b.scored)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "athlete_id": self.athlete_id,
            "total_points": round(self.total_points, 2),
            "scored_events": self.scored_events,
            "breakdown": [b.to_dict() for b in self.breakdown],
        }


@dataclass
class ContinentalRanking:
    """Ordered continental ranking (descending: highest total first)"""
    scope: str
    entries: List[RankingEntry]
    direction: SortDirection = field(default=SortDirection.DESCENDING, init=False)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scope": self.scope,
            "direction": self.direction.value,
            "entries": [e.to_dict() for e in self.entries],
        }


# =====================================================
# Helpers
# =====================================================

OfficialRecords = Union[Iterable[OfficialRecord], Mapping[Any, OfficialRecord]]
PersonalRecords = Union[Iterable[PersonalRecord], Mapping[str, Iterable[PersonalRecord]]]


def _group_personal_records(personal_records: PersonalRecords) -> Dict[str, List[PersonalRecord]]:
    """athlete_id -> records, keeping input order"""
    grouped: Dict[str, List[PersonalRecord]] = defaultdict(list)
    if isinstance(personal_records, Mapping):
        for athlete_id, records in personal_records.items():
            grouped[athlete_id].extend(records)
    else:
        for record in personal_records:
            grouped[record.athlete_id].append(record)
    return grouped


def _latest_key(record: PersonalRecord) -> date:
    return record.performed_on or date.min


def reduce_duplicates(
    records: List[PersonalRecord],
    policy: DuplicatePolicy
) -> List[PersonalRecord]:
    """Apply a duplicate policy to one athlete's records"""
    policy = DuplicatePolicy(policy)
    if policy is DuplicatePolicy.KEEP_ALL:
        return list(records)

    chosen: Dict[str, PersonalRecord] = {}
    for record in records:
        current = chosen.get(record.event_name)
        if current is None:
            chosen[record.event_name] = record
        elif policy is DuplicatePolicy.BEST:
            if parse_performance(record.performance) > parse_performance(current.performance):
                chosen[record.event_name] = record
        elif _latest_key(record) > _latest_key(current):
            chosen[record.event_name] = record
    return list(chosen.values())


# =====================================================
# Aggregator
# =====================================================

class ContinentalRankingAggregator:
    """Ranks athletes by personal bests relative to a scope's official records

    Holds only configuration; every call recomputes from the records given.
    """

    def __init__(
        self,
        scale: float = RECORD_POINTS_SCALE,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.KEEP_ALL
    ):
        self.scale = scale
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)

    def reference_lookup(
        self,
        official_records: OfficialRecords,
        scope: str
    ) -> Dict[str, ReferenceRecord]:
        """event_name -> reference, built only from records whose scope matches exactly"""
        if isinstance(official_records, Mapping):
            official_records = official_records.values()

        lookup: Dict[str, ReferenceRecord] = {}
        for record in official_records:
            if record.scope != scope:
                continue
            if record.event_name in lookup:
                logger.warning(
                    f"{scope}: several official records for '{record.event_name}', "
                    f"using '{record.performance}'"
                )
            lookup[record.event_name] = ReferenceRecord(
                event_name=record.event_name,
                performance=record.performance,
                magnitude=parse_performance(record.performance),
            )
        return lookup

    def score_record(
        self,
        record: PersonalRecord,
        lookup: Mapping[str, ReferenceRecord]
    ) -> EventBreakdown:
        """Breakdown line of one personal record"""
        magnitude = parse_performance(record.performance)
        reference = lookup.get(record.event_name)

        if reference is None:
            return EventBreakdown(
                event_name=record.event_name,
                performance=record.performance,
                magnitude=magnitude,
                status=BreakdownStatus.NO_REFERENCE,
            )

        points = points_relative_to_magnitudes(magnitude, reference.magnitude, self.scale)
        return EventBreakdown(
            event_name=record.event_name,
            performance=record.performance,
            magnitude=magnitude,
            status=BreakdownStatus.SCORED if points is not None else BreakdownStatus.INVALID_REFERENCE,
            reference_performance=reference.performance,
            reference_magnitude=reference.magnitude,
            points=points,
        )

    def ranking(
        self,
        personal_records: PersonalRecords,
        official_records: OfficialRecords,
        scope: str
    ) -> ContinentalRanking:
        """
        Continental ranking for one scope.

        Args:
            personal_records: flat sequence, or athlete_id -> sequence
            official_records: sequence, or any mapping of official records
            scope: exact scope to use, e.g. "Europe"

        Returns:
            ContinentalRanking ordered by total points descending, then scored
            events descending, then athlete id ascending. Athletes without a
            single scored event are left out.
        """
        lookup = self.reference_lookup(official_records, scope)
        grouped = _group_personal_records(personal_records)

        if not lookup:
            logger.info(f"{scope}: no official records in scope, ranking is empty")
            return ContinentalRanking(scope=scope, entries=[])

        entries: List[RankingEntry] = []
        for athlete_id, records in grouped.items():
            breakdown = [
                self.score_record(record, lookup)
                for record in reduce_duplicates(records, self.duplicate_policy)
            ]
            scored = [b for b in breakdown if b.scored]
            if not scored:
                continue

            entries.append(RankingEntry(
                athlete_id=athlete_id,
                total_points=sum(b.points for b in scored),
                breakdown=breakdown,
            ))

        entries.sort(key=lambda e: (
            -e.total_points,
            -e.scored_events,
            e.athlete_id
        ))
        assign_positions(entries)

        logger.info(f"{scope}: {len(entries)} athletes ranked against {len(lookup)} records")
        return ContinentalRanking(scope=scope, entries=entries)
