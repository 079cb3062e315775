"""
Continental ranking tests
"""
from datetime import date

import pytest

from records.schemas import OfficialRecord, PersonalRecord
from scoring.continental import (
    BreakdownStatus,
    ContinentalRanking,
    ContinentalRankingAggregator,
    DuplicatePolicy,
    reduce_duplicates,
)
from scoring.standings import SortDirection


@pytest.fixture
def aggregator():
    return ContinentalRankingAggregator()


class TestRankingOrder:
    """Totals and ordering"""

    def test_record_holder_above_half(self, aggregator, caber_personal_records, caber_records):
        ranking = aggregator.ranking(caber_personal_records, caber_records, "Europe")
        assert [(e.athlete_id, e.total_points) for e in ranking] == [
            ("ath-record", 1000),
            ("ath-half", 500),
        ]
        assert [e.position for e in ranking] == [1, 2]

    def test_direction_is_descending(self, aggregator, caber_personal_records, caber_records):
        ranking = aggregator.ranking(caber_personal_records, caber_records, "Europe")
        assert ranking.direction is SortDirection.DESCENDING
        assert not ranking.direction.lower_is_better

    def test_points_summed_over_events(self, aggregator):
        officials = [
            OfficialRecord(scope="Europe", event_name="Caber", performance="10m"),
            OfficialRecord(scope="Europe", event_name="Pierre lourde", performance="12,5m"),
        ]
        personals = [
            PersonalRecord(athlete_id="A", event_name="Caber", performance="5m"),
            PersonalRecord(athlete_id="A", event_name="Pierre lourde", performance="12,5m"),
            PersonalRecord(athlete_id="B", event_name="Caber", performance="10m"),
        ]
        ranking = aggregator.ranking(personals, officials, "Europe")
        assert [(e.athlete_id, e.total_points) for e in ranking] == [("A", 1500), ("B", 1000)]

    def test_ties_broken_by_scored_events_then_id(self, aggregator):
        officials = [
            OfficialRecord(scope="Europe", event_name="Caber", performance="10m"),
            OfficialRecord(scope="Europe", event_name="Stone", performance="10m"),
        ]
        personals = [
            PersonalRecord(athlete_id="C", event_name="Caber", performance="10m"),
            PersonalRecord(athlete_id="B", event_name="Caber", performance="5m"),
            PersonalRecord(athlete_id="B", event_name="Stone", performance="5m"),
            PersonalRecord(athlete_id="A", event_name="Caber", performance="10m"),
        ]
        ranking = aggregator.ranking(personals, officials, "Europe")
        assert [e.athlete_id for e in ranking] == ["B", "A", "C"]

    def test_beating_the_record(self, aggregator, caber_records):
        personals = [PersonalRecord(athlete_id="A", event_name="Caber", performance="11m")]
        ranking = aggregator.ranking(personals, caber_records, "Europe")
        assert ranking.entries[0].total_points == pytest.approx(1100)


class TestScopeFiltering:
    """Only records of the requested scope count"""

    def test_out_of_scope_records_have_no_effect(self, aggregator, caber_personal_records, caber_records):
        europe_only = [r for r in caber_records if r.scope == "Europe"]
        with_noise = aggregator.ranking(caber_personal_records, caber_records, "Europe").to_dict()
        without_noise = aggregator.ranking(caber_personal_records, europe_only, "Europe").to_dict()
        assert with_noise == without_noise

    def test_other_scope(self, aggregator, caber_personal_records, caber_records):
        """France Caber record is 2m"""
        ranking = aggregator.ranking(caber_personal_records, caber_records, "France")
        assert [(e.athlete_id, e.total_points) for e in ranking] == [
            ("ath-record", 5000),
            ("ath-half", 2500),
        ]

    def test_scope_is_case_sensitive(self, aggregator, caber_personal_records, caber_records):
        assert len(aggregator.ranking(caber_personal_records, caber_records, "europe")) == 0

    def test_mapping_of_official_records(self, aggregator, caber_personal_records, caber_records):
        """Official records may come as a mapping"""
        by_key = {(r.scope, r.event_name): r for r in caber_records}
        ranking = aggregator.ranking(caber_personal_records, by_key, "Europe")
        assert [e.athlete_id for e in ranking] == ["ath-record", "ath-half"]


class TestMissingReferences:
    """Events without a usable reference"""

    def test_no_reference_recorded_in_breakdown(self, aggregator, caber_records):
        personals = [
            PersonalRecord(athlete_id="A", event_name="Caber", performance="5m"),
            PersonalRecord(athlete_id="A", event_name="Tug of war", performance="1"),
        ]
        entry = aggregator.ranking(personals, caber_records, "Europe").entries[0]
        assert entry.total_points == 500
        assert entry.scored_events == 1
        statuses = {b.event_name: b.status for b in entry.breakdown}
        assert statuses == {"Caber": BreakdownStatus.SCORED, "Tug of war": BreakdownStatus.NO_REFERENCE}

    def test_event_name_match_is_exact(self, aggregator, caber_records):
        personals = [PersonalRecord(athlete_id="A", event_name="caber", performance="5m")]
        assert len(aggregator.ranking(personals, caber_records, "Europe")) == 0

    def test_unparseable_reference_excluded(self, aggregator):
        officials = [
            OfficialRecord(scope="Europe", event_name="Caber", performance="abc"),
            OfficialRecord(scope="Europe", event_name="Stone", performance="10m"),
        ]
        personals = [
            PersonalRecord(athlete_id="A", event_name="Caber", performance="5m"),
            PersonalRecord(athlete_id="A", event_name="Stone", performance="5m"),
        ]
        entry = aggregator.ranking(personals, officials, "Europe").entries[0]
        assert entry.total_points == 500
        caber = [b for b in entry.breakdown if b.event_name == "Caber"][0]
        assert caber.status is BreakdownStatus.INVALID_REFERENCE
        assert caber.points is None

    def test_athlete_without_scored_event_left_out(self, aggregator, caber_records):
        personals = [
            PersonalRecord(athlete_id="A", event_name="Caber", performance="5m"),
            PersonalRecord(athlete_id="B", event_name="Stone", performance="5m"),
        ]
        ranking = aggregator.ranking(personals, caber_records, "Europe")
        assert [e.athlete_id for e in ranking] == ["A"]

    def test_zero_personal_performance_still_ranked(self, aggregator, caber_records):
        """A recorded zero is not the same as no data"""
        personals = [PersonalRecord(athlete_id="A", event_name="Caber", performance="0m")]
        ranking = aggregator.ranking(personals, caber_records, "Europe")
        assert [(e.athlete_id, e.total_points) for e in ranking] == [("A", 0)]


class TestEmptyInputs:
    """Empty ranking is a valid outcome"""

    def test_no_athletes(self, aggregator, caber_records):
        ranking = aggregator.ranking([], caber_records, "Europe")
        assert isinstance(ranking, ContinentalRanking)
        assert ranking.entries == []

    def test_no_records_in_scope(self, aggregator, caber_personal_records, caber_records):
        ranking = aggregator.ranking(caber_personal_records, caber_records, "Asia")
        assert ranking.entries == []
        assert ranking.to_dict() == {"scope": "Asia", "direction": "descending", "entries": []}


class TestReferenceLookup:
    """event_name -> reference"""

    def test_lookup_only_in_scope(self, aggregator, caber_records):
        lookup = aggregator.reference_lookup(caber_records, "France")
        assert set(lookup) == {"Caber", "Pierre lourde"}
        assert lookup["Pierre lourde"].magnitude == pytest.approx(11.2)

    def test_later_duplicate_wins(self, aggregator):
        officials = [
            OfficialRecord(scope="Europe", event_name="Caber", performance="10m", category="F"),
            OfficialRecord(scope="Europe", event_name="Caber", performance="12m", category="M"),
        ]
        lookup = aggregator.reference_lookup(officials, "Europe")
        assert lookup["Caber"].magnitude == 12


class TestDuplicatePolicy:
    """Several personal records for one event"""

    @pytest.fixture
    def duplicates(self, caber_records):
        return [
            PersonalRecord(athlete_id="A", event_name="Caber", performance="6m", date=date(2025, 8, 1)),
            PersonalRecord(athlete_id="A", event_name="Caber", performance="8m", date=date(2024, 6, 1)),
            PersonalRecord(athlete_id="A", event_name="Caber", performance="7m"),
        ]

    def test_keep_all_scores_every_record(self, caber_records, duplicates):
        ranking = ContinentalRankingAggregator().ranking(duplicates, caber_records, "Europe")
        assert ranking.entries[0].total_points == pytest.approx(2100)

    def test_best(self, caber_records, duplicates):
        agg = ContinentalRankingAggregator(duplicate_policy=DuplicatePolicy.BEST)
        assert agg.ranking(duplicates, caber_records, "Europe").entries[0].total_points == pytest.approx(800)

    def test_latest(self, caber_records, duplicates):
        agg = ContinentalRankingAggregator(duplicate_policy="latest")
        assert agg.ranking(duplicates, caber_records, "Europe").entries[0].total_points == pytest.approx(600)

    def test_reduce_keeps_distinct_events(self):
        records = [
            PersonalRecord(athlete_id="A", event_name="Caber", performance="6m"),
            PersonalRecord(athlete_id="A", event_name="Stone", performance="9m"),
        ]
        assert len(reduce_duplicates(records, DuplicatePolicy.BEST)) == 2


class TestInputShapes:
    """Personal records per athlete"""

    def test_mapping_of_personal_records(self, aggregator, caber_personal_records, caber_records):
        grouped = {}
        for r in caber_personal_records:
            grouped.setdefault(r.athlete_id, []).append(r)
        from_mapping = aggregator.ranking(grouped, caber_records, "Europe").to_dict()
        from_list = aggregator.ranking(caber_personal_records, caber_records, "Europe").to_dict()
        assert from_mapping == from_list

    def test_idempotent(self, aggregator, caber_personal_records, caber_records):
        first = aggregator.ranking(caber_personal_records, caber_records, "Europe").to_dict()
        second = aggregator.ranking(caber_personal_records, caber_records, "Europe").to_dict()
        assert first == second

    def test_breakdown_to_dict(self, aggregator, caber_personal_records, caber_records):
        entry = aggregator.ranking(caber_personal_records, caber_records, "Europe").to_dict()["entries"][1]
        assert entry["athlete_id"] == "ath-half"
        assert entry["breakdown"][0] == {
            "event_name": "Caber",
            "performance": "5m",
            "magnitude": 5.0,
            "status": "scored",
            "reference_performance": "10m",
            "reference_magnitude": 10.0,
            "points": 500.0,
        }
