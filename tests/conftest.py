"""
Pytest configuration and fixtures for the scoring engine tests
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from records.schemas import (
    Competition,
    Event,
    Group,
    OfficialRecord,
    PersonalRecord,
    Result,
)


@pytest.fixture(scope="function")
def swapped_results():
    """Two athletes who each win one of two events"""
    return [
        Result(event_id="E1", athlete_id="A", rank=1),
        Result(event_id="E1", athlete_id="B", rank=2),
        Result(event_id="E2", athlete_id="A", rank=2),
        Result(event_id="E2", athlete_id="B", rank=1),
    ]


@pytest.fixture(scope="function")
def open_group():
    """Group with two ordered events"""
    return Group(
        id="grp-open",
        name="Open",
        events=[
            Event(id="evt-hammer", name="Marteau lourd (10kg)", order=2),
            Event(id="evt-stone", name="Pierre lourde", order=1),
        ],
    )


@pytest.fixture(scope="function")
def open_results():
    """Results of the open group, plus one result from another group"""
    return [
        Result(event_id="evt-stone", athlete_id="ath-1", rank=1, performance="11,40m"),
        Result(event_id="evt-stone", athlete_id="ath-2", rank=2, performance="11,02m"),
        Result(event_id="evt-stone", athlete_id="ath-3", rank=3, performance="9,80m"),
        Result(event_id="evt-hammer", athlete_id="ath-2", rank=1, performance="31.9m"),
        Result(event_id="evt-hammer", athlete_id="ath-1", rank=2, performance="30.2m"),
        Result(event_id="evt-other-group", athlete_id="ath-3", rank=1),
    ]


@pytest.fixture(scope="function")
def carnac(open_group):
    """Competition with two groups"""
    women = Group(
        id="grp-women",
        name="Femmes",
        events=[Event(id="evt-weight", name="Poids en hauteur (12.7kg)", order=1)],
    )
    return Competition(id="comp-carnac", name="Highland Games de Carnac", groups=[open_group, women])


@pytest.fixture(scope="function")
def caber_records():
    """Europe Caber record plus out-of-scope noise"""
    return [
        OfficialRecord(scope="Europe", event_name="Caber", performance="10m"),
        OfficialRecord(scope="France", event_name="Caber", performance="2m"),
        OfficialRecord(scope="France", event_name="Pierre lourde", performance="11,20m"),
    ]


@pytest.fixture(scope="function")
def caber_personal_records():
    """Two athletes, one at the record, one at half of it"""
    return [
        PersonalRecord(athlete_id="ath-half", event_name="Caber", performance="5m"),
        PersonalRecord(athlete_id="ath-record", event_name="Caber", performance="10m"),
    ]
