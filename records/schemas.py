"""
Input record schemas

Pydantic models for the already-fetched data handed to the scoring engine.
The engine never writes these back; every model is frozen.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any
from datetime import date, datetime
from enum import Enum


class ValidationSeverity(str, Enum):
    """Validation issue severity"""
    CRITICAL = "critical"   # cannot be scored
    HIGH = "high"           # scored incorrectly or excluded, needs review
    MEDIUM = "medium"       # scored, flagged
    LOW = "low"             # log only
    INFO = "info"


class ValidationError(BaseModel):
    """Validation issue"""
    error_type: str = Field(..., description="Issue type")
    severity: ValidationSeverity = Field(..., description="Severity")
    message: str = Field(..., description="Human readable message")
    field: Optional[str] = Field(None, description="Related field")
    value: Optional[Any] = Field(None, description="Offending value")
    suggestion: Optional[str] = Field(None, description="How to fix it")


class ValidationResult(BaseModel):
    """Validation outcome"""
    is_valid: bool = Field(default=True, description="Final validity")
    errors: List[ValidationError] = Field(default_factory=list)
    warnings: List[ValidationError] = Field(default_factory=list)
    pass_rate: float = Field(default=1.0, description="Share of items without errors (0-1)")
    validated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_critical_errors(self) -> bool:
        return any(e.severity in [ValidationSeverity.CRITICAL, ValidationSeverity.HIGH] for e in self.errors)

    @property
    def can_score(self) -> bool:
        """Whether the data can be fed to the engine as is"""
        return not self.has_critical_errors


# ==================== Frozen base ====================

class FrozenRecord(BaseModel):
    """Immutable input record"""

    class Config:
        frozen = True
        extra = "ignore"
        populate_by_name = True


# ==================== Reference and athlete data ====================

class OfficialRecord(FrozenRecord):
    """Official record of a scope (continent, country)"""
    scope: str = Field(..., min_length=1, description="Scope, e.g. 'Europe' or 'France'")
    event_name: str = Field(..., min_length=1, description="Event name, matched exactly")
    performance: str = Field(..., description="Free-text performance, e.g. '12,45m'")
    category: Optional[str] = Field(None, description="Category, e.g. gender or weight class")
    athlete_name: Optional[str] = Field(None, description="Record holder")
    record_date: Optional[date] = Field(None, alias="date", description="Date the record was set")
    location: Optional[str] = Field(None, description="Where the record was set")


class Athlete(FrozenRecord):
    """Athlete identity (owned by persistence)"""
    id: str = Field(..., min_length=1, description="Athlete id")
    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    club: Optional[str] = Field(None, description="Club")
    gender: Optional[str] = Field(None, description="M / F")

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part) or self.id


class PersonalRecord(FrozenRecord):
    """Personal best of an athlete for one event"""
    athlete_id: str = Field(..., min_length=1, description="Athlete id")
    event_name: str = Field(..., min_length=1, description="Event name, matched exactly")
    performance: str = Field(..., description="Free-text performance")
    performed_on: Optional[date] = Field(None, alias="date", description="Date of the performance")


# ==================== Competition structure ====================

class Result(FrozenRecord):
    """Result of one athlete in one event

    `rank` is not range-checked here; a rank below 1 surfaces as InvalidRank
    when scored.
    """
    event_id: str = Field(..., min_length=1, description="Event id")
    athlete_id: str = Field(..., min_length=1, description="Athlete id")
    rank: int = Field(..., description="Finishing rank within the event")
    performance: Optional[str] = Field(None, description="Free-text performance")


class Event(FrozenRecord):
    """Event of a group"""
    id: str = Field(..., min_length=1, description="Event id")
    name: str = Field(..., min_length=1, description="Event name")
    group_id: Optional[str] = Field(None, description="Owning group id")
    order: int = Field(default=0, description="Position within the group")


class Group(FrozenRecord):
    """Group of a competition with its ordered events"""
    id: str = Field(..., min_length=1, description="Group id")
    name: str = Field(default="", description="Group name")
    competition_id: Optional[str] = Field(None, description="Owning competition id")
    events: List[Event] = Field(default_factory=list, description="Events of the group")

    @field_validator("events")
    @classmethod
    def sort_events(cls, v: List[Event]) -> List[Event]:
        """Keep events in their configured order"""
        return sorted(v, key=lambda e: e.order)


class Competition(FrozenRecord):
    """Competition with its groups"""
    id: str = Field(..., min_length=1, description="Competition id")
    name: str = Field(default="", description="Competition name")
    start_date: Optional[date] = Field(None, description="Start date")
    groups: List[Group] = Field(default_factory=list, description="Groups")

    def find_group(self, group_id: str) -> Optional[Group]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None


# ==================== Snapshot container ====================

class RankingSnapshot(FrozenRecord):
    """Everything the engine needs, as fetched from the store"""
    athletes: List[Athlete] = Field(default_factory=list)
    personal_records: List[PersonalRecord] = Field(default_factory=list)
    official_records: List[OfficialRecord] = Field(default_factory=list)
    competitions: List[Competition] = Field(default_factory=list)
    results: List[Result] = Field(default_factory=list)

    def find_group(self, group_id: str) -> Optional[Group]:
        for competition in self.competitions:
            group = competition.find_group(group_id)
            if group is not None:
                return group
        return None

    def athlete_names(self) -> dict:
        return {a.id: a.display_name for a in self.athletes}
