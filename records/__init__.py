"""
Input records for the scoring engine

- schemas: frozen pydantic models of fetched data
- normalizer: free-text performance parsing
- validators: checks of the invariants the engine assumes
"""

from .schemas import (
    OfficialRecord,
    Athlete,
    PersonalRecord,
    Result,
    Event,
    Group,
    Competition,
    RankingSnapshot,
    ValidationResult,
    ValidationError,
    ValidationSeverity,
)
from .normalizer import (
    parse_performance,
    parse_performance_or_none,
    clean_performance_text,
    scopes_for_federation,
    FEDERATION_SCOPE_MAP,
)
from .validators import ResultValidator, RecordValidator, validate_snapshot_payload

__all__ = [
    # Schemas
    "OfficialRecord",
    "Athlete",
    "PersonalRecord",
    "Result",
    "Event",
    "Group",
    "Competition",
    "RankingSnapshot",
    "ValidationResult",
    "ValidationError",
    "ValidationSeverity",
    # Normalizer
    "parse_performance",
    "parse_performance_or_none",
    "clean_performance_text",
    "scopes_for_federation",
    "FEDERATION_SCOPE_MAP",
    # Validators
    "ResultValidator",
    "RecordValidator",
    "validate_snapshot_payload",
]
