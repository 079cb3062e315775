"""
Input record validation

Checks the invariants the scoring engine assumes on read but does not
enforce: contiguous unique ranks per event, parseable performances,
one official record per scope and event.
"""

from collections import Counter, defaultdict
from datetime import datetime
from typing import List, Dict, Any, Iterable

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from .normalizer import parse_performance_or_none
from .schemas import (
    OfficialRecord,
    PersonalRecord,
    RankingSnapshot,
    Result,
    ValidationResult,
    ValidationError,
    ValidationSeverity,
)


def _build_result(errors: List[ValidationError], warnings: List[ValidationError], total: int) -> ValidationResult:
    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        pass_rate=max(total - len(errors), 0) / total if total > 0 else 1.0,
        validated_at=datetime.now()
    )


class ResultValidator:
    """
    Result entry checks for one event

    - ranks >= 1
    - no duplicate ranks, no duplicate athletes
    - ranks contiguous from 1
    """

    def validate_event_results(self, results: Iterable[Result]) -> ValidationResult:
        """Check the results of a single event"""
        results = list(results)
        errors = []
        warnings = []

        event_ids = sorted({r.event_id for r in results})
        if len(event_ids) > 1:
            errors.append(ValidationError(
                error_type="MIXED_EVENTS",
                severity=ValidationSeverity.HIGH,
                message=f"Results span several events: {', '.join(event_ids)}",
                field="event_id",
                value=", ".join(event_ids),
                suggestion="Validate each event separately"
            ))

        for r in results:
            if r.rank < 1:
                errors.append(ValidationError(
                    error_type="INVALID_RANK",
                    severity=ValidationSeverity.CRITICAL,
                    message=f"Rank must be >= 1: athlete {r.athlete_id} has rank {r.rank}",
                    field="rank",
                    value=r.rank,
                    suggestion="Re-enter the finishing order"
                ))

        rank_counts = Counter(r.rank for r in results)
        for rank, count in sorted(rank_counts.items()):
            if count > 1:
                errors.append(ValidationError(
                    error_type="DUPLICATE_RANK",
                    severity=ValidationSeverity.HIGH,
                    message=f"Rank {rank} is given {count} times",
                    field="rank",
                    value=rank,
                    suggestion="Ties are not supported, every athlete needs a distinct rank"
                ))

        athlete_counts = Counter(r.athlete_id for r in results)
        for athlete_id, count in sorted(athlete_counts.items()):
            if count > 1:
                errors.append(ValidationError(
                    error_type="DUPLICATE_ATHLETE",
                    severity=ValidationSeverity.HIGH,
                    message=f"Athlete {athlete_id} has {count} results",
                    field="athlete_id",
                    value=athlete_id,
                    suggestion="Keep a single result per athlete and event"
                ))

        positive = sorted(r for r in rank_counts if r >= 1)
        missing = sorted(set(range(1, max(positive, default=0) + 1)) - set(positive))
        if missing:
            warnings.append(ValidationError(
                error_type="RANK_GAP",
                severity=ValidationSeverity.MEDIUM,
                message=f"Ranks are not contiguous from 1, missing: {', '.join(map(str, missing))}",
                field="rank",
                value=", ".join(map(str, missing)),
                suggestion="Check for a forgotten athlete or a mistyped rank"
            ))

        return _build_result(errors, warnings, len(results))

    def validate_results(self, results: Iterable[Result]) -> Dict[str, ValidationResult]:
        """Check results of several events, one report per event"""
        by_event: Dict[str, List[Result]] = defaultdict(list)
        for r in results:
            by_event[r.event_id].append(r)

        reports = {event_id: self.validate_event_results(rs) for event_id, rs in by_event.items()}
        invalid = [event_id for event_id, report in reports.items() if not report.is_valid]
        if invalid:
            logger.warning(f"{len(invalid)}/{len(reports)} events have invalid results: {', '.join(invalid)}")
        return reports


class RecordValidator:
    """
    Personal and official record checks

    - performances must contain a number
    - official references must not be zero (they would be excluded)
    - duplicate keys are reported
    """

    def validate_personal_records(self, records: Iterable[PersonalRecord]) -> ValidationResult:
        """Check personal records"""
        records = list(records)
        errors = []
        warnings = []

        for r in records:
            if parse_performance_or_none(r.performance) is None:
                warnings.append(ValidationError(
                    error_type="UNPARSEABLE_PERFORMANCE",
                    severity=ValidationSeverity.MEDIUM,
                    message=f"No number in performance '{r.performance}' ({r.athlete_id}, {r.event_name})",
                    field="performance",
                    value=r.performance,
                    suggestion="It will be scored as 0"
                ))

        keys = Counter((r.athlete_id, r.event_name) for r in records)
        for (athlete_id, event_name), count in sorted(keys.items()):
            if count > 1:
                warnings.append(ValidationError(
                    error_type="DUPLICATE_PERSONAL_RECORD",
                    severity=ValidationSeverity.LOW,
                    message=f"{athlete_id} has {count} records for '{event_name}'",
                    field="event_name",
                    value=event_name,
                    suggestion="Pre-select the best one or use the 'best' / 'latest' duplicate policy"
                ))

        return _build_result(errors, warnings, len(records))

    def validate_official_records(self, records: Iterable[OfficialRecord]) -> ValidationResult:
        """Check official records"""
        records = list(records)
        errors = []
        warnings = []

        for r in records:
            magnitude = parse_performance_or_none(r.performance)
            if not magnitude:
                errors.append(ValidationError(
                    error_type="UNUSABLE_REFERENCE",
                    severity=ValidationSeverity.HIGH,
                    message=f"Official record '{r.event_name}' ({r.scope}) has no usable performance: '{r.performance}'",
                    field="performance",
                    value=r.performance,
                    suggestion="The event will be excluded from rankings until the record is fixed"
                ))

        keys = Counter((r.scope, r.event_name) for r in records)
        for (scope, event_name), count in sorted(keys.items()):
            if count > 1:
                warnings.append(ValidationError(
                    error_type="DUPLICATE_OFFICIAL_RECORD",
                    severity=ValidationSeverity.MEDIUM,
                    message=f"{count} official records for '{event_name}' in {scope}",
                    field="event_name",
                    value=event_name,
                    suggestion="Only the last one is used for rankings"
                ))

        return _build_result(errors, warnings, len(records))


def validate_snapshot_payload(data: Dict[str, Any]) -> ValidationResult:
    """Schema check of a raw snapshot dict"""
    errors = []

    if not isinstance(data, dict):
        errors.append(ValidationError(
            error_type="NOT_AN_OBJECT",
            severity=ValidationSeverity.CRITICAL,
            message=f"Snapshot must be a JSON object, got {type(data).__name__}",
            suggestion="Check the snapshot format"
        ))
        return ValidationResult(is_valid=False, errors=errors, pass_rate=0.0)

    try:
        RankingSnapshot(**data)
    except PydanticValidationError as e:
        for error in e.errors():
            errors.append(ValidationError(
                error_type="SCHEMA_VALIDATION_FAILED",
                severity=ValidationSeverity.CRITICAL,
                message=error["msg"],
                field=".".join(str(loc) for loc in error["loc"]),
                value=error.get("input"),
                suggestion="Check the snapshot format"
            ))

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        pass_rate=0.0 if errors else 1.0,
        validated_at=datetime.now()
    )
