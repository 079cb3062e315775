"""
Highland Games scoring engine CLI

Computes group leaderboards and continental rankings from a JSON snapshot
of the competition store.
"""
import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, List

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from records.normalizer import scopes_for_federation
from records.schemas import RankingSnapshot
from records.validators import ResultValidator, RecordValidator, validate_snapshot_payload
from scoring.config import ScoringSettings, get_scoring_settings
from scoring.continental import ContinentalRankingAggregator, ContinentalRanking, DuplicatePolicy
from scoring.exceptions import ScoringError, SnapshotError
from scoring.leaderboard import GroupLeaderboardAggregator, Leaderboard
from scoring.calculator import RankFormula


def setup_logging(level: str = "INFO", log_dir: Optional[str] = "logs"):
    """stderr sink plus a daily rotated file sink"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level
    )
    if log_dir:
        logger.add(
            str(Path(log_dir) / "scoring_{time:YYYY-MM-DD}.log"),
            rotation="1 day",
            retention="30 days",
            level="DEBUG"
        )


class ScoringRunner:
    """Runs the scoring engine over one snapshot"""

    def __init__(self, snapshot: RankingSnapshot, settings: Optional[ScoringSettings] = None):
        self.snapshot = snapshot
        self.settings = settings or get_scoring_settings()
        self.names = snapshot.athlete_names()

    @classmethod
    def from_file(cls, path: str, settings: Optional[ScoringSettings] = None) -> "ScoringRunner":
        """Load a snapshot JSON file"""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e

        try:
            snapshot = RankingSnapshot(**data)
        except (PydanticValidationError, TypeError) as e:
            raise SnapshotError(f"Invalid snapshot {path}: {e}") from e

        logger.info(
            f"Snapshot loaded: {len(snapshot.athletes)} athletes, "
            f"{len(snapshot.personal_records)} personal records, "
            f"{len(snapshot.official_records)} official records, "
            f"{len(snapshot.results)} results"
        )
        return cls(snapshot, settings)

    # ==================== Computations ====================

    def leaderboard(self, group_id: str) -> Leaderboard:
        group = self.snapshot.find_group(group_id)
        if group is None:
            raise ScoringError(f"Unknown group: {group_id}")

        aggregator = GroupLeaderboardAggregator(RankFormula(self.settings.rank_formula))
        return aggregator.leaderboard(self.snapshot.results, events=group.events, group_id=group.id)

    def ranking(self, scope: Optional[str] = None, policy: Optional[str] = None) -> ContinentalRanking:
        aggregator = ContinentalRankingAggregator(
            scale=self.settings.record_points_scale,
            duplicate_policy=DuplicatePolicy(policy or self.settings.duplicate_policy),
        )
        return aggregator.ranking(
            self.snapshot.personal_records,
            self.snapshot.official_records,
            scope or self.settings.default_scope,
        )

    def validate(self) -> bool:
        """Run every validator, print the issues, True when nothing blocks scoring"""
        reports = {
            f"results[{event_id}]": report
            for event_id, report in ResultValidator().validate_results(self.snapshot.results).items()
        }
        record_validator = RecordValidator()
        reports["personal_records"] = record_validator.validate_personal_records(self.snapshot.personal_records)
        reports["official_records"] = record_validator.validate_official_records(self.snapshot.official_records)

        ok = True
        for name, report in reports.items():
            for issue in report.errors + report.warnings:
                print(f"[{issue.severity.value:>8}] {name}: {issue.message}")
            if not report.can_score:
                ok = False
        print(f"\n{'OK' if ok else 'ERRORS FOUND'} ({len(reports)} checks)")
        return ok

    # ==================== Output ====================

    def print_leaderboard(self, board: Leaderboard, top_n: int = 20):
        print(f"\n{'='*60}")
        print(f" Group {board.group_id} - lowest total wins ({board.total_events} events)")
        print(f"{'='*60}")
        print(f"{'Pos':>4} {'Athlete':<25} {'Points':>8} {'Events':>7}")
        print(f"{'-'*60}")
        for e in board.entries[:top_n]:
            name = self.names.get(e.athlete_id, e.athlete_id)
            print(f"{e.position:>4} {name:<25} {e.total_points:>8} {e.events_completed:>3}/{e.total_events:<3}")

    def print_ranking(self, ranking: ContinentalRanking, top_n: int = 20):
        print(f"\n{'='*60}")
        print(f" {ranking.scope} ranking - highest total wins")
        print(f"{'='*60}")
        print(f"{'Pos':>4} {'Athlete':<25} {'Points':>10} {'Events':>7}")
        print(f"{'-'*60}")
        for e in ranking.entries[:top_n]:
            name = self.names.get(e.athlete_id, e.athlete_id)
            print(f"{e.position:>4} {name:<25} {e.total_points:>10.1f} {e.scored_events:>7}")

    def print_check(self, scope: Optional[str] = None, athletes: int = 3):
        """Reference lookup and per-athlete breakdown dump"""
        scope = scope or self.settings.default_scope
        aggregator = ContinentalRankingAggregator(scale=self.settings.record_points_scale)
        lookup = aggregator.reference_lookup(self.snapshot.official_records, scope)

        print(f"{scope} records: {len(lookup)}")
        for ref in lookup.values():
            print(f"   - {ref.event_name}: {ref.performance} -> {ref.magnitude}")

        by_athlete = {}
        for pr in self.snapshot.personal_records:
            by_athlete.setdefault(pr.athlete_id, []).append(pr)

        for athlete_id in list(by_athlete)[:athletes]:
            print(f"\nAthlete: {self.names.get(athlete_id, athlete_id)}")
            total = 0.0
            for pr in by_athlete[athlete_id]:
                line = aggregator.score_record(pr, lookup)
                if line.scored:
                    total += line.points
                    print(f"   - {line.event_name}: {line.performance} ({line.magnitude}) "
                          f"/ {line.reference_magnitude} * {aggregator.scale:g} = {line.points:.2f} pts")
                else:
                    print(f"   - {line.event_name}: skipped ({line.status.value})")
            print(f"   => TOTAL: {total:.2f} pts")

    def print_federation_scopes(self, federation: str):
        """Reference lookups visible from a federation context"""
        scopes = scopes_for_federation(federation)
        if scopes is None:
            scopes = sorted({r.scope for r in self.snapshot.official_records})
            print(f"Federation {federation}: no filter, all scopes")
        else:
            print(f"Federation {federation}: {', '.join(scopes)}")

        aggregator = ContinentalRankingAggregator(scale=self.settings.record_points_scale)
        for scope in scopes:
            lookup = aggregator.reference_lookup(self.snapshot.official_records, scope)
            print(f"   - {scope}: {len(lookup)} records")

    def export(self, payload: dict, output_file: str, kind: str):
        export_data = {
            "meta": {
                "generated_at": datetime.now().isoformat(),
                "type": kind,
            },
            **payload,
        }
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(export_data, f, ensure_ascii=False, indent=2)
        logger.info(f"Exported {kind}: {output_file}")


# =====================================================
# CLI
# =====================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Highland Games scoring engine")
    parser.add_argument("--data", type=str, default="data/snapshot.json", help="Snapshot JSON file")
    parser.add_argument("--top", type=int, default=20, help="Number of lines to print")
    parser.add_argument("--log-level", type=str, help="Console log level")

    sub = parser.add_subparsers(dest="command", required=True)

    p_board = sub.add_parser("leaderboard", help="Group leaderboard (lowest total wins)")
    p_board.add_argument("--group", required=True, help="Group id")
    p_board.add_argument("--output", type=str, help="Export JSON file")

    p_rank = sub.add_parser("ranking", help="Continental ranking (highest total wins)")
    p_rank.add_argument("--scope", type=str, help="Official record scope (default from settings)")
    p_rank.add_argument("--policy", choices=[p.value for p in DuplicatePolicy], help="Duplicate personal record policy")
    p_rank.add_argument("--output", type=str, help="Export JSON file")

    p_check = sub.add_parser("check", help="Dump the ranking computation for a few athletes")
    p_check.add_argument("--scope", type=str, help="Official record scope")
    p_check.add_argument("--athletes", type=int, default=3, help="Number of athletes to dump")
    p_check.add_argument("--federation", type=str, help="Federation code, lists the scopes it sees (FR, NL, ...)")

    sub.add_parser("validate", help="Check the snapshot for data-entry problems")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_scoring_settings()
    setup_logging(args.log_level or settings.log_level, settings.log_dir)

    try:
        if args.command == "validate":
            with open(args.data, "r", encoding="utf-8") as f:
                payload = json.load(f)
            report = validate_snapshot_payload(payload)
            if not report.is_valid:
                for issue in report.errors:
                    print(f"[{issue.severity.value:>8}] {issue.field}: {issue.message}")
                return 1

        runner = ScoringRunner.from_file(args.data, settings)

        if args.command == "leaderboard":
            board = runner.leaderboard(args.group)
            runner.print_leaderboard(board, top_n=args.top)
            if args.output:
                runner.export(board.to_dict(), args.output, "leaderboard")

        elif args.command == "ranking":
            ranking = runner.ranking(args.scope, args.policy)
            if not ranking.entries:
                print(f"No ranking data available for {ranking.scope}")
            else:
                runner.print_ranking(ranking, top_n=args.top)
            if args.output:
                runner.export(ranking.to_dict(), args.output, "ranking")

        elif args.command == "check":
            if args.federation:
                runner.print_federation_scopes(args.federation)
            runner.print_check(args.scope, args.athletes)

        elif args.command == "validate":
            return 0 if runner.validate() else 1

    except (ScoringError, OSError, json.JSONDecodeError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

    return 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
