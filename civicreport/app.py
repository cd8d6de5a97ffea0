import argparse
import json
from pathlib import Path

from . import __version__
from .config import DuplicateConfig
from .database import init_database
from .dedup.resolver import DuplicateScorer, describe_result
from .env import load_env
from .logger import get_logger
from .models import IssueStatus
from .normalize import normalize_status
from .repositories.issues import IssueRepository
from .schema import report_from_dict, validate_report
from .supabase_store import SupabaseIssueFetcher

DEFAULT_DB = "data/issues.db"


def _load_json(path_str: str) -> dict:
    input_path = Path(path_str)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _build_fetcher(args: argparse.Namespace):
    if args.source == "supabase":
        try:
            return SupabaseIssueFetcher()
        except ValueError as e:
            raise SystemExit(str(e))
    db_path = Path(args.db)
    init_database(db_path)
    return IssueRepository(db_path)


def cmd_check(args: argparse.Namespace) -> None:
    data = _load_json(args.input)
    try:
        report = report_from_dict(data)
    except ValueError as e:
        raise SystemExit(f"Invalid report: {e}")

    try:
        config = DuplicateConfig.from_env()
    except ValueError as e:
        raise SystemExit(str(e))

    logger = get_logger(level=args.log_level, enable_console=args.verbose)
    scorer = DuplicateScorer(fetcher=_build_fetcher(args), config=config, logger=logger)
    result = scorer.check(report)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(describe_result(result))
    if args.fail_on_duplicate and result.is_duplicate:
        raise SystemExit(3)


def cmd_validate(args: argparse.Namespace) -> None:
    data = _load_json(args.input)
    errors = validate_report(data)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_add(args: argparse.Namespace) -> None:
    data = _load_json(args.input)
    try:
        report = report_from_dict(data)
        status = normalize_status(data.get("status"))
    except ValueError as e:
        raise SystemExit(f"Invalid issue: {e}")

    db_path = Path(args.db)
    init_database(db_path)
    repo = IssueRepository(db_path)
    issue_id = repo.add_issue(
        title=report.title,
        description=report.description,
        category=report.category,
        latitude=report.latitude,
        longitude=report.longitude,
        status=status,
        issue_id=data.get("id"),
    )
    print(f"Issue: {issue_id}")
    print(f"Status: {status.value}")


def cmd_list(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    if not db_path.exists():
        print(f"Database not found: {db_path}")
        return
    repo = IssueRepository(db_path)
    issues = repo.list_issues(include_resolved=args.all)
    if not issues:
        print("No issues in store.")
        return
    print(f"Found {len(issues)} issues in {db_path}:\n")
    for issue in issues:
        print(f"ID: {issue.id}")
        print(f"  Title: {issue.title}")
        print(f"  Category: {issue.category.value}")
        print(f"  Status: {issue.status.value}")
        if issue.has_location:
            print(f"  Location: {issue.latitude:.6f}, {issue.longitude:.6f}")
        print(f"  Created: {issue.created_at.isoformat(timespec='seconds')}")
        print()


def cmd_resolve(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}")
    repo = IssueRepository(db_path)
    if not repo.update_status(args.id, IssueStatus.RESOLVED):
        raise SystemExit(f"Issue not found: {args.id}")
    print(f"Resolved: {args.id}")


def main():
    # Load .env if present (SUPABASE_URL, SUPABASE_KEY, CIVICREPORT_* overrides)
    load_env()
    parser = argparse.ArgumentParser(prog="civicreport", description="Civic issue duplicate-report detection")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    chk = subparsers.add_parser("check", help="Check a report JSON for likely duplicates")
    chk.add_argument("--input", required=True, help="Path to report JSON (title, description, category, latitude, longitude)")
    chk.add_argument("--source", choices=["sqlite", "supabase"], default="sqlite", help="Where candidates come from (default: sqlite)")
    chk.add_argument("--db", default=DEFAULT_DB, help=f"Path to SQLite store (default: {DEFAULT_DB})")
    chk.add_argument("--json", action="store_true", help="Print the result as JSON")
    chk.add_argument("--fail-on-duplicate", action="store_true", help="Exit with status 3 when a likely duplicate is found")
    chk.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    chk.add_argument("--verbose", action="store_true", help="Also log to the console")
    chk.set_defaults(func=cmd_check)

    val = subparsers.add_parser("validate", help="Validate a report JSON against the submission rules")
    val.add_argument("--input", required=True, help="Path to report JSON")
    val.set_defaults(func=cmd_validate)

    add = subparsers.add_parser("add", help="Add an issue JSON to the SQLite store")
    add.add_argument("--input", required=True, help="Path to issue JSON")
    add.add_argument("--db", default=DEFAULT_DB, help=f"Path to SQLite store (default: {DEFAULT_DB})")
    add.set_defaults(func=cmd_add)

    lst = subparsers.add_parser("list", help="List stored issues")
    lst.add_argument("--db", default=DEFAULT_DB, help=f"Path to SQLite store (default: {DEFAULT_DB})")
    lst.add_argument("--all", action="store_true", help="Include resolved issues")
    lst.set_defaults(func=cmd_list)

    res = subparsers.add_parser("resolve", help="Mark an issue as resolved")
    res.add_argument("--id", required=True, help="Issue id")
    res.add_argument("--db", default=DEFAULT_DB, help=f"Path to SQLite store (default: {DEFAULT_DB})")
    res.set_defaults(func=cmd_resolve)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
