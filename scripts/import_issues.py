#!/usr/bin/env python3
"""
Import issues from a JSON export into the SQLite issue store.

The input is a JSON list of issue objects (id, title, description, category,
latitude, longitude, status, created_at), e.g. a Supabase table export.

Usage:
    python scripts/import_issues.py --json data/issues.json --db data/issues.db
"""

import argparse
import json
from datetime import datetime
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from civicreport.database import Issue, init_database, get_session
from civicreport.normalize import normalize_status
from civicreport.schema import report_from_dict


def parse_timestamp(ts_str):
    """Parse ISO timestamp string, handle missing timestamps."""
    if not ts_str:
        return datetime.now()
    try:
        parsed = datetime.fromisoformat(ts_str.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return datetime.now()
    # SQLite column is naive local time
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def import_issues(json_path: Path, db_path: Path, dry_run: bool = False) -> bool:
    """
    Import issues from JSON to database.

    Args:
        json_path: Path to JSON file holding a list of issues
        db_path: Path to SQLite database file
        dry_run: If True, don't write to database

    Returns:
        True if the import committed (or was a dry run)
    """
    print(f"Loading issues from {json_path}...")
    with open(json_path, encoding="utf-8") as f:
        rows = json.load(f)

    if isinstance(rows, dict):
        rows = rows.get("issues", [])
    print(f"Found {len(rows)} issues in {json_path.name}")

    if dry_run:
        print("\n[DRY RUN] Would import the following issues:")
        for i, row in enumerate(rows[:5], 1):
            print(f"  {i}. {row.get('id', '<new>')}: [{row.get('category')}] {row.get('title')}")
        if len(rows) > 5:
            print(f"  ... and {len(rows) - 5} more")
        return True

    print(f"\nInitializing database at {db_path}...")
    init_database(db_path)
    session = get_session(db_path)

    imported = 0
    skipped = 0
    errors = 0

    for row in rows:
        label = row.get("id") or row.get("title")
        try:
            report = report_from_dict(row)
            status = normalize_status(row.get("status"))
        except ValueError as e:
            print(f"Skipping {label}: {e}")
            skipped += 1
            continue

        try:
            if row.get("id") and session.query(Issue).filter_by(id=str(row["id"])).first():
                print(f"Issue {row['id']} already exists, skipping")
                skipped += 1
                continue

            created_at = parse_timestamp(row.get("created_at"))
            issue = Issue(
                title=report.title,
                description=report.description,
                category=report.category.value,
                latitude=report.latitude,
                longitude=report.longitude,
                status=status.value,
                created_at=created_at,
                updated_at=created_at,
            )
            if row.get("id"):
                issue.id = str(row["id"])
            session.add(issue)
            imported += 1

            if imported % 20 == 0:
                print(f"  Imported {imported} issues...")

        except Exception as e:
            print(f"Error importing {label}: {e}")
            errors += 1

    try:
        session.commit()
        print("\nImport complete!")
        print(f"   Imported: {imported}")
        print(f"   Skipped:  {skipped}")
        print(f"   Errors:   {errors}")
    except Exception as e:
        session.rollback()
        print(f"Failed to commit: {e}")
        return False
    finally:
        session.close()

    return True


def main():
    parser = argparse.ArgumentParser(description="Import issues from JSON into the SQLite store")
    parser.add_argument("--json", type=Path, default=Path("data/issues.json"),
                        help="Path to JSON issue export")
    parser.add_argument("--db", type=Path, default=Path("data/issues.db"),
                        help="Path to SQLite database file")
    parser.add_argument("--dry-run", action="store_true",
                        help="Show what would be imported without writing")

    args = parser.parse_args()

    if not args.json.exists():
        print(f"JSON file not found: {args.json}")
        sys.exit(1)

    if not import_issues(args.json, args.db, dry_run=args.dry_run):
        sys.exit(1)


if __name__ == "__main__":
    main()
