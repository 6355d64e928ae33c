#!/usr/bin/env python3
"""
Load a JSON export of scraped class records (array of {classId, className, status, classDate,
time, instructor, scrapedAt, index}) into class_snapshots.
Run: python scripts/import_snapshots.py export.json [--naive-tz Australia/Sydney]

Naive scrapedAt values (no offset) are read as wall-clock time in --naive-tz (default GYM_TIMEZONE).
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from zoneinfo import ZoneInfo

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from booking_speed.config import settings
from booking_speed.core.analysis_config import GYM_TIMEZONE
from booking_speed.db.base import Base
from booking_speed.db.session import SessionLocal, engine
from booking_speed.services.snapshot_service import insert_snapshots


def main() -> int:
    parser = argparse.ArgumentParser(description="Import scraped class records")
    parser.add_argument("path", type=Path)
    parser.add_argument("--naive-tz", default=GYM_TIMEZONE)
    parser.add_argument("--create-tables", action="store_true", help="create tables without alembic (dev/sqlite)")
    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    records = json.loads(args.path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        print("Expected a JSON array of records", file=sys.stderr)
        return 1
    if args.create_tables:
        Base.metadata.create_all(engine)

    db = SessionLocal()
    try:
        n = insert_snapshots(db, records, assume_tz=ZoneInfo(args.naive_tz))
    finally:
        db.close()
    print(f"Inserted {n} snapshots from {args.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
