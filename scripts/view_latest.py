#!/usr/bin/env python3
"""
Show the most recent scraped classes and a status summary.
Run: python scripts/view_latest.py [--limit 10]
"""
import argparse
import sys
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from booking_speed.db.session import SessionLocal
from booking_speed.services.snapshot_service import latest_snapshots, snapshot_count


def main() -> int:
    parser = argparse.ArgumentParser(description="Show latest scraped classes")
    parser.add_argument("--limit", type=int, default=10)
    args = parser.parse_args()

    db = SessionLocal()
    try:
        total = snapshot_count(db)
        rows = latest_snapshots(db, args.limit)
    finally:
        db.close()

    print(f"Total snapshots in database: {total}\n")
    if not rows:
        print("No data found in database.")
        return 0

    print(f"Class date: {rows[0].class_date}")
    print(f"Scraped at: {rows[0].scraped_at}\n")
    for i, r in enumerate(rows, start=1):
        print(f"{i}. {r.class_time} - {r.class_name}")
        print(f"   Instructor: {r.instructor or '-'}")
        print(f"   Status: {r.status}")
        print(f"   Index: {r.batch_index}")
        print()

    counts = Counter(r.status for r in rows)
    print(f"Status summary (of these {len(rows)}):")
    for status in ("AVAILABLE", "LOW", "FULL"):
        print(f"  {status}: {counts.get(status, 0)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
