#!/usr/bin/env python3
"""
Check scraping status: scrapes per batch, weekday coverage of scrapes and of classes,
and whether the scrape frequency matches the configured interval.
Run: python scripts/check_scraping_status.py
"""
import io
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from booking_speed.config import settings
from booking_speed.core.analysis_config import get_analysis_config
from booking_speed.core.errors import SnapshotSourceError
from booking_speed.db.session import SessionLocal
from booking_speed.services.analysis import audit_coverage
from booking_speed.services.report.console_report import render_coverage, render_scrape_batches
from booking_speed.services.snapshot_service import load_snapshots


def main() -> int:
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    db = SessionLocal()
    try:
        loaded = load_snapshots(db)
    except SnapshotSourceError as e:
        print(f"Could not read snapshots: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Total records: {len(loaded.snapshots)}\n")
    if not loaded.snapshots:
        print("No data in database yet!")
        return 0

    coverage = audit_coverage(loaded.snapshots, get_analysis_config())
    out = io.StringIO()
    render_scrape_batches(coverage, out)
    render_coverage(coverage, out)
    print(out.getvalue())
    return 0


if __name__ == "__main__":
    sys.exit(main())
