#!/usr/bin/env python3
"""
Analyze which classes book up fastest: print the console report and write the
JSON / CSV / HTML artifacts.
Run: python scripts/run_analysis.py [--output-dir reports] [--no-artifacts]
"""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from booking_speed.config import settings
from booking_speed.core.analysis_config import get_analysis_config
from booking_speed.core.errors import SnapshotSourceError
from booking_speed.db.session import SessionLocal
from booking_speed.services.analysis import run_analysis
from booking_speed.services.report import emit_artifacts, render_console_report
from booking_speed.services.snapshot_service import load_snapshots


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--output-dir", default=settings.analysis_output_dir)
    parser.add_argument("--no-artifacts", action="store_true", help="print the report only")
    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = get_analysis_config()
    db = SessionLocal()
    try:
        loaded = load_snapshots(db)
    except SnapshotSourceError as e:
        print(f"Could not read snapshots: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Loaded {len(loaded.snapshots)} snapshots ({len(loaded.issues)} rejected)\n")
    result = run_analysis(loaded.snapshots, config, issues=loaded.issues)
    print(render_console_report(result))

    if not args.no_artifacts:
        paths = emit_artifacts(result, args.output_dir, config)
        for path in paths.values():
            print(f"Saved to: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
