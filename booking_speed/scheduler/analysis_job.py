"""
Scheduled analysis refresh: every ANALYSIS_REFRESH_INTERVAL_MINUTES load all snapshots, run the
analysis and rewrite the artifacts. Heartbeat is in-memory (exposed on /health).

A store read failure is fatal to that run only: it is logged and recorded, and no artifact is written.
"""
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path

from booking_speed.config import settings
from booking_speed.core.analysis_config import AnalysisConfig, get_analysis_config
from booking_speed.core.errors import SnapshotSourceError
from booking_speed.db.session import SessionLocal
from booking_speed.services.analysis import AnalysisResult, run_analysis
from booking_speed.services.report import emit_artifacts
from booking_speed.services.snapshot_service import load_snapshots

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_job_last_started_at: datetime | None = None
_job_last_finished_at: datetime | None = None
_job_last_error: str | None = None
_job_last_slot_count: int | None = None
_job_running: bool = False


def _set_heartbeat(
    started: datetime | None = None,
    finished: datetime | None = None,
    error: str | None = None,
    slot_count: int | None = None,
    running: bool | None = None,
) -> None:
    global _job_last_started_at, _job_last_finished_at, _job_last_error, _job_last_slot_count, _job_running
    with _lock:
        if started is not None:
            _job_last_started_at = started
        if finished is not None:
            _job_last_finished_at = finished
        if error is not None:
            _job_last_error = error or None
        if slot_count is not None:
            _job_last_slot_count = slot_count
        if running is not None:
            _job_running = running


def get_analysis_job_heartbeat() -> dict:
    """Last run times, error (if any), slots analyzed, is_job_running. In-memory only."""
    with _lock:
        return {
            "last_job_started_at": _job_last_started_at.isoformat() if _job_last_started_at else None,
            "last_job_finished_at": _job_last_finished_at.isoformat() if _job_last_finished_at else None,
            "last_job_error": _job_last_error,
            "last_run_slot_count": _job_last_slot_count,
            "is_job_running": _job_running,
        }


def run_analysis_job(
    output_dir: str | Path | None = None,
    config: AnalysisConfig | None = None,
) -> AnalysisResult | None:
    """One refresh. Returns the result, or None when the snapshot store could not be read."""
    config = config or get_analysis_config()
    output_dir = output_dir or settings.analysis_output_dir
    _set_heartbeat(started=datetime.now(timezone.utc), running=True)
    db = SessionLocal()
    try:
        loaded = load_snapshots(db)
        result = run_analysis(loaded.snapshots, config, issues=loaded.issues)
        emit_artifacts(result, output_dir, config)
        _set_heartbeat(slot_count=len(result.timelines), error="")
        return result
    except SnapshotSourceError as e:
        logger.error("Analysis refresh aborted, no artifacts written: %s", e)
        _set_heartbeat(error=str(e))
        return None
    except Exception as e:
        logger.exception("Analysis refresh failed: %s", e)
        _set_heartbeat(error=str(e))
        raise
    finally:
        db.close()
        _set_heartbeat(finished=datetime.now(timezone.utc), running=False)
