"""
Analysis API: summary, fastest-filling ranking, fill-rate buckets, coverage, issues.

Each request reads the snapshot store once and runs the analysis in memory; responses use
the same dict shapes as the JSON artifact.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from booking_speed.config import settings
from booking_speed.core.analysis_config import AnalysisConfig, get_analysis_config
from booking_speed.core.constants import (
    API_FASTEST_DEFAULT_LIMIT,
    API_FASTEST_MAX_LIMIT,
    API_LATEST_SNAPSHOTS_LIMIT,
    API_LATEST_SNAPSHOTS_MAX_LIMIT,
)
from booking_speed.core.errors import BookingSpeedError, analysis_error_to_http
from booking_speed.db.session import get_db
from booking_speed.services.analysis import AnalysisResult, run_analysis
from booking_speed.services.report import emit_artifacts
from booking_speed.services.report.serializers import (
    bucket_to_dict,
    coverage_to_dict,
    issue_to_dict,
    ranked_to_dict,
    summary_to_dict,
    timeline_to_dict,
)
from booking_speed.services.snapshot_service import (
    latest_snapshots,
    load_snapshots,
    snapshot_count,
    snapshot_row_to_dict,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _analyze(db: Session, config: AnalysisConfig) -> AnalysisResult:
    try:
        loaded = load_snapshots(db)
        return run_analysis(loaded.snapshots, config, issues=loaded.issues)
    except BookingSpeedError as e:
        logger.warning("analysis request failed: %s", e)
        raise analysis_error_to_http(e) from e


@router.get("/summary")
def get_summary(db: Session = Depends(get_db), config: AnalysisConfig = Depends(get_analysis_config)):
    """Totals, fill percentage and hours-to-full statistics (null when undefined)."""
    result = _analyze(db, config)
    return {
        "generated_at": result.generated_at.isoformat(),
        "summary": summary_to_dict(result.summary),
        "skipped_count": len(result.skipped),
        "issue_count": len(result.issues),
    }


@router.get("/fastest")
def get_fastest(
    limit: int = Query(API_FASTEST_DEFAULT_LIMIT, ge=1, le=API_FASTEST_MAX_LIMIT),
    db: Session = Depends(get_db),
    config: AnalysisConfig = Depends(get_analysis_config),
):
    """Classes that filled, fastest first."""
    result = _analyze(db, config)
    return {
        "total_ranked": len(result.ranking),
        "ranking": [ranked_to_dict(r) for r in result.ranking[:limit]],
    }


@router.get("/categories")
def get_categories(db: Session = Depends(get_db), config: AnalysisConfig = Depends(get_analysis_config)):
    """Fill rate per class type, highest first."""
    result = _analyze(db, config)
    return {"categories": [bucket_to_dict(b) for b in result.categories]}


@router.get("/times")
def get_times_of_day(db: Session = Depends(get_db), config: AnalysisConfig = Depends(get_analysis_config)):
    """Fill rate per class start time, in order through the day."""
    result = _analyze(db, config)
    return {"times_of_day": [bucket_to_dict(b) for b in result.times_of_day]}


@router.get("/coverage")
def get_coverage(db: Session = Depends(get_db), config: AnalysisConfig = Depends(get_analysis_config)):
    """Weekday coverage on both axes and scrape-frequency shortfall. Advisory."""
    result = _analyze(db, config)
    return coverage_to_dict(result.coverage)


@router.get("/slots")
def get_slots(db: Session = Depends(get_db), config: AnalysisConfig = Depends(get_analysis_config)):
    """Every reconstructed class timeline."""
    result = _analyze(db, config)
    return {"slots": [timeline_to_dict(t) for t in result.timelines]}


@router.get("/issues")
def get_issues(db: Session = Depends(get_db), config: AnalysisConfig = Depends(get_analysis_config)):
    """Data-quality issues and skipped classes."""
    result = _analyze(db, config)
    return {
        "issues": [issue_to_dict(i) for i in result.issues],
        "skipped": dict(result.skipped),
    }


@router.get("/snapshots/latest")
def get_latest_snapshots(
    limit: int = Query(API_LATEST_SNAPSHOTS_LIMIT, ge=1, le=API_LATEST_SNAPSHOTS_MAX_LIMIT),
    db: Session = Depends(get_db),
):
    """Most recent stored snapshots and per-status counts among them."""
    rows = latest_snapshots(db, limit)
    status_counts: dict[str, int] = {}
    for r in rows:
        status_counts[r.status] = status_counts.get(r.status, 0) + 1
    return {
        "total_snapshots": snapshot_count(db),
        "snapshots": [snapshot_row_to_dict(r) for r in rows],
        "status_counts": status_counts,
    }


@router.post("/emit")
def post_emit(db: Session = Depends(get_db), config: AnalysisConfig = Depends(get_analysis_config)):
    """Run the analysis now and rewrite the JSON / CSV / HTML artifacts."""
    result = _analyze(db, config)
    try:
        paths = emit_artifacts(result, settings.analysis_output_dir, config)
    except OSError as e:
        logger.warning("emit failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Could not write artifacts: {e}") from e
    return {"artifacts": {k: str(p) for k, p in paths.items()}, "slot_count": len(result.timelines)}
