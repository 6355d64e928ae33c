"""
Dict views of analysis results, shared by the JSON artifact and the API.

Undefined metrics are None (JSON null). Floats are kept at full precision; datetimes are ISO-8601
with offset. Key order below is the documented field order of the JSON artifact.
"""
from datetime import datetime
from typing import Any

from booking_speed.core.analysis_config import AnalysisConfig
from booking_speed.services.analysis.types import (
    AggregateBucket,
    AnalysisResult,
    AnalysisSummary,
    CoverageReport,
    DataQualityIssue,
    RankedSlot,
    SlotTimeline,
)

TIMELINE_FIELDS = (
    "slot_identity",
    "category",
    "date_label",
    "time_label",
    "instructor",
    "slot_start",
    "available_from",
    "ever_filled",
    "hours_to_full",
    "hours_to_low",
    "current_state",
    "first_seen_state",
    "last_seen_state",
    "snapshot_count",
    "first_sampled_at",
    "last_sampled_at",
    "filled_at_first_observation",
    "warnings",
)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def timeline_to_dict(t: SlotTimeline) -> dict[str, Any]:
    return {
        "slot_identity": t.slot_identity,
        "category": t.category,
        "date_label": t.date_label,
        "time_label": t.time_label,
        "instructor": t.instructor,
        "slot_start": _iso(t.slot_start),
        "available_from": _iso(t.available_from),
        "ever_filled": t.ever_filled,
        "hours_to_full": t.hours_to_full,
        "hours_to_low": t.hours_to_low,
        "current_state": t.current_state.value,
        "first_seen_state": t.first_seen_state.value,
        "last_seen_state": t.last_seen_state.value,
        "snapshot_count": t.snapshot_count,
        "first_sampled_at": _iso(t.first_record.sampled_at),
        "last_sampled_at": _iso(t.last_record.sampled_at),
        "filled_at_first_observation": t.filled_at_first_observation,
        "warnings": list(t.warnings),
    }


def ranked_to_dict(r: RankedSlot) -> dict[str, Any]:
    t = r.timeline
    return {
        "rank": r.rank,
        "slot_identity": t.slot_identity,
        "category": t.category,
        "time_label": t.time_label,
        "date_label": t.date_label,
        "instructor": t.instructor,
        "hours_to_full": t.hours_to_full,
        "hours_to_low": t.hours_to_low,
        "current_state": t.current_state.value,
        "filled_at_first_observation": t.filled_at_first_observation,
    }


def bucket_to_dict(b: AggregateBucket) -> dict[str, Any]:
    return {
        "label": b.label,
        "total": b.total,
        "filled": b.filled,
        "fill_rate": b.fill_rate,
        "avg_hours_to_full": b.avg_hours_to_full,
    }


def summary_to_dict(s: AnalysisSummary) -> dict[str, Any]:
    return {
        "total_slots": s.total_slots,
        "filled_count": s.filled_count,
        "filled_pct": s.filled_pct,
        "still_available_count": s.still_available_count,
        "mean_hours_to_full": s.mean_hours_to_full,
        "min_hours_to_full": s.min_hours_to_full,
        "max_hours_to_full": s.max_hours_to_full,
        "fastest_slot": s.fastest_slot,
        "slowest_slot": s.slowest_slot,
    }


def coverage_to_dict(c: CoverageReport) -> dict[str, Any]:
    return {
        "sampling_days": dict(c.sampling_days),
        "slot_days": dict(c.slot_days),
        "missing_sampling_days": c.missing_sampling_days,
        "missing_slot_days": c.missing_slot_days,
        "sampling_complete": c.sampling_complete,
        "slot_complete": c.slot_complete,
        "snapshot_count": c.snapshot_count,
        "first_sampled_at": _iso(c.first_sampled_at),
        "last_sampled_at": _iso(c.last_sampled_at),
        "span_hours": c.span_hours,
        "interval_hours": c.interval_hours,
        "expected_batches": c.expected_batches,
        "observed_batches": c.observed_batches,
        "missing_batches": c.missing_batches,
        "batch_shortfall": c.batch_shortfall,
        "batch_counts": [{"batch": label, "count": n} for label, n in c.batch_counts],
        "sample_dates": list(c.sample_dates),
    }


def issue_to_dict(i: DataQualityIssue) -> dict[str, Any]:
    return {"kind": i.kind, "slot_identity": i.slot_identity, "message": i.message}


def result_to_dict(result: AnalysisResult, config: AnalysisConfig | None = None) -> dict[str, Any]:
    return {
        "generated_at": _iso(result.generated_at),
        "config": config.to_dict() if config is not None else None,
        "summary": summary_to_dict(result.summary),
        "coverage": coverage_to_dict(result.coverage),
        "ranking": [ranked_to_dict(r) for r in result.ranking],
        "categories": [bucket_to_dict(b) for b in result.categories],
        "times_of_day": [bucket_to_dict(b) for b in result.times_of_day],
        "timelines": [timeline_to_dict(t) for t in result.timelines],
        "issues": [issue_to_dict(i) for i in result.issues],
        "skipped": dict(result.skipped),
    }
