"""
Booking-speed analysis: which classes fill fastest after their booking window opens.

- group_by_slot: partition snapshots by slot identity (date + time + class name).
- reconstruct_timeline: first FULL / first LOW per slot, hours measured from available_from.
- audit_coverage: weekday coverage on both axes and sampling-frequency shortfall.
- run_analysis: the whole batch, returning an immutable AnalysisResult.
"""
from booking_speed.services.analysis.aggregate import category_buckets, rank_fastest, summarize, time_of_day_buckets
from booking_speed.services.analysis.coverage import audit_coverage
from booking_speed.services.analysis.grouping import group_by_slot
from booking_speed.services.analysis.pipeline import run_analysis
from booking_speed.services.analysis.timeline import reconstruct_all, reconstruct_timeline
from booking_speed.services.analysis.types import (
    AggregateBucket,
    AnalysisResult,
    AnalysisSummary,
    CoverageReport,
    DataQualityIssue,
    RankedSlot,
    SlotState,
    SlotTimeline,
    Snapshot,
)

__all__ = [
    "AggregateBucket",
    "AnalysisResult",
    "AnalysisSummary",
    "CoverageReport",
    "DataQualityIssue",
    "RankedSlot",
    "SlotState",
    "SlotTimeline",
    "Snapshot",
    "audit_coverage",
    "category_buckets",
    "group_by_slot",
    "rank_fastest",
    "reconstruct_all",
    "reconstruct_timeline",
    "run_analysis",
    "summarize",
    "time_of_day_buckets",
]
