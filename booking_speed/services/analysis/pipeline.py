"""
Batch pipeline: snapshots -> coverage (advisory) -> slot groups -> timelines -> rankings/buckets.

Pure computation over an already-loaded snapshot list; reading the store and writing
artifacts happen before and after, in the caller.
"""
import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Iterable, Sequence

from booking_speed.core.analysis_config import AnalysisConfig
from booking_speed.core.errors import EmptyInputBatch
from booking_speed.services.analysis.aggregate import category_buckets, rank_fastest, summarize, time_of_day_buckets
from booking_speed.services.analysis.coverage import audit_coverage
from booking_speed.services.analysis.grouping import group_by_slot
from booking_speed.services.analysis.timeline import reconstruct_all
from booking_speed.services.analysis.types import AnalysisResult, DataQualityIssue, Snapshot

logger = logging.getLogger(__name__)


def run_analysis(
    snapshots: Sequence[Snapshot],
    config: AnalysisConfig,
    *,
    issues: Iterable[DataQualityIssue] = (),
    now: datetime | None = None,
) -> AnalysisResult:
    """
    Run the whole analysis. issues: problems already found at the input boundary (e.g. rejected
    rows) so they travel with the result. An empty batch yields a zeroed summary, not an error.
    """
    now = now or datetime.now(timezone.utc)
    all_issues = list(issues)
    if not snapshots:
        err = EmptyInputBatch("no snapshots supplied; all aggregates are undefined")
        logger.warning("run_analysis: %s", err)
        all_issues.append(DataQualityIssue.from_error(err))

    coverage = audit_coverage(snapshots, config)
    groups = group_by_slot(snapshots)
    timelines, slot_issues, skipped = reconstruct_all(groups, config, now=now)
    all_issues.extend(slot_issues)

    ranking = rank_fastest(timelines)
    result = AnalysisResult(
        generated_at=now,
        timelines=timelines,
        ranking=ranking,
        categories=category_buckets(timelines),
        times_of_day=time_of_day_buckets(timelines),
        summary=summarize(timelines, ranking),
        coverage=coverage,
        issues=tuple(all_issues),
        skipped=MappingProxyType(skipped),
    )
    logger.info(
        "run_analysis: %s snapshots -> %s slots (%s skipped), %s filled, %s issues",
        len(snapshots),
        len(timelines),
        len(skipped),
        result.summary.filled_count,
        len(result.issues),
    )
    return result
