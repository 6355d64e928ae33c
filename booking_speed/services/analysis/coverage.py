"""
Data-coverage audit over the raw snapshot set (advisory only).

Two weekday axes, checked independently:
- sampling: weekday of sampled_at in the gym's zone (did we scrape on every day?)
- slot: weekday named in the slot date label (do we have classes for every day?)

Sampling frequency: expected = floor(span_hours / interval_hours) + 1 batches between the
first and last sample; observed = scrape runs, where a run is a chain of samples each within
BATCH_GAP_FRACTION of the interval of the previous one (a run may cross a minute boundary).
"""
import logging
import math
from datetime import datetime, timedelta, tzinfo
from types import MappingProxyType
from typing import Sequence

from booking_speed.core.analysis_config import AnalysisConfig
from booking_speed.core.constants import BATCH_GAP_FRACTION, BATCH_LABEL_FORMAT, WEEKDAYS
from booking_speed.services.analysis.time_parser import weekday_from_label
from booking_speed.services.analysis.types import SECONDS_PER_HOUR, CoverageReport, Snapshot

logger = logging.getLogger(__name__)


def expected_batch_count(span_hours: float | None, interval_hours: float) -> int:
    if span_hours is None:
        return 0
    return math.floor(span_hours / interval_hours) + 1


def scrape_batches(sampled: Sequence[datetime], interval_hours: float, tz: tzinfo) -> list[tuple[str, int]]:
    """(label of the run's first sample, samples in run) per scrape run, chronological."""
    max_gap = timedelta(hours=interval_hours * BATCH_GAP_FRACTION)
    runs: list[list[datetime]] = []
    for at in sorted(sampled):
        if runs and at - runs[-1][-1] <= max_gap:
            runs[-1].append(at)
        else:
            runs.append([at])
    return [(run[0].astimezone(tz).strftime(BATCH_LABEL_FORMAT), len(run)) for run in runs]


def audit_coverage(snapshots: Sequence[Snapshot], config: AnalysisConfig) -> CoverageReport:
    tz = config.tz
    sampling_seen: set[str] = set()
    slot_seen: set[str] = set()
    dates: set[str] = set()

    for s in snapshots:
        local = s.sampled_at.astimezone(tz)
        sampling_seen.add(WEEKDAYS[local.weekday()])
        dates.add(local.date().isoformat())
        day = weekday_from_label(s.date_label)
        if day:
            slot_seen.add(day)

    batches = scrape_batches([s.sampled_at for s in snapshots], config.sampling_interval_hours, tz)
    if snapshots:
        first = min(s.sampled_at for s in snapshots)
        last = max(s.sampled_at for s in snapshots)
        span_hours = (last - first).total_seconds() / SECONDS_PER_HOUR
    else:
        first = last = None
        span_hours = None

    report = CoverageReport(
        sampling_days=MappingProxyType({d: d in sampling_seen for d in WEEKDAYS}),
        slot_days=MappingProxyType({d: d in slot_seen for d in WEEKDAYS}),
        snapshot_count=len(snapshots),
        first_sampled_at=first,
        last_sampled_at=last,
        span_hours=span_hours,
        interval_hours=config.sampling_interval_hours,
        expected_batches=expected_batch_count(span_hours, config.sampling_interval_hours),
        observed_batches=len(batches),
        batch_counts=tuple(batches),
        sample_dates=tuple(sorted(dates)),
    )
    if not report.sampling_complete:
        logger.warning("Coverage: no snapshots sampled on %s", ", ".join(report.missing_sampling_days))
    if not report.slot_complete:
        logger.warning("Coverage: no classes observed for %s", ", ".join(report.missing_slot_days))
    if report.batch_shortfall:
        logger.warning(
            "Coverage: expected ~%s batches (every %sh over %.1fh), observed %s",
            report.expected_batches,
            report.interval_hours,
            span_hours or 0.0,
            report.observed_batches,
        )
    return report
