"""
Rankings and grouped fill-rate statistics over slot timelines.

Everything here is deterministic: ties are broken by slot_identity / label so running the
same timelines twice yields identical order and numbers.
"""
from collections import defaultdict
from typing import Callable, Iterable, Sequence

from booking_speed.core.errors import UnparsableTimeLabel
from booking_speed.services.analysis.stats import mean_or_none, percentage_or_none
from booking_speed.services.analysis.time_parser import clock_minutes
from booking_speed.services.analysis.types import AggregateBucket, AnalysisSummary, RankedSlot, SlotTimeline


def rank_fastest(timelines: Iterable[SlotTimeline]) -> tuple[RankedSlot, ...]:
    """Filled slots only, fastest first; rank 1..N."""
    filled = sorted(
        (t for t in timelines if t.ever_filled),
        key=lambda t: (t.hours_to_full, t.slot_identity),
    )
    return tuple(RankedSlot(rank=i, timeline=t) for i, t in enumerate(filled, start=1))


def _bucket(label: str, group: Sequence[SlotTimeline]) -> AggregateBucket:
    hours = [t.hours_to_full for t in group if t.ever_filled]
    filled = len(hours)
    return AggregateBucket(
        label=label,
        total=len(group),
        filled=filled,
        fill_rate=percentage_or_none(filled, len(group)),
        avg_hours_to_full=mean_or_none(hours),
    )


def build_buckets(
    timelines: Iterable[SlotTimeline], key: Callable[[SlotTimeline], str]
) -> list[AggregateBucket]:
    by_key: dict[str, list[SlotTimeline]] = defaultdict(list)
    for t in timelines:
        by_key[key(t)].append(t)
    return [_bucket(label, group) for label, group in by_key.items()]


def category_buckets(timelines: Iterable[SlotTimeline]) -> tuple[AggregateBucket, ...]:
    """Per class type, highest fill rate first (ties by name)."""
    buckets = build_buckets(timelines, lambda t: t.category)
    buckets.sort(key=lambda b: (-(b.fill_rate if b.fill_rate is not None else -1.0), b.label))
    return tuple(buckets)


def _time_of_day_key(label: str) -> tuple[int, int, str]:
    # Unparsable clock labels sort after every parsable one
    try:
        return (0, clock_minutes(label), label)
    except UnparsableTimeLabel:
        return (1, 0, label)


def time_of_day_buckets(timelines: Iterable[SlotTimeline]) -> tuple[AggregateBucket, ...]:
    """Per clock-time label, in chronological order through the day."""
    buckets = build_buckets(timelines, lambda t: t.time_label)
    buckets.sort(key=lambda b: _time_of_day_key(b.label))
    return tuple(buckets)


def summarize(timelines: Sequence[SlotTimeline], ranking: Sequence[RankedSlot] | None = None) -> AnalysisSummary:
    if ranking is None:
        ranking = rank_fastest(timelines)
    hours = [r.timeline.hours_to_full for r in ranking]
    total = len(timelines)
    filled = len(ranking)
    return AnalysisSummary(
        total_slots=total,
        filled_count=filled,
        filled_pct=percentage_or_none(filled, total),
        still_available_count=total - filled,
        mean_hours_to_full=mean_or_none(hours),
        min_hours_to_full=min(hours) if hours else None,
        max_hours_to_full=max(hours) if hours else None,
        fastest_slot=ranking[0].timeline.slot_identity if ranking else None,
        slowest_slot=ranking[-1].timeline.slot_identity if ranking else None,
    )
