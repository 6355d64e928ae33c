"""
Per-slot timeline reconstruction.

- Snapshots are re-sorted by (sampled_at, sequence_index); input order is never trusted.
- Slot start comes from the *first* snapshot's labels (first-observed values are authoritative).
- available_from = slot start - window offset, applied on the slot-local wall clock.
- fill_event / low_event = first FULL / first LOW snapshot; None when never observed.

Slots are independent, so reconstruct_all fans them out over a thread pool and waits
for every group (full barrier) before returning.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timedelta, timezone
from typing import Mapping, Sequence

from booking_speed.core.analysis_config import UNPARSABLE_POLICY_NOW, AnalysisConfig
from booking_speed.core.errors import IdentityInvariantViolation, UnparsableTimeLabel
from booking_speed.services.analysis.time_parser import parse_slot_start, resolve_slot_start
from booking_speed.services.analysis.types import DataQualityIssue, SlotState, SlotTimeline, Snapshot

logger = logging.getLogger(__name__)

_IDENTITY_FIELDS = ("category", "date_label", "time_label")


def _first_with_state(ordered: Sequence[Snapshot], state: SlotState) -> Snapshot | None:
    return next((s for s in ordered if s.state is state), None)


def _identity_issues(slot_identity: str, ordered: Sequence[Snapshot]) -> list[DataQualityIssue]:
    """One issue per distinct (field, value) that disagrees with the first snapshot."""
    first = ordered[0]
    seen: set[tuple[str, str]] = set()
    issues = []
    for s in ordered[1:]:
        for name in _IDENTITY_FIELDS:
            expected, actual = getattr(first, name), getattr(s, name)
            if actual == expected or (name, actual) in seen:
                continue
            seen.add((name, actual))
            err = IdentityInvariantViolation(
                f"{name} {actual!r} at {s.sampled_at.isoformat()} disagrees with first-observed {expected!r}; "
                "keeping first-observed value",
                slot_identity,
            )
            issues.append(DataQualityIssue.from_error(err))
    return issues


def reconstruct_timeline(
    slot_identity: str,
    snapshots: Sequence[Snapshot],
    config: AnalysisConfig,
    *,
    now: datetime | None = None,
) -> SlotTimeline:
    """
    Build the timeline for one slot. Raises UnparsableTimeLabel when the slot's labels
    cannot be parsed and config.unparsable_policy is "skip"; with "now" the slot start
    falls back to the current instant and the timeline carries the issue.
    """
    if not snapshots:
        raise ValueError(f"slot {slot_identity!r} has no snapshots")
    ordered = tuple(sorted(snapshots, key=lambda s: s.sort_key))
    first = ordered[0]
    issues = _identity_issues(slot_identity, ordered)
    for issue in issues:
        logger.warning("Slot %s: %s", slot_identity, issue.message)

    tz = config.tz
    try:
        if config.slot_year:
            slot_start = parse_slot_start(first.date_label, first.time_label, year=config.slot_year, tz=tz)
        else:
            slot_start = resolve_slot_start(first.date_label, first.time_label, sampled_at=first.sampled_at, tz=tz)
    except UnparsableTimeLabel as e:
        e.slot_identity = slot_identity
        if config.unparsable_policy != UNPARSABLE_POLICY_NOW:
            raise
        slot_start = (now or datetime.now(timezone.utc)).astimezone(tz)
        logger.warning("Slot %s: %s; slot start fell back to now (%s)", slot_identity, e, slot_start.isoformat())
        issues.append(DataQualityIssue(
            kind=type(e).__name__,
            message=f"{e}; slot start fell back to now, hours are unreliable",
            slot_identity=slot_identity,
        ))

    # Wall-clock arithmetic in the slot's zone (same local time N days earlier), then normalized
    available_from = (slot_start - timedelta(hours=config.window_offset_hours)).astimezone(tz)

    return SlotTimeline(
        slot_identity=slot_identity,
        category=first.category,
        date_label=first.date_label,
        time_label=first.time_label,
        instructor=first.instructor,
        snapshots=ordered,
        slot_start=slot_start,
        available_from=available_from,
        fill_event=_first_with_state(ordered, SlotState.FULL),
        low_event=_first_with_state(ordered, SlotState.LOW),
        issues=tuple(issues),
    )


def reconstruct_all(
    groups: Mapping[str, Sequence[Snapshot]],
    config: AnalysisConfig,
    *,
    now: datetime | None = None,
) -> tuple[tuple[SlotTimeline, ...], tuple[DataQualityIssue, ...], dict[str, str]]:
    """
    Reconstruct every slot group. Per-slot failures are isolated: the slot is skipped and
    recorded, the rest continue. Returns (timelines sorted by slot_identity, issues, skipped).
    """
    timelines: list[SlotTimeline] = []
    issues: list[DataQualityIssue] = []
    skipped: dict[str, str] = {}

    def _collect(identity: str, fn) -> None:
        try:
            timeline = fn()
        except UnparsableTimeLabel as e:
            logger.warning("Skipping slot %s: %s", identity, e)
            issues.append(DataQualityIssue.from_error(e, identity))
            skipped[identity] = f"{type(e).__name__}: {e}"
            return
        timelines.append(timeline)
        issues.extend(timeline.issues)

    if config.max_workers <= 1 or len(groups) <= 1:
        for identity, group in groups.items():
            _collect(identity, lambda g=group, i=identity: reconstruct_timeline(i, g, config, now=now))
    else:
        with ThreadPoolExecutor(max_workers=config.max_workers, thread_name_prefix="slot_timeline") as executor:
            futures = {
                executor.submit(reconstruct_timeline, identity, group, config, now=now): identity
                for identity, group in groups.items()
            }
            # Collected on this thread only, so the lists need no lock
            for future in as_completed(futures):
                _collect(futures[future], future.result)

    timelines.sort(key=lambda t: t.slot_identity)
    issues.sort(key=lambda i: (i.slot_identity or "", i.kind, i.message))
    return tuple(timelines), tuple(issues), dict(sorted(skipped.items()))
