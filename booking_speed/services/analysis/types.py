"""Value types for the booking-speed analysis. All immutable; built once and passed along the pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from booking_speed.core.errors import DataQualityError, UnknownStateLabel

SECONDS_PER_HOUR = 3600.0


class SlotState(str, Enum):
    """Closed set of occupancy labels recorded by the acquisition job."""

    FULL = "FULL"          # 0 spaces remaining
    LOW = "LOW"            # 1-5 spaces remaining
    AVAILABLE = "AVAILABLE"

    @classmethod
    def parse(cls, label: str | None, slot_identity: str | None = None) -> "SlotState":
        """Validate a stored label. Unrecognized labels are a data-quality error, never a default."""
        key = (label or "").strip().upper()
        try:
            return cls(key)
        except ValueError:
            raise UnknownStateLabel(f"unknown occupancy label {label!r}", slot_identity) from None


@dataclass(frozen=True)
class Snapshot:
    """One observation of one slot at one sampling instant. sampled_at is timezone-aware UTC."""
    slot_identity: str
    category: str
    state: SlotState
    date_label: str
    time_label: str
    sampled_at: datetime
    sequence_index: int = 0
    instructor: str | None = None

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return (self.sampled_at, self.sequence_index)


@dataclass(frozen=True)
class DataQualityIssue:
    """A recorded local problem: which kind, what happened, and which slot (if any)."""
    kind: str
    message: str
    slot_identity: str | None = None

    @classmethod
    def from_error(cls, exc: DataQualityError, slot_identity: str | None = None) -> "DataQualityIssue":
        return cls(
            kind=type(exc).__name__,
            message=str(exc),
            slot_identity=slot_identity if slot_identity is not None else exc.slot_identity,
        )


@dataclass(frozen=True)
class SlotTimeline:
    """
    Chronological view of one slot. hours_to_full / hours_to_low are measured from
    available_from (not from the first snapshot) and are None when the state was never seen.
    """
    slot_identity: str
    category: str
    date_label: str
    time_label: str
    instructor: str | None
    snapshots: tuple[Snapshot, ...]
    slot_start: datetime
    available_from: datetime
    fill_event: Snapshot | None
    low_event: Snapshot | None
    issues: tuple[DataQualityIssue, ...] = ()

    @property
    def first_record(self) -> Snapshot:
        return self.snapshots[0]

    @property
    def last_record(self) -> Snapshot:
        return self.snapshots[-1]

    @property
    def ever_filled(self) -> bool:
        return self.fill_event is not None

    @property
    def hours_to_full(self) -> float | None:
        return self._hours_since_open(self.fill_event)

    @property
    def hours_to_low(self) -> float | None:
        return self._hours_since_open(self.low_event)

    @property
    def current_state(self) -> SlotState:
        return self.last_record.state

    @property
    def first_seen_state(self) -> SlotState:
        return self.first_record.state

    @property
    def last_seen_state(self) -> SlotState:
        return self.last_record.state

    @property
    def snapshot_count(self) -> int:
        return len(self.snapshots)

    @property
    def filled_at_first_observation(self) -> bool:
        """FULL already at the first sample: true fill instant is only known to be no later than this."""
        return self.first_record.state is SlotState.FULL

    @property
    def warnings(self) -> tuple[str, ...]:
        return tuple(f"{i.kind}: {i.message}" for i in self.issues)

    def _hours_since_open(self, event: Snapshot | None) -> float | None:
        if event is None:
            return None
        # Compare UTC instants; same-tzinfo subtraction would ignore DST offsets
        delta = event.sampled_at.astimezone(timezone.utc) - self.available_from.astimezone(timezone.utc)
        return delta.total_seconds() / SECONDS_PER_HOUR


@dataclass(frozen=True)
class RankedSlot:
    rank: int
    timeline: SlotTimeline


@dataclass(frozen=True)
class AggregateBucket:
    """Timelines grouped by one dimension (category or clock-time label)."""
    label: str
    total: int
    filled: int
    fill_rate: float | None
    avg_hours_to_full: float | None


@dataclass(frozen=True)
class AnalysisSummary:
    total_slots: int
    filled_count: int
    filled_pct: float | None
    still_available_count: int
    mean_hours_to_full: float | None
    min_hours_to_full: float | None
    max_hours_to_full: float | None
    fastest_slot: str | None
    slowest_slot: str | None


@dataclass(frozen=True)
class CoverageReport:
    """Advisory data-coverage diagnostics. Never gates the rest of the pipeline."""
    sampling_days: Mapping[str, bool]
    slot_days: Mapping[str, bool]
    snapshot_count: int
    first_sampled_at: datetime | None
    last_sampled_at: datetime | None
    span_hours: float | None
    interval_hours: float
    expected_batches: int
    observed_batches: int
    batch_counts: tuple[tuple[str, int], ...]
    sample_dates: tuple[str, ...]

    @property
    def missing_sampling_days(self) -> list[str]:
        return [d for d, covered in self.sampling_days.items() if not covered]

    @property
    def missing_slot_days(self) -> list[str]:
        return [d for d, covered in self.slot_days.items() if not covered]

    @property
    def sampling_complete(self) -> bool:
        return not self.missing_sampling_days

    @property
    def slot_complete(self) -> bool:
        return not self.missing_slot_days

    @property
    def missing_batches(self) -> int:
        return max(self.expected_batches - self.observed_batches, 0)

    @property
    def batch_shortfall(self) -> bool:
        return self.observed_batches < self.expected_batches


@dataclass(frozen=True)
class AnalysisResult:
    generated_at: datetime
    timelines: tuple[SlotTimeline, ...]
    ranking: tuple[RankedSlot, ...]
    categories: tuple[AggregateBucket, ...]
    times_of_day: tuple[AggregateBucket, ...]
    summary: AnalysisSummary
    coverage: CoverageReport
    issues: tuple[DataQualityIssue, ...] = ()
    skipped: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
