"""Partition snapshots into per-slot groups keyed by slot identity. No timestamps are interpreted here."""
from collections import defaultdict
from types import MappingProxyType
from typing import Iterable, Mapping

from booking_speed.services.analysis.types import Snapshot


def group_by_slot(snapshots: Iterable[Snapshot]) -> Mapping[str, tuple[Snapshot, ...]]:
    """
    slot_identity -> snapshots sharing it, in input order. Every snapshot lands in exactly one group.
    Returned mapping and groups are read-only; build once, never mutate.
    """
    groups: dict[str, list[Snapshot]] = defaultdict(list)
    for s in snapshots:
        groups[s.slot_identity].append(s)
    return MappingProxyType({k: tuple(v) for k, v in groups.items()})
