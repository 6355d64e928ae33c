from datetime import timedelta

import pytest

from booking_speed.services.analysis.grouping import group_by_slot


@pytest.fixture
def mixed(make_snapshot, yoga_opens):
    out = []
    for i in range(9):
        identity = ["A", "B", "C"][i % 3]
        out.append(make_snapshot("AVAILABLE", yoga_opens + timedelta(hours=i), identity=identity, seq=i))
    return out


def test_groups_partition_the_input(mixed):
    groups = group_by_slot(mixed)
    assert set(groups) == {"A", "B", "C"}
    regrouped = [s for g in groups.values() for s in g]
    assert sorted(regrouped, key=lambda s: s.sequence_index) == mixed
    for identity, group in groups.items():
        assert all(s.slot_identity == identity for s in group)


def test_group_keeps_input_order(make_snapshot, yoga_opens):
    late = make_snapshot("FULL", yoga_opens + timedelta(hours=5))
    early = make_snapshot("AVAILABLE", yoga_opens)
    groups = group_by_slot([late, early])
    assert groups[late.slot_identity] == (late, early)


def test_groups_are_read_only(mixed):
    groups = group_by_slot(mixed)
    with pytest.raises(TypeError):
        groups["D"] = ()
    assert isinstance(groups["A"], tuple)


def test_empty_input():
    assert dict(group_by_slot([])) == {}
