from dataclasses import replace
from datetime import timedelta

import pytest

from booking_speed.core.errors import DivisionUndefined
from booking_speed.services.analysis.aggregate import (
    category_buckets,
    rank_fastest,
    summarize,
    time_of_day_buckets,
)
from booking_speed.services.analysis.stats import mean, mean_or_none, percentage, percentage_or_none
from booking_speed.services.analysis.timeline import reconstruct_timeline


@pytest.fixture
def timeline(config, make_snapshot, opens_at):
    """Build a one-day slot that filled `fill_after` hours after opening (None: never filled)."""
    def _timeline(identity, category="Yoga", time_label="6:00am", fill_after=None,
                  date_label="MondayMon 27 Oct"):
        opens = opens_at(date_label, time_label)
        kw = dict(identity=identity, category=category, time_label=time_label, date_label=date_label)
        snaps = [make_snapshot("AVAILABLE", opens + timedelta(minutes=30), **kw)]
        if fill_after is not None:
            snaps.append(make_snapshot("FULL", opens + timedelta(hours=fill_after), **kw))
        return reconstruct_timeline(identity, snaps, config)
    return _timeline


@pytest.fixture
def mixed(timeline):
    return [
        timeline("d", "Pilates", "12:00pm", fill_after=5.0),
        timeline("a", "Yoga", "6:00am", fill_after=10.0),
        timeline("c", "Yoga", "6:00pm", fill_after=None),
        timeline("b", "Spin", "12:00am", fill_after=5.0),
        timeline("e", "Spin", "6:00am", fill_after=None),
    ]


def test_rank_fastest_orders_by_hours_then_identity(mixed):
    ranking = rank_fastest(mixed)
    assert [(r.rank, r.timeline.slot_identity) for r in ranking] == [(1, "b"), (2, "d"), (3, "a")]
    hours = [r.timeline.hours_to_full for r in ranking]
    assert hours == sorted(hours)


def test_rank_fastest_excludes_never_filled(mixed):
    assert all(r.timeline.ever_filled for r in rank_fastest(mixed))


def test_category_buckets(mixed):
    buckets = category_buckets(mixed)
    assert [b.label for b in buckets] == ["Pilates", "Spin", "Yoga"]
    pilates, spin, yoga = buckets
    assert (pilates.total, pilates.filled, pilates.fill_rate) == (1, 1, 100.0)
    assert (spin.total, spin.filled) == (2, 1)
    assert spin.fill_rate == pytest.approx(50.0)
    assert spin.avg_hours_to_full == pytest.approx(5.0)
    # average is over filled slots only
    assert yoga.avg_hours_to_full == pytest.approx(10.0)


def test_bucket_without_fills_has_undefined_average(timeline):
    (bucket,) = category_buckets([timeline("x", "Boxing"), timeline("y", "Boxing", "7:00am")])
    assert bucket.fill_rate == 0.0
    assert bucket.avg_hours_to_full is None


def test_time_of_day_buckets_are_chronological(mixed):
    labels = [b.label for b in time_of_day_buckets(mixed)]
    assert labels == ["12:00am", "6:00am", "12:00pm", "6:00pm"]


def test_unparsable_time_labels_sort_last(timeline):
    good = timeline("a", time_label="7:00pm")
    odd = replace(timeline("b", time_label="6:00am"), time_label="Evening")
    assert [b.label for b in time_of_day_buckets([odd, good])] == ["7:00pm", "Evening"]


def test_summary(mixed):
    s = summarize(mixed)
    assert s.total_slots == 5
    assert s.filled_count == 3
    assert s.filled_pct == pytest.approx(60.0)
    assert s.still_available_count == 2
    assert s.mean_hours_to_full == pytest.approx(20.0 / 3)
    assert s.min_hours_to_full == pytest.approx(5.0)
    assert s.max_hours_to_full == pytest.approx(10.0)
    assert s.fastest_slot == "b"
    assert s.slowest_slot == "a"


def test_aggregation_is_deterministic(mixed):
    shuffled = list(reversed(mixed))
    assert rank_fastest(mixed) == rank_fastest(shuffled)
    assert category_buckets(mixed) == category_buckets(shuffled)
    assert time_of_day_buckets(mixed) == time_of_day_buckets(shuffled)
    assert summarize(mixed) == summarize(shuffled)


def test_empty_aggregates_are_undefined():
    s = summarize([])
    assert s.total_slots == 0
    assert s.filled_count == 0
    assert s.filled_pct is None
    assert s.mean_hours_to_full is None
    assert s.min_hours_to_full is None
    assert s.fastest_slot is None
    assert rank_fastest([]) == ()
    assert category_buckets([]) == ()


def test_stats_helpers():
    assert percentage(1, 4) == 25.0
    assert mean([1.0, 2.0]) == 1.5
    with pytest.raises(DivisionUndefined):
        percentage(0, 0)
    with pytest.raises(DivisionUndefined):
        mean([])
    assert percentage_or_none(3, 0) is None
    assert mean_or_none([]) is None
