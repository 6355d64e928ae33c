from dataclasses import replace
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from booking_speed.core.constants import WEEKDAYS
from booking_speed.services.analysis.coverage import audit_coverage, expected_batch_count

SYDNEY = ZoneInfo("Australia/Sydney")

# Mon 27 Oct .. Sun 2 Nov 2025
WEEK_LABELS = [
    "MondayMon 27 Oct",
    "TuesdayTue 28 Oct",
    "WednesdayWed 29 Oct",
    "ThursdayThu 30 Oct",
    "FridayFri 31 Oct",
    "SaturdaySat 1 Nov",
    "SundaySun 2 Nov",
]


@pytest.fixture
def week(make_snapshot):
    """One sample per day at local noon, each for a class on the same weekday."""
    out = []
    for i, label in enumerate(WEEK_LABELS):
        at = datetime(2025, 10, 27, 12, 0, tzinfo=SYDNEY) + timedelta(days=i)
        out.append(make_snapshot("AVAILABLE", at, identity=f"{label}_6:00am_Yoga", date_label=label))
    return out


def test_full_week_is_complete(week, config):
    report = audit_coverage(week, config)
    assert list(report.sampling_days) == list(WEEKDAYS)
    assert report.sampling_complete
    assert report.slot_complete
    assert report.missing_sampling_days == []
    assert report.sample_dates[0] == "2025-10-27"
    assert len(report.sample_dates) == 7


@pytest.mark.parametrize("drop", range(7))
def test_dropping_one_day_reports_exactly_that_day(week, config, drop):
    report = audit_coverage(week[:drop] + week[drop + 1:], config)
    assert report.missing_sampling_days == [WEEKDAYS[drop]]
    assert report.missing_slot_days == [WEEKDAYS[drop]]


def test_axes_are_independent(make_snapshot, config):
    # Sampled on a Monday, for classes on Tuesday
    at = datetime(2025, 10, 27, 9, 0, tzinfo=SYDNEY)
    snaps = [make_snapshot("LOW", at, date_label="TuesdayTue 28 Oct")]
    report = audit_coverage(snaps, config)
    assert [d for d, ok in report.sampling_days.items() if ok] == ["Monday"]
    assert [d for d, ok in report.slot_days.items() if ok] == ["Tuesday"]


def test_sampling_weekday_uses_gym_zone(make_snapshot, config):
    # 2025-10-26 14:00 UTC is Monday 01:00 in Sydney
    at = datetime(2025, 10, 26, 14, 0, tzinfo=ZoneInfo("UTC"))
    report = audit_coverage([make_snapshot("AVAILABLE", at)], config)
    assert report.sampling_days["Monday"]
    assert not report.sampling_days["Sunday"]


@pytest.mark.parametrize(
    "span, interval, expected",
    [(None, 2.0, 0), (0.0, 2.0, 1), (4.0, 2.0, 3), (5.9, 2.0, 3), (6.0, 2.0, 4), (48.0, 2.0, 25), (3.0, 1.5, 3)],
)
def test_expected_batch_count(span, interval, expected):
    assert expected_batch_count(span, interval) == expected


def test_batches_counted_per_scrape_run(make_snapshot, config):
    start = datetime(2025, 10, 27, 8, 0, tzinfo=SYDNEY)
    snaps = []
    for run in range(3):
        for n in range(4):
            # one run spans a few seconds; all in the same minute
            snaps.append(make_snapshot("AVAILABLE", start + timedelta(hours=2 * run, seconds=n), seq=n,
                                       identity=f"slot{n}"))
    report = audit_coverage(snaps, config)
    assert report.expected_batches == 3
    assert report.observed_batches == 3
    assert not report.batch_shortfall
    assert report.batch_counts == (("2025-10-27 08:00", 4), ("2025-10-27 10:00", 4), ("2025-10-27 12:00", 4))

    gappy = [s for s in snaps if s.sampled_at.astimezone(SYDNEY).hour != 10]
    report = audit_coverage(gappy, config)
    assert report.observed_batches == 2
    assert report.batch_shortfall
    assert report.missing_batches == 1


def test_interval_is_configurable(make_snapshot, config):
    start = datetime(2025, 10, 27, 8, 0, tzinfo=SYDNEY)
    snaps = [make_snapshot("AVAILABLE", start + timedelta(hours=h)) for h in (0, 2, 4)]
    report = audit_coverage(snaps, replace(config, sampling_interval_hours=1.0))
    assert report.expected_batches == 5
    assert report.missing_batches == 2


def test_empty_input(config):
    report = audit_coverage([], config)
    assert report.snapshot_count == 0
    assert report.span_hours is None
    assert report.expected_batches == 0
    assert report.observed_batches == 0
    assert not report.batch_shortfall
    assert len(report.missing_sampling_days) == 7


def test_scrape_run_crossing_a_minute_is_one_batch(make_snapshot, config):
    first_run = datetime(2025, 10, 27, 8, 0, 58, tzinfo=SYDNEY)
    second_run = datetime(2025, 10, 27, 10, 0, 5, tzinfo=SYDNEY)
    snaps = [
        make_snapshot("AVAILABLE", first_run, identity="a"),
        make_snapshot("AVAILABLE", first_run + timedelta(seconds=5), identity="b", seq=1),
        make_snapshot("LOW", first_run + timedelta(seconds=40), identity="c", seq=2),
        make_snapshot("AVAILABLE", second_run, identity="a"),
        make_snapshot("FULL", second_run + timedelta(seconds=3), identity="b", seq=1),
    ]
    report = audit_coverage(snaps, config)
    assert report.observed_batches == 2
    assert report.expected_batches == 2
    assert not report.batch_shortfall
    assert report.batch_counts == (("2025-10-27 08:00", 3), ("2025-10-27 10:00", 2))


def test_runs_further_apart_than_the_gap_stay_separate(make_snapshot, config):
    # 2h interval -> samples more than 12 minutes apart start a new batch
    start = datetime(2025, 10, 27, 8, 0, tzinfo=SYDNEY)
    snaps = [make_snapshot("AVAILABLE", start + timedelta(minutes=m), seq=m) for m in (0, 11, 30)]
    report = audit_coverage(snaps, config)
    assert [n for _, n in report.batch_counts] == [2, 1]
