import pytest

from booking_speed.core.analysis_config import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_SAMPLING_INTERVAL_HOURS,
    DEFAULT_TIMEZONE,
    DEFAULT_WINDOW_OFFSET_HOURS,
    UNPARSABLE_POLICY_SKIP,
    AnalysisConfig,
)


def test_defaults_come_from_shared_constants():
    config = AnalysisConfig()
    assert config.window_offset_hours == DEFAULT_WINDOW_OFFSET_HOURS == 168.0
    assert config.sampling_interval_hours == DEFAULT_SAMPLING_INTERVAL_HOURS
    assert config.timezone == DEFAULT_TIMEZONE
    assert config.max_workers == DEFAULT_MAX_WORKERS
    assert config.slot_year is None
    assert config.unparsable_policy == UNPARSABLE_POLICY_SKIP


@pytest.mark.parametrize(
    "kwargs",
    [
        {"window_offset_hours": -1.0},
        {"sampling_interval_hours": 0.0},
        {"unparsable_policy": "guess"},
        {"max_workers": 0},
    ],
)
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(ValueError):
        AnalysisConfig(**kwargs)
