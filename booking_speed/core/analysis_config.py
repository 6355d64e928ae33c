"""
Analysis tuning config. .env is the source of truth; these defaults apply only when
the env var is unset. All values read at import time.

Env vars: WINDOW_OFFSET_HOURS, SAMPLING_INTERVAL_HOURS, GYM_TIMEZONE, SLOT_YEAR,
UNPARSABLE_TIME_POLICY (skip | now), ANALYSIS_MAX_WORKERS, ANALYSIS_REFRESH_MINUTES.

The analysis core never reads the environment itself; callers pass an AnalysisConfig
(get_analysis_config() for the env-driven one, or build one directly in tests/scripts).
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

# Load repo-root .env so scripts/tests/workers that import this module see the same values as the app
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(_env_path, override=False)  # no-op if file missing

_log = logging.getLogger(__name__)

UNPARSABLE_POLICY_SKIP = "skip"
UNPARSABLE_POLICY_NOW = "now"
UNPARSABLE_POLICIES = (UNPARSABLE_POLICY_SKIP, UNPARSABLE_POLICY_NOW)

# Shared by the env readers below and AnalysisConfig()
DEFAULT_WINDOW_OFFSET_HOURS = 7 * 24.0
DEFAULT_SAMPLING_INTERVAL_HOURS = 2.0
DEFAULT_TIMEZONE = "Australia/Sydney"
DEFAULT_MAX_WORKERS = 4


def _int(key: str, default: int | None, min_val: int | None = None, max_val: int | None = None) -> int | None:
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        v = default
    else:
        try:
            v = int(raw.strip())
        except ValueError:
            _log.warning("Ignoring non-integer %s=%r; using %s", key, raw, default)
            v = default
    if v is None:
        return None
    if min_val is not None and v < min_val:
        v = min_val
    if max_val is not None and v > max_val:
        v = max_val
    return v


def _float(key: str, default: float, min_val: float | None = None) -> float:
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        v = float(raw.strip())
    except ValueError:
        _log.warning("Ignoring non-numeric %s=%r; using %s", key, raw, default)
        return default
    if min_val is not None and v < min_val:
        v = min_val
    return v


def _str(key: str, default: str, allowed: tuple[str, ...] | None = None) -> str:
    v = (os.environ.get(key) or "").strip() or default
    if allowed is not None and v not in allowed:
        _log.warning("Ignoring %s=%r (allowed: %s); using %s", key, v, ", ".join(allowed), default)
        return default
    return v


# -----------------------------------------------------------------------------
# Availability window and sampling (set in .env; defaults below only when unset)
# -----------------------------------------------------------------------------
WINDOW_OFFSET_HOURS = _float("WINDOW_OFFSET_HOURS", DEFAULT_WINDOW_OFFSET_HOURS, min_val=0.0)
SAMPLING_INTERVAL_HOURS = _float("SAMPLING_INTERVAL_HOURS", DEFAULT_SAMPLING_INTERVAL_HOURS, min_val=0.01)
GYM_TIMEZONE = _str("GYM_TIMEZONE", DEFAULT_TIMEZONE)
SLOT_YEAR = _int("SLOT_YEAR", None, min_val=1970, max_val=9999)
UNPARSABLE_TIME_POLICY = _str("UNPARSABLE_TIME_POLICY", UNPARSABLE_POLICY_SKIP, allowed=UNPARSABLE_POLICIES)

# -----------------------------------------------------------------------------
# Execution
# -----------------------------------------------------------------------------
ANALYSIS_MAX_WORKERS = _int("ANALYSIS_MAX_WORKERS", DEFAULT_MAX_WORKERS, min_val=1, max_val=32)
ANALYSIS_REFRESH_MINUTES = _int("ANALYSIS_REFRESH_MINUTES", 120, min_val=1, max_val=24 * 60)

_log.info(
    "Analysis config (from env): window_offset_hours=%s sampling_interval_hours=%s timezone=%s "
    "slot_year=%s unparsable_policy=%s max_workers=%s refresh_minutes=%s",
    WINDOW_OFFSET_HOURS,
    SAMPLING_INTERVAL_HOURS,
    GYM_TIMEZONE,
    SLOT_YEAR,
    UNPARSABLE_TIME_POLICY,
    ANALYSIS_MAX_WORKERS,
    ANALYSIS_REFRESH_MINUTES,
)


@dataclass(frozen=True)
class AnalysisConfig:
    """Snapshot of analysis config for passing around (e.g. tests)."""
    window_offset_hours: float = DEFAULT_WINDOW_OFFSET_HOURS
    sampling_interval_hours: float = DEFAULT_SAMPLING_INTERVAL_HOURS
    timezone: str = DEFAULT_TIMEZONE
    slot_year: int | None = None
    unparsable_policy: str = UNPARSABLE_POLICY_SKIP
    max_workers: int = DEFAULT_MAX_WORKERS

    def __post_init__(self):
        if self.window_offset_hours < 0:
            raise ValueError("window_offset_hours must be >= 0")
        if self.sampling_interval_hours <= 0:
            raise ValueError("sampling_interval_hours must be > 0")
        if self.unparsable_policy not in UNPARSABLE_POLICIES:
            raise ValueError(f"unparsable_policy must be one of {UNPARSABLE_POLICIES}")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        ZoneInfo(self.timezone)  # fail fast on unknown zone names

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def to_dict(self) -> dict:
        return {
            "window_offset_hours": self.window_offset_hours,
            "sampling_interval_hours": self.sampling_interval_hours,
            "timezone": self.timezone,
            "slot_year": self.slot_year,
            "unparsable_policy": self.unparsable_policy,
            "max_workers": self.max_workers,
        }


def get_analysis_config() -> AnalysisConfig:
    return AnalysisConfig(
        window_offset_hours=WINDOW_OFFSET_HOURS,
        sampling_interval_hours=SAMPLING_INTERVAL_HOURS,
        timezone=GYM_TIMEZONE,
        slot_year=SLOT_YEAR,
        unparsable_policy=UNPARSABLE_TIME_POLICY,
        max_workers=ANALYSIS_MAX_WORKERS,
    )
