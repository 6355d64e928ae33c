"""
Slot label parsing: "MondayMon 27 Oct" + "6:00am" -> absolute instant.

Both the full parser and the clock-only parser go through _clock_parts so am/pm
normalization (12am -> 0, 12pm -> 12, other pm hours + 12) is identical everywhere.
"""
import re
from datetime import datetime, timezone, tzinfo

from booking_speed.core.constants import WEEKDAYS
from booking_speed.core.errors import UnparsableTimeLabel

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_DAY_RE = re.compile(r"\d+")
_MONTH_RE = re.compile(r"(" + "|".join(MONTHS) + r")", re.IGNORECASE)
_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(am|pm)", re.IGNORECASE)
_WEEKDAY_RE = re.compile(r"(" + "|".join(WEEKDAYS) + r")", re.IGNORECASE)


def _clock_parts(time_label: str | None) -> tuple[int, int]:
    """(hour 0-23, minute) from an "h:mm(am|pm)" label."""
    m = _CLOCK_RE.search(time_label or "")
    if not m:
        raise UnparsableTimeLabel(f"no h:mm(am|pm) in clock label {time_label!r}")
    hour, minute, meridiem = int(m.group(1)), int(m.group(2)), m.group(3).lower()
    if hour < 1 or hour > 12 or minute > 59:
        raise UnparsableTimeLabel(f"clock label out of range: {time_label!r}")
    if meridiem == "pm" and hour != 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return hour, minute


def clock_minutes(time_label: str | None) -> int:
    """Minutes since midnight for a clock label. "12:00am" -> 0, "12:00pm" -> 720."""
    hour, minute = _clock_parts(time_label)
    return hour * 60 + minute


def _day_and_month(date_label: str | None) -> tuple[int, int]:
    label = date_label or ""
    day_m = _DAY_RE.search(label)
    month_m = _MONTH_RE.search(label)
    if not day_m or not month_m:
        raise UnparsableTimeLabel(f"no day/month in date label {date_label!r}")
    month = MONTHS.index(month_m.group(1).title()) + 1
    return int(day_m.group(0)), month


def parse_slot_start(date_label: str | None, time_label: str | None, *, year: int, tz: tzinfo) -> datetime:
    """
    Slot start as an aware datetime in the slot's local zone.
    Raises UnparsableTimeLabel when the day, month or clock token is missing or invalid.
    """
    day, month = _day_and_month(date_label)
    hour, minute = _clock_parts(time_label)
    try:
        return datetime(year, month, day, hour, minute, tzinfo=tz)
    except ValueError as e:
        raise UnparsableTimeLabel(f"invalid date {date_label!r} in {year}: {e}") from e


def resolve_slot_start(date_label: str | None, time_label: str | None, *, sampled_at: datetime, tz: tzinfo) -> datetime:
    """
    Slot start when the label carries no year. Candidates are the sample's local year and the
    years either side; a weekday named in the label must match, and the candidate nearest the
    sample wins ("ThursdayThu 1 Jan" sampled on 25 Dec 2025 -> 1 Jan 2026).
    Raises UnparsableTimeLabel when no candidate year matches the weekday.
    """
    day, month = _day_and_month(date_label)
    hour, minute = _clock_parts(time_label)
    local = sampled_at.astimezone(tz)
    weekday = weekday_from_label(date_label)
    candidates = []
    for year in (local.year - 1, local.year, local.year + 1):
        try:
            start = datetime(year, month, day, hour, minute, tzinfo=tz)
        except ValueError:  # 29 Feb outside leap years
            continue
        if weekday is None or WEEKDAYS[start.weekday()] == weekday:
            candidates.append(start)
    if not candidates:
        raise UnparsableTimeLabel(
            f"no year near {local.date().isoformat()} puts {date_label!r} on a {weekday or 'valid date'}"
        )
    instant = sampled_at.astimezone(timezone.utc)
    return min(candidates, key=lambda s: abs((s.astimezone(timezone.utc) - instant).total_seconds()))


def weekday_from_label(date_label: str | None) -> str | None:
    """Full weekday name embedded in a slot date label ("MondayMon 27 Oct" -> "Monday"), or None."""
    m = _WEEKDAY_RE.search(date_label or "")
    return m.group(1).title() if m else None


def as_utc(value: datetime, assume_tz: tzinfo = timezone.utc) -> datetime:
    """Normalize to aware UTC. Naive values are taken to be wall-clock time in assume_tz."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=assume_tz)
    return value.astimezone(timezone.utc)
