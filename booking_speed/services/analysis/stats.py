"""
Rate and mean helpers. An empty denominator raises DivisionUndefined; the *_or_none variants
turn that into None so aggregates report "undefined" instead of NaN or a silent zero.
"""
import statistics
from typing import Iterable

from booking_speed.core.errors import DivisionUndefined


def percentage(part: int, whole: int) -> float:
    if whole == 0:
        raise DivisionUndefined(f"percentage {part}/{whole}: empty denominator")
    return part / whole * 100.0


def mean(values: Iterable[float]) -> float:
    vals = list(values)
    if not vals:
        raise DivisionUndefined("mean of an empty set")
    return float(statistics.mean(vals))


def percentage_or_none(part: int, whole: int) -> float | None:
    try:
        return percentage(part, whole)
    except DivisionUndefined:
        return None


def mean_or_none(values: Iterable[float]) -> float | None:
    try:
        return mean(values)
    except DivisionUndefined:
        return None
