"""
Tabular export of the fastest-fill ranking (pandas).

Columns (fixed order, see RANKING_CSV_COLUMNS): Rank, Class Name, Time, Day/Date, Instructor,
Hours to Fill, Hours to Low, Current Status. Hours to one decimal; "N/A" when undefined.
Whitespace runs in text fields collapse to one space; fields with commas/quotes are quoted.
"""
import re
from typing import Sequence

import pandas as pd

from booking_speed.core.constants import RANKING_CSV_COLUMNS, UNDEFINED_CSV
from booking_speed.services.analysis.types import RankedSlot

_WS_RE = re.compile(r"\s+")


def normalize_text(value: str | None) -> str:
    return _WS_RE.sub(" ", value or "").strip()


def format_hours(value: float | None, undefined: str = UNDEFINED_CSV) -> str:
    return f"{value:.1f}" if value is not None else undefined


def ranking_frame(ranking: Sequence[RankedSlot]) -> pd.DataFrame:
    rows = [
        (
            r.rank,
            normalize_text(r.timeline.category),
            normalize_text(r.timeline.time_label),
            normalize_text(r.timeline.date_label),
            normalize_text(r.timeline.instructor),
            format_hours(r.timeline.hours_to_full),
            format_hours(r.timeline.hours_to_low),
            r.timeline.current_state.value,
        )
        for r in ranking
    ]
    return pd.DataFrame(rows, columns=list(RANKING_CSV_COLUMNS))


def render_ranking_csv(ranking: Sequence[RankedSlot]) -> str:
    return ranking_frame(ranking).to_csv(index=False, lineterminator="\n")
