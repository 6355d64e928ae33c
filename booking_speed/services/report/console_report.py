"""Human-readable text report: coverage, fastest-filling ranking, summary, fill rate by class type and time."""
from __future__ import annotations

import io

from booking_speed.core.constants import BAR_CHAR, BAR_PERCENT_PER_BLOCK, UNDEFINED_TEXT
from booking_speed.services.analysis.types import AggregateBucket, AnalysisResult, CoverageReport

RULE = "=" * 63


def fill_bar(fill_rate: float | None) -> str:
    """One block per BAR_PERCENT_PER_BLOCK points; empty for undefined."""
    if fill_rate is None:
        return ""
    return BAR_CHAR * int(fill_rate / BAR_PERCENT_PER_BLOCK + 0.5)


def _hours(value: float | None) -> str:
    return f"{value:.1f} hours" if value is not None else UNDEFINED_TEXT


def _pct(value: float | None, digits: int = 1) -> str:
    return f"{value:.{digits}f}%" if value is not None else UNDEFINED_TEXT


def _heading(out: io.StringIO, title: str) -> None:
    print(RULE, file=out)
    print(title, file=out)
    print(RULE, file=out)
    print(file=out)


def render_coverage(coverage: CoverageReport, out: io.StringIO) -> None:
    _heading(out, "DATA COVERAGE CHECK")
    print(f"{'Day':<12}{'Sampled':<10}Classes", file=out)
    for day in coverage.sampling_days:
        sampled = "yes" if coverage.sampling_days[day] else "MISSING"
        classes = "yes" if coverage.slot_days[day] else "MISSING"
        print(f"{day:<12}{sampled:<10}{classes}", file=out)
    print(file=out)
    if coverage.missing_sampling_days:
        print(
            f"WARNING: no scrapes on {len(coverage.missing_sampling_days)} day(s): "
            f"{', '.join(coverage.missing_sampling_days)}",
            file=out,
        )
    else:
        print("Scrapes cover all 7 days of the week.", file=out)
    if coverage.missing_slot_days:
        print(f"WARNING: no classes observed for: {', '.join(coverage.missing_slot_days)}", file=out)
    print(file=out)

    if coverage.first_sampled_at is None:
        print("No snapshots collected yet.", file=out)
        print(file=out)
        return
    span = coverage.span_hours or 0.0
    print(f"First scrape: {coverage.first_sampled_at.isoformat()}", file=out)
    print(f"Last scrape:  {coverage.last_sampled_at.isoformat()}", file=out)
    print(f"Duration: {span:.1f} hours ({span / 24:.1f} days) over {len(coverage.sample_dates)} date(s)", file=out)
    print(f"Expected scrapes (every {coverage.interval_hours:g}h): ~{coverage.expected_batches}", file=out)
    print(f"Actual scrapes: {coverage.observed_batches}", file=out)
    if coverage.batch_shortfall:
        print(f"WARNING: missing ~{coverage.missing_batches} scrapes", file=out)
    else:
        print("Scraping frequency looks good.", file=out)
    print(file=out)


def render_scrape_batches(coverage: CoverageReport, out: io.StringIO) -> None:
    _heading(out, "SCRAPES BY TIME")
    for label, count in coverage.batch_counts:
        print(f"{label:<20} - {count} classes scraped", file=out)
    print(file=out)


def _render_buckets(title: str, buckets: tuple[AggregateBucket, ...], out: io.StringIO, with_avg: bool) -> None:
    _heading(out, title)
    if not buckets:
        print("(no classes)", file=out)
        print(file=out)
        return
    width = max(len(b.label) for b in buckets)
    for b in buckets:
        line = f"{b.label:<{width}}  {b.filled}/{b.total}  {fill_bar(b.fill_rate):<20}  {_pct(b.fill_rate, 0)}"
        if with_avg and b.avg_hours_to_full is not None:
            line += f"  avg fill {_hours(b.avg_hours_to_full)}"
        print(line, file=out)
    print(file=out)


def render_console_report(result: AnalysisResult, *, include_batches: bool = False) -> str:
    out = io.StringIO()
    s = result.summary

    render_coverage(result.coverage, out)
    if include_batches:
        render_scrape_batches(result.coverage, out)

    _heading(out, "FASTEST FILLING CLASSES (ranked by speed)")
    if not result.ranking:
        print("No class has been observed FULL yet.", file=out)
        print(file=out)
    for r in result.ranking:
        t = r.timeline
        print(f"{r.rank}. {t.category} - {t.time_label}", file=out)
        print(f"   Date: {' '.join(t.date_label.split())}", file=out)
        print(f"   Instructor: {t.instructor or UNDEFINED_TEXT}", file=out)
        filled = f"   Filled in: {_hours(t.hours_to_full)}"
        if t.filled_at_first_observation:
            filled += " (already FULL when first seen)"
        print(filled, file=out)
        if t.hours_to_low is not None:
            print(f"   Got to LOW in: {_hours(t.hours_to_low)}", file=out)
        print(f"   Status now: {t.current_state.value}", file=out)
        print(file=out)

    _heading(out, "SUMMARY STATISTICS")
    print(f"Total classes analyzed: {s.total_slots}", file=out)
    print(f"Classes that filled up: {s.filled_count} ({_pct(s.filled_pct)})", file=out)
    print(f"Classes still available: {s.still_available_count}", file=out)
    print(f"Average time to fill: {_hours(s.mean_hours_to_full)}", file=out)
    if s.fastest_slot is not None:
        print(f"Fastest to fill: {_hours(s.min_hours_to_full)} ({s.fastest_slot})", file=out)
        print(f"Slowest to fill: {_hours(s.max_hours_to_full)} ({s.slowest_slot})", file=out)
    print(file=out)

    _render_buckets("FILL RATE BY CLASS TYPE", result.categories, out, with_avg=True)
    _render_buckets("FILL RATE BY TIME OF DAY", result.times_of_day, out, with_avg=False)

    if result.issues:
        _heading(out, f"DATA QUALITY ({len(result.issues)} issue(s), {len(result.skipped)} class(es) skipped)")
        for i in result.issues:
            where = f"[{i.slot_identity}] " if i.slot_identity else ""
            print(f"- {i.kind}: {where}{i.message}", file=out)
        print(file=out)

    return out.getvalue()
