"""HTML report rendered with Jinja2 from booking_speed/templates."""
from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from booking_speed.core.constants import FAST_FILL_HOURS, HTML_TOP_RANKED, MEDIUM_FILL_HOURS, UNDEFINED_TEXT
from booking_speed.services.analysis.types import AnalysisResult
from booking_speed.services.report.serializers import result_to_dict

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"
REPORT_TEMPLATE = "booking_speed_report.html.j2"


def speed_class(hours: float | None) -> str:
    if hours is None:
        return ""
    if hours < FAST_FILL_HOURS:
        return "fast"
    if hours < MEDIUM_FILL_HOURS:
        return "medium"
    return "slow"


def _hours(value: float | None) -> str:
    return f"{value:.1f}h" if value is not None else UNDEFINED_TEXT


def _pct(value: float | None, digits: int = 1) -> str:
    return f"{value:.{digits}f}%" if value is not None else UNDEFINED_TEXT


def _squash(value: str | None) -> str:
    return " ".join((value or "").split())


def _environment(templates_path: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["hours"] = _hours
    env.filters["pct"] = _pct
    env.filters["squash"] = _squash
    env.filters["speed_class"] = speed_class
    return env


def render_html_report(result: AnalysisResult, *, top_n: int = HTML_TOP_RANKED) -> str:
    data = result_to_dict(result)
    ranked_ids = {r["slot_identity"] for r in data["ranking"]}
    by_id = {t["slot_identity"]: t for t in data["timelines"]}
    template = _environment().get_template(REPORT_TEMPLATE)
    return template.render(
        generated_at=data["generated_at"],
        summary=data["summary"],
        coverage=data["coverage"],
        ranking=data["ranking"],
        categories=data["categories"],
        times_of_day=data["times_of_day"],
        timelines=data["timelines"],
        filled=[by_id[r["slot_identity"]] for r in data["ranking"]],
        never_filled=[t for t in data["timelines"] if t["slot_identity"] not in ranked_ids],
        issues=data["issues"],
        skipped=data["skipped"],
        top_n=top_n,
    )
