from booking_speed.services.report.console_report import render_console_report
from booking_speed.services.report.csv_report import render_ranking_csv
from booking_speed.services.report.emit import emit_artifacts
from booking_speed.services.report.html_report import render_html_report
from booking_speed.services.report.json_report import read_structured_report, render_json_report

__all__ = [
    "emit_artifacts",
    "read_structured_report",
    "render_console_report",
    "render_html_report",
    "render_json_report",
    "render_ranking_csv",
]
