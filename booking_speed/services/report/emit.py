"""
Write the analysis artifacts: JSON (full record), CSV (ranking), HTML (human report).

Every artifact is rendered in memory before anything touches disk, and each file is written
to a temp file in the target dir then os.replace'd, so a failed or abandoned run never leaves
a partial artifact behind.
"""
import logging
import os
import tempfile
from pathlib import Path

from booking_speed.core.analysis_config import AnalysisConfig
from booking_speed.core.constants import ANALYSIS_JSON_FILENAME, RANKING_CSV_FILENAME, REPORT_HTML_FILENAME
from booking_speed.services.analysis.types import AnalysisResult
from booking_speed.services.report.csv_report import render_ranking_csv
from booking_speed.services.report.html_report import render_html_report
from booking_speed.services.report.json_report import render_json_report

logger = logging.getLogger(__name__)


def write_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def emit_artifacts(
    result: AnalysisResult,
    output_dir: str | Path,
    config: AnalysisConfig | None = None,
) -> dict[str, Path]:
    """Render and write all artifacts. Returns {"json": path, "csv": path, "html": path}."""
    out = Path(output_dir)
    rendered = {
        "json": (out / ANALYSIS_JSON_FILENAME, render_json_report(result, config)),
        "csv": (out / RANKING_CSV_FILENAME, render_ranking_csv(result.ranking)),
        "html": (out / REPORT_HTML_FILENAME, render_html_report(result)),
    }
    for path, content in rendered.values():
        write_atomic(path, content)
    logger.info(
        "emit_artifacts: wrote %s (%s slots, %s ranked)",
        ", ".join(str(p) for p, _ in rendered.values()),
        len(result.timelines),
        len(result.ranking),
    )
    return {k: p for k, (p, _) in rendered.items()}
