"""Structured JSON artifact: every timeline field and metric at full precision, plus the aggregate views."""
import json
from pathlib import Path
from typing import Any

from booking_speed.core.analysis_config import AnalysisConfig
from booking_speed.services.analysis.types import AnalysisResult
from booking_speed.services.report.serializers import result_to_dict


def render_json_report(result: AnalysisResult, config: AnalysisConfig | None = None) -> str:
    # allow_nan=False: undefined metrics must already be None, never NaN
    return json.dumps(result_to_dict(result, config), indent=2, ensure_ascii=False, allow_nan=False)


def read_structured_report(path: str | Path) -> dict[str, Any]:
    return json.loads(Path(path).read_text(encoding="utf-8"))
