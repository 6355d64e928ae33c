"""
Centralized constants for reports, scheduler and coverage (Encapsulate What Changes).

Change artifact names, job IDs or column layouts here instead of scattering literals.
Analysis tuning (window offset, sampling interval, timezone) comes from analysis_config.
"""
from booking_speed.core.analysis_config import ANALYSIS_REFRESH_MINUTES

# Scheduler job IDs (must match ids used in main.py add_job)
ANALYSIS_REFRESH_JOB_ID = "analysis_refresh"
ANALYSIS_REFRESH_INTERVAL_MINUTES = ANALYSIS_REFRESH_MINUTES

# Weekday names indexed by datetime.weekday() (Monday == 0); locale independent
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# A sampling batch is a run of samples each within BATCH_GAP_FRACTION * sampling interval of the
# previous one; it is labelled by its first sample in this local format
BATCH_LABEL_FORMAT = "%Y-%m-%d %H:%M"
BATCH_GAP_FRACTION = 0.1

# Artifacts written by the report emitter (relative to the output dir)
ANALYSIS_JSON_FILENAME = "booking-speed-analysis.json"
RANKING_CSV_FILENAME = "fastest-filling-classes.csv"
REPORT_HTML_FILENAME = "booking-speed-report.html"

# Tabular export: column order is part of the contract with spreadsheet tooling
RANKING_CSV_COLUMNS = (
    "Rank",
    "Class Name",
    "Time",
    "Day/Date",
    "Instructor",
    "Hours to Fill",
    "Hours to Low",
    "Current Status",
)
UNDEFINED_CSV = "N/A"
UNDEFINED_TEXT = "n/a"

# Fill-rate bars: one block per BAR_PERCENT_PER_BLOCK percentage points (100% -> 20 blocks)
BAR_CHAR = "#"
BAR_PERCENT_PER_BLOCK = 5

# HTML report: rows in the "fastest" table and speed classes (hours)
HTML_TOP_RANKED = 20
FAST_FILL_HOURS = 24
MEDIUM_FILL_HOURS = 72

# API caps so responses stay bounded
API_FASTEST_DEFAULT_LIMIT = 50
API_FASTEST_MAX_LIMIT = 1000
API_LATEST_SNAPSHOTS_LIMIT = 10
API_LATEST_SNAPSHOTS_MAX_LIMIT = 500
