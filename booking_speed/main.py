"""
FastAPI app entrypoint.

Booking-speed analysis over stored class snapshots; the scheduler refreshes the report artifacts.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env from the repo root before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from booking_speed.api.routes import analysis
from booking_speed.config import settings
from booking_speed.core.constants import ANALYSIS_REFRESH_INTERVAL_MINUTES, ANALYSIS_REFRESH_JOB_ID
from booking_speed.scheduler.analysis_job import get_analysis_job_heartbeat, run_analysis_job

logger = logging.getLogger(__name__)
logging.getLogger("booking_speed").setLevel(settings.log_level)

_scheduler = BackgroundScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _scheduler.add_job(
        run_analysis_job,
        "interval",
        minutes=ANALYSIS_REFRESH_INTERVAL_MINUTES,
        id=ANALYSIS_REFRESH_JOB_ID,
        replace_existing=True,
    )
    _scheduler.start()
    app.state.scheduler = _scheduler
    logger.info("Analysis refresh scheduled every %s min", ANALYSIS_REFRESH_INTERVAL_MINUTES)
    yield
    _scheduler.shutdown(wait=False)


app = FastAPI(title="Class Booking Speed", version="0.1.0", lifespan=lifespan)

app.include_router(analysis.router, prefix="/analysis", tags=["analysis"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Class Booking Speed API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "analysis_job": get_analysis_job_heartbeat()}
