from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from booking_speed.core.analysis_config import AnalysisConfig
from booking_speed.db.base import Base
from booking_speed.models.class_snapshot import ClassSnapshot  # noqa: F401
from booking_speed.services.analysis.time_parser import parse_slot_start
from booking_speed.services.analysis.types import SlotState, Snapshot

SYDNEY = ZoneInfo("Australia/Sydney")
UTC = timezone.utc

# Slot "Mon_6:00am_Yoga": Monday 27 Oct 2025 06:00 Sydney; bookable from Monday 20 Oct 06:00
YOGA_DATE = "MondayMon 27 Oct"
YOGA_TIME = "6:00am"
YOGA_ID = "Mon_6:00am_Yoga"
YOGA_OPENS = datetime(2025, 10, 20, 6, 0, tzinfo=SYDNEY).astimezone(UTC)


@pytest.fixture
def config() -> AnalysisConfig:
    return AnalysisConfig(slot_year=2025, timezone="Australia/Sydney", max_workers=1)


@pytest.fixture
def opens_at(config):
    """UTC instant a slot becomes bookable under the test config."""
    def _opens_at(date_label: str, time_label: str) -> datetime:
        start = parse_slot_start(date_label, time_label, year=config.slot_year, tz=config.tz)
        return (start - timedelta(hours=config.window_offset_hours)).astimezone(UTC)
    return _opens_at


@pytest.fixture
def make_snapshot():
    def _make(
        state="AVAILABLE",
        at: datetime = YOGA_OPENS,
        *,
        identity: str = YOGA_ID,
        category: str = "Yoga",
        date_label: str = YOGA_DATE,
        time_label: str = YOGA_TIME,
        seq: int = 0,
        instructor: str | None = "Clare S",
    ) -> Snapshot:
        return Snapshot(
            slot_identity=identity,
            category=category,
            state=SlotState(state),
            date_label=date_label,
            time_label=time_label,
            sampled_at=at.astimezone(UTC),
            sequence_index=seq,
            instructor=instructor,
        )
    return _make


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def yoga_opens() -> datetime:
    return YOGA_OPENS
