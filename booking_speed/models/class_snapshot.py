"""One observation of one class at one scrape instant. Append-only; the analysis never mutates rows."""
from sqlalchemy import Column, DateTime, Integer, String

from booking_speed.db.base import Base


class ClassSnapshot(Base):
    __tablename__ = "class_snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(String(100), nullable=False, index=True)  # date + time + class name
    class_name = Column(String(128), nullable=False)
    status = Column(String(16), nullable=False)  # FULL | LOW | AVAILABLE
    class_date = Column(String(64), nullable=False)  # raw label, e.g. "MondayMon 27 Oct"
    class_time = Column(String(16), nullable=False)  # raw label, e.g. "6:00am"
    instructor = Column(String(128), nullable=True)
    scraped_at = Column(DateTime(timezone=True), nullable=False, index=True)
    batch_index = Column(Integer, nullable=False, default=0)  # position within its scrape
