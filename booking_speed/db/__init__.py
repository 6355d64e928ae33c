from booking_speed.db.base import Base
from booking_speed.db.session import get_db, engine, SessionLocal
from booking_speed.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES"]
