"""
Snapshot store boundary: read class_snapshots into analysis Snapshots, insert acquisition records.

The analysis reads the whole collection once, up front. Rows with an unknown status are
rejected here (UnknownStateLabel) and reported; they never reach the analysis.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking_speed.core.errors import SnapshotSourceError, UnknownStateLabel
from booking_speed.models.class_snapshot import ClassSnapshot
from booking_speed.services.analysis.time_parser import as_utc
from booking_speed.services.analysis.types import DataQualityIssue, SlotState, Snapshot

logger = logging.getLogger(__name__)

# Acquisition job caps the identity key at this length
CLASS_ID_MAX_LEN = 100


@dataclass(frozen=True)
class SnapshotLoad:
    """Snapshots accepted at the boundary plus one issue per rejected row."""
    snapshots: tuple[Snapshot, ...]
    issues: tuple[DataQualityIssue, ...]


def make_class_id(class_date: str, class_time: str, class_name: str) -> str:
    """Identity key used by the acquisition job: date (whitespace removed) + time + class name."""
    return f"{''.join((class_date or '').split())}_{class_time}_{class_name}"[:CLASS_ID_MAX_LEN]


def _to_snapshot(row: ClassSnapshot) -> Snapshot:
    # Naive timestamps from the DB (SQLite) are stored as UTC
    return Snapshot(
        slot_identity=row.class_id,
        category=row.class_name,
        state=SlotState.parse(row.status, row.class_id),
        date_label=row.class_date,
        time_label=row.class_time,
        sampled_at=as_utc(row.scraped_at),
        sequence_index=row.batch_index or 0,
        instructor=row.instructor or None,
    )


def load_snapshots(db: Session) -> SnapshotLoad:
    """All snapshots ordered by scraped_at. Raises SnapshotSourceError if the store can't be read."""
    try:
        rows = db.query(ClassSnapshot).order_by(ClassSnapshot.scraped_at, ClassSnapshot.batch_index).all()
    except SQLAlchemyError as e:
        raise SnapshotSourceError(f"could not read class_snapshots: {e}") from e

    snapshots: list[Snapshot] = []
    issues: list[DataQualityIssue] = []
    for row in rows:
        try:
            snapshots.append(_to_snapshot(row))
        except UnknownStateLabel as e:
            logger.warning("Rejecting snapshot id=%s (%s): %s", row.id, row.class_id, e)
            issues.append(DataQualityIssue.from_error(e))
    logger.info("load_snapshots: %s rows, %s accepted, %s rejected", len(rows), len(snapshots), len(issues))
    return SnapshotLoad(snapshots=tuple(snapshots), issues=tuple(issues))


def _parse_scraped_at(value: Any, assume_tz: tzinfo) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value, assume_tz)
    if isinstance(value, dict) and "$date" in value:  # Mongo extended JSON export
        value = value["$date"]
    if isinstance(value, str):
        return as_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")), assume_tz)
    raise ValueError(f"unsupported scrapedAt value: {value!r}")


def insert_snapshots(
    db: Session,
    records: Iterable[dict[str, Any]],
    *,
    assume_tz: tzinfo = timezone.utc,
) -> int:
    """
    Insert acquisition records (keys: classId?, className, status, classDate, time, instructor?,
    scrapedAt, index?). Missing classId is derived with make_class_id. Naive scrapedAt values are
    wall-clock time in assume_tz. Returns rows inserted.
    """
    rows = []
    for r in records:
        class_date = (r.get("classDate") or "").strip()
        class_time = (r.get("time") or "").strip()
        class_name = (r.get("className") or "").strip()
        rows.append(ClassSnapshot(
            class_id=(r.get("classId") or make_class_id(class_date, class_time, class_name))[:CLASS_ID_MAX_LEN],
            class_name=class_name,
            status=(r.get("status") or "").strip().upper(),
            class_date=class_date,
            class_time=class_time,
            instructor=(r.get("instructor") or "").strip() or None,
            scraped_at=_parse_scraped_at(r.get("scrapedAt"), assume_tz),
            batch_index=int(r.get("index") or 0),
        ))
    db.add_all(rows)
    db.commit()
    logger.info("insert_snapshots: inserted %s rows", len(rows))
    return len(rows)


def latest_snapshots(db: Session, limit: int = 10) -> list[ClassSnapshot]:
    """Most recent rows first (latest scrape)."""
    return (
        db.query(ClassSnapshot)
        .order_by(ClassSnapshot.scraped_at.desc(), ClassSnapshot.batch_index)
        .limit(limit)
        .all()
    )


def snapshot_count(db: Session) -> int:
    return db.query(func.count(ClassSnapshot.id)).scalar() or 0


def snapshot_row_to_dict(row: ClassSnapshot) -> dict[str, Any]:
    return {
        "id": row.id,
        "class_id": row.class_id,
        "class_name": row.class_name,
        "status": row.status,
        "class_date": row.class_date,
        "class_time": row.class_time,
        "instructor": row.instructor,
        "scraped_at": as_utc(row.scraped_at).isoformat() if row.scraped_at else None,
        "batch_index": row.batch_index,
    }
