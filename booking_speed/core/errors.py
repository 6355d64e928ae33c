"""
Centralized error types for the booking-speed analysis and their HTTP mapping.

Data-quality errors are local to one snapshot or one slot: they are recorded on the result
and the batch continues. SnapshotSourceError is the only batch-fatal error.
"""
from __future__ import annotations

from typing import Callable

from fastapi import HTTPException


class BookingSpeedError(Exception):
    """Base class for analysis errors."""


class DataQualityError(BookingSpeedError):
    """A problem with one snapshot or one slot. Recorded as an issue, never aborts the batch."""

    def __init__(self, message: str, slot_identity: str | None = None):
        super().__init__(message)
        self.slot_identity = slot_identity


class UnparsableTimeLabel(DataQualityError):
    """Slot date label or clock label has no recognizable day/month or h:mm(am|pm) token."""


class IdentityInvariantViolation(DataQualityError):
    """A later snapshot disagrees with the first-observed category or time labels of its slot."""


class UnknownStateLabel(DataQualityError):
    """A stored occupancy label outside FULL / LOW / AVAILABLE."""


class EmptyInputBatch(DataQualityError):
    """Zero snapshots supplied. Aggregates report undefined values instead of raising."""


class DivisionUndefined(BookingSpeedError):
    """Rate or mean over an empty denominator. Converted to None at every call site."""


class SnapshotSourceError(BookingSpeedError):
    """The snapshot collection could not be read. Fatal to the whole run."""


# ---------------------------------------------------------------------------
# HTTP mapping: (exception type, status_code, detail). First match wins.
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_INTERNAL_ERROR = 500
STATUS_SERVICE_UNAVAILABLE = 503  # snapshot store down or unreadable

MSG_SOURCE_UNAVAILABLE = "Snapshot store could not be read; try again once the database is reachable."

ANALYSIS_ERROR_RULES: list[tuple[Callable[[Exception], bool], int, str | None]] = [
    (lambda e: isinstance(e, SnapshotSourceError), STATUS_SERVICE_UNAVAILABLE, MSG_SOURCE_UNAVAILABLE),
    (lambda e: isinstance(e, DataQualityError), STATUS_BAD_REQUEST, None),
]


def analysis_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception from an analysis run into an HTTPException.
    Uses ANALYSIS_ERROR_RULES; a rule without a detail reuses the exception message.
    Anything unmatched becomes 500 with the exception message.
    """
    msg = str(exc)
    for predicate, status_code, detail in ANALYSIS_ERROR_RULES:
        if predicate(exc):
            return HTTPException(status_code=status_code, detail=detail or msg)
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=msg)
