"""Time utilities for database models."""

from datetime import UTC, datetime, timedelta
from threading import Lock

_STAMP_LOCK = Lock()
_last_stamp: datetime | None = None


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def write_stamp() -> datetime:
    """Return a last-modified timestamp strictly greater than any issued before.

    Used as the default/onupdate value of list timestamp columns. When the
    clock has not advanced since the previous call, the previous value plus
    one microsecond is returned instead.
    """
    global _last_stamp
    with _STAMP_LOCK:
        stamp = utcnow()
        if _last_stamp is not None and stamp <= _last_stamp:
            stamp = _last_stamp + timedelta(microseconds=1)
        _last_stamp = stamp
        return stamp
