"""UTC-everywhere time handling. Eliminates timezone bugs at the source."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to UTC.

    Request payloads may carry naive datetimes (e.g. "2025-01-31T00:00:00").
    Those are taken to already be UTC; aware values are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
