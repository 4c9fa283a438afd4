"""
Timestamp utilities

All payload timestamps are captured in UTC and rendered the same way the
presentation layer has always received them (ISO8601, milliseconds, 'Z').
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def iso_timestamp(dt: datetime | None = None) -> str:
    """
    Render a datetime as an ISO8601 UTC string

    Args:
        dt: Datetime to render; naive values are treated as UTC. Defaults to now.

    Returns:
        String like '2025-08-08T21:00:00.000Z'
    """
    if dt is None:
        dt = utc_now()
    elif dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    rendered = dt.isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z") if rendered.endswith("+00:00") else rendered
