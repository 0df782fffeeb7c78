"""
Timestamp utilities.

The document store hands back creation timestamps in whatever shape the writer
used: native datetimes, ISO strings, or epoch numbers. Everything is normalized
to timezone-aware UTC datetimes.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import dateutil.parser

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def now_utc() -> datetime:
    """
    Get current datetime in UTC.

    Returns:
        datetime: Current time with UTC timezone
    """
    return datetime.now(timezone.utc)


def coerce_timestamp(value: Any) -> Optional[datetime]:
    """
    Convert a stored timestamp value into an aware UTC datetime.

    Naive datetimes are assumed to already be in UTC.

    Args:
        value: datetime, ISO-8601 string, epoch seconds, or None

    Returns:
        datetime or None if the value is missing or unparseable

    Examples:
        >>> coerce_timestamp("2024-05-01T10:00:00Z")
        datetime.datetime(2024, 5, 1, 10, 0, tzinfo=tzutc())
        >>> coerce_timestamp("not a date") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            dt = dateutil.parser.isoparse(text)
        except (ValueError, OverflowError):
            try:
                dt = dateutil.parser.parse(text)
            except (ValueError, OverflowError):
                return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def newest_first_key(created_at: Optional[datetime]) -> float:
    """
    Sort key for newest-first ordering.

    Missing timestamps count as the epoch, so they land after every
    timestamped record when sorted with reverse=True.
    """
    return (created_at or EPOCH).timestamp()
