"""Timezone-aware UTC helpers.

Timestamps are stored and compared as aware UTC values. SQLite returns
naive datetimes for timezone columns and query strings may omit an
offset, so inputs pass through ensure_utc() before comparison.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to a naive value, convert an aware one; None passes through."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def from_timestamp_utc(timestamp: float) -> datetime:
    """Aware UTC datetime for a POSIX timestamp (e.g. a file's st_mtime)."""
    return datetime.fromtimestamp(timestamp, tz=UTC)
