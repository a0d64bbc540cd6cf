from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo


def to_utc_naive(dt: datetime) -> datetime:
    """Normalize datetimes for DB storage.

    Expense dates are stored as UTC in a timezone-naive DateTime column.
    Clients often send ISO timestamps with 'Z' (tz-aware), SQLite drops the
    offset silently, so convert before binding.
    """

    if dt.tzinfo is None:
        return dt

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def as_utc(dt: datetime) -> datetime:
    """Treat a DB-stored UTC-naive datetime as UTC-aware for API responses."""

    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc)

    return dt.replace(tzinfo=timezone.utc)


def resolve_time_zone(name: str) -> tzinfo:
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    return ZoneInfo(name)


def utcnow_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
