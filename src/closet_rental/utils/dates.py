"""Date parsing and storage helpers."""

from __future__ import annotations

from datetime import date, datetime

from dateutil import parser


def to_datetime(value: str | date | datetime) -> datetime:
    """Normalize ISO strings, dates and datetimes to a naive local datetime.

    A bare date means midnight of that day. Raises ``ValueError`` for text
    that is not ISO-8601.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        result = parser.isoparse(value.strip())
    else:
        raise ValueError(f"Unsupported date value: {value!r}")
    if result.tzinfo is not None:
        result = result.astimezone().replace(tzinfo=None)
    return result


def to_iso(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


def from_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    return to_datetime(value)


def calendar_day_difference(later: datetime | date, earlier: datetime | date) -> int:
    """Number of calendar-day boundaries between two instants, ignoring time of day."""
    later_day = later.date() if isinstance(later, datetime) else later
    earlier_day = earlier.date() if isinstance(earlier, datetime) else earlier
    return (later_day - earlier_day).days
