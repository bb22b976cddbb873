"""Date and time helpers shared by stores and the sync engine."""
from datetime import date, datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive values are assumed to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_date(value: datetime) -> date:
    """Calendar date of a datetime in UTC."""
    return to_utc(value).date()


def same_instant(
    a: Optional[datetime],
    b: Optional[datetime],
    tolerance: timedelta = timedelta(seconds=1),
) -> bool:
    """
    Compare two optional timestamps.

    The remote store may truncate sub-second precision, so values closer
    than ``tolerance`` count as equal.

    Examples:
        >>> same_instant(None, None)
        True
        >>> same_instant(None, utc_now())
        False
    """
    if a is None or b is None:
        return a is None and b is None
    return abs(to_utc(a) - to_utc(b)) < tolerance
