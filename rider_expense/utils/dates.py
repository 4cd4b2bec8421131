"""
Date helpers. All stored timestamps are naive UTC; all record dates are
calendar days in UTC.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional

from rider_expense.errors import ValidationError


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_day(value: Optional[str], field: str = "date") -> date:
    """
    Parse a client supplied date into a UTC calendar day.

    Accepts plain ISO dates (``2026-10-01``) and ISO datetimes, with or
    without an offset; datetimes are converted to UTC before the time part
    is dropped.
    """
    if not value:
        raise ValidationError(f"{field} is required")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value}")
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end, inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)
