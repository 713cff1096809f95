from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max)


def month_range(month: str) -> tuple[date, date]:
    """Return [first day of month, first day of next month) for a YYYY-MM key."""

    if not month or not _MONTH_RE.match(month):
        raise ValidationError('Invalid or missing "month" (expected "YYYY-MM")')

    year, mon = (int(part) for part in month.split("-"))
    if not 1 <= mon <= 12:
        raise ValidationError('Invalid or missing "month" (expected "YYYY-MM")')

    start = date(year, mon, 1)
    end = (start + timedelta(days=32)).replace(day=1)
    return start, end


def iso_or_none(value: datetime | date | None) -> str | None:
    return value.isoformat() if value is not None else None
