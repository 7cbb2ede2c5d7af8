"""
Month grid and date label helpers for the leave calendar.
"""
import calendar as _calendar
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from app.schemas.leave import LeaveRequestRecord
from app.services.leave_policy import requests_on_day


def month_bounds(month: date) -> Tuple[date, date]:
    first = month.replace(day=1)
    last = first.replace(day=_calendar.monthrange(first.year, first.month)[1])
    return first, last


def calendar_days(month: date) -> List[date]:
    """
    Days shown for `month`: from the Monday on or before the 1st through one
    week past the last day, inclusive.
    """
    first, last = month_bounds(month)
    start = first - timedelta(days=first.weekday())
    end = last + timedelta(days=7)
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def build_month(
    month: date,
    requests: Iterable[LeaveRequestRecord],
    store_id: Optional[str] = None,
) -> List[Tuple[date, bool, List[LeaveRequestRecord]]]:
    """(day, in_month, requests covering day) for every grid day."""
    requests = list(requests)
    return [
        (day, day.month == month.month and day.year == month.year, requests_on_day(day, requests, store_id))
        for day in calendar_days(month)
    ]


def parse_month(value: str) -> date:
    """Parse `YYYY-MM` into the first day of that month."""
    year, _, mon = value.partition("-")
    return date(int(year), int(mon), 1)


def _long(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def format_date_range(start: date, end: date) -> str:
    if start == end:
        return _long(start)
    if (start.year, start.month) == (end.year, end.month):
        return f"{start.strftime('%b')} {start.day} - {end.day}, {end.year}"
    return f"{_long(start)} - {_long(end)}"
