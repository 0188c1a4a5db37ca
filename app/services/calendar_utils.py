"""Calendar helpers and the default work-day generator."""

from __future__ import annotations

import math
from calendar import monthrange
from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal

from app.models.snapshots import WorkDay

ONE_DAY = timedelta(days=1)
WEEKEND_WEEKDAYS = {5, 6}


def parse_day(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def iso_day(value: date | str) -> str:
    """Return the YYYY-MM-DD key used for work-day lookups."""

    return parse_day(value).isoformat()


def days_between(start: date, end: date) -> list[date]:
    current = start
    days: list[date] = []
    while current <= end:
        days.append(current)
        current += ONE_DAY
    return days


def month_days(year: int, month: int) -> list[date]:
    _, last_day = monthrange(year, month)
    return days_between(date(year, month, 1), date(year, month, last_day))


def is_weekend(value: date | str) -> bool:
    return parse_day(value).weekday() in WEEKEND_WEEKDAYS


def span_days(start: date, end: date) -> int:
    """Whole days between two dates, rounded up.

    A same-day span counts as 0; this is not an inclusive day count.
    """

    return math.ceil((end - start) / ONE_DAY)


def generate_work_days(start: date, end: date, hours_per_day: Decimal) -> list[WorkDay]:
    """Seed schedule for a date range: weekdays enabled, weekends disabled."""

    return [
        WorkDay(date=iso_day(day), hours=hours_per_day, enabled=not is_weekend(day))
        for day in days_between(start, end)
    ]


def with_uniform_hours(work_days: Iterable[WorkDay], hours_per_day: Decimal) -> list[WorkDay]:
    """Overwrite the hours of every entry, keeping each enabled flag."""

    return [WorkDay(date=day.date, hours=hours_per_day, enabled=day.enabled) for day in work_days]


def covers_range(work_days: Iterable[WorkDay], start: date, end: date) -> bool:
    expected = [iso_day(day) for day in days_between(start, end)]
    return [day.date for day in work_days] == expected
