"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List, Tuple

SATURDAY = 5
SUNDAY = 6


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month, leap years included"""
    return calendar.monthrange(year, month)[1]


def add_months(year: int, month: int, months: int) -> Tuple[int, int]:
    """Shift a (year, month) pair by a number of months, rolling over year ends"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month"""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def in_month(day: date, year: int, month: int) -> bool:
    return day.year == year and day.month == month


def is_weekend(day: date) -> bool:
    return day.weekday() in (SATURDAY, SUNDAY)


def next_business_day(day: date) -> date:
    """Move a Saturday/Sunday forward to Monday (no holiday calendar)"""
    while is_weekend(day):
        day += timedelta(days=1)
    return day


def date_key(day: date) -> str:
    """Calendar map key (YYYY-MM-DD)"""
    return day.isoformat()
