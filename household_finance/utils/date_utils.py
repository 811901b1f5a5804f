"""Date manipulation utilities for billing months"""

import calendar
import re
from datetime import date, datetime
from typing import Tuple

MONTH_LABEL_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}")


def to_calendar_date(value: date | datetime) -> date:
    """Drop the time-of-day component, if any"""
    if isinstance(value, datetime):
        return value.date()
    return value


def format_month(year: int, month: int) -> str:
    """Render a YYYY-MM label with a zero-padded month"""
    return f"{year:04d}-{month:02d}"


def month_label(value: date | datetime) -> str:
    """YYYY-MM label of the calendar month containing ``value``"""
    return format_month(value.year, value.month)


def next_month(year: int, month: int) -> Tuple[int, int]:
    """(year, month) of the following month, rolling the year after December"""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, capping ``day`` at the month's last day instead of rolling over"""
    return date(year, month, min(day, last_day_of_month(year, month)))


def is_valid_month_label(label: str) -> bool:
    """True for YYYY-MM strings whose month is 01-12"""
    if not isinstance(label, str) or not MONTH_LABEL_PATTERN.fullmatch(label):
        return False
    return 1 <= int(label[5:]) <= 12


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of a month (inclusive)"""
    return date(year, month, 1), date(year, month, last_day_of_month(year, month))
