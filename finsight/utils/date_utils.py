"""Date manipulation utilities"""

from datetime import date
from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping to the end of short months"""
    return from_date + relativedelta(months=months)


def month_key(day: date) -> str:
    """YYYY-MM bucket a date belongs to"""
    return day.strftime("%Y-%m")


def month_label(day: date) -> str:
    """Human-readable month and year, e.g. 'November 2026'"""
    return day.strftime("%B %Y")


def days_until(target: date, today: date) -> int:
    """Whole days from today to target; negative when target is in the past"""
    return (target - today).days
