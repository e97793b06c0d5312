import calendar
from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Calendar date in UTC; review dates are never tied to a local timezone."""
    return utc_now().date()


def add_years(value: date, years: int) -> date:
    """
    Move a date forward by whole years, keeping month and day.
    29 February falls back to 28 February when the target year is not a leap year.
    """
    target_year = value.year + years
    if value.month == 2 and value.day == 29 and not calendar.isleap(target_year):
        return value.replace(year=target_year, day=28)
    return value.replace(year=target_year)


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    return (end - start).days
