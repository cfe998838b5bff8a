"""
Date utility functions for calendar-day arithmetic on naive UTC datetimes.
"""
from datetime import date, datetime, time, timedelta
from typing import Union


def start_of_day(day: Union[date, datetime]) -> datetime:
    """
    Return midnight at the start of the calendar day containing `day`.

    Args:
        day: A date or datetime

    Returns:
        Naive datetime at 00:00 of that day
    """
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min)


def start_of_next_day(day: Union[date, datetime]) -> datetime:
    """Return midnight at the start of the calendar day after `day`."""
    return start_of_day(day) + timedelta(days=1)


def same_calendar_day(moment: datetime, day: Union[date, datetime]) -> bool:
    """Check whether `moment` falls on the calendar day of `day`."""
    if isinstance(day, datetime):
        day = day.date()
    return moment.date() == day
