"""
Named rolling time windows, evaluated relative to "today" at report time.
"""

import enum
from datetime import date, datetime, timedelta
from typing import Callable, Optional
import pytz
from dateutil.relativedelta import relativedelta
from ..config import LOCAL_TIMEZONE


class TimeWindow(str, enum.Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"

WINDOW_LABELS = {
    TimeWindow.TODAY: "Today",
    TimeWindow.YESTERDAY: "Yesterday",
    TimeWindow.THIS_WEEK: "This Week",
    TimeWindow.THIS_MONTH: "This Month",
    TimeWindow.LAST_MONTH: "Last Month",
}


def local_today(tz_name: Optional[str] = None) -> date:
    """Current calendar day in the configured local timezone"""
    try:
        tz = pytz.timezone(tz_name or LOCAL_TIMEZONE)
    except pytz.UnknownTimeZoneError:
        tz = pytz.UTC
    return datetime.now(tz).date()


def week_start(day: date) -> date:
    """Monday of the week containing day"""
    return day - timedelta(days=day.weekday())


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def window_predicate(window: TimeWindow, today: date) -> Callable[[date], bool]:
    """Build the date filter for a window, anchored at today."""
    if window == TimeWindow.TODAY:
        return lambda day: day == today
    if window == TimeWindow.YESTERDAY:
        yesterday = today - timedelta(days=1)
        return lambda day: day == yesterday
    if window == TimeWindow.THIS_WEEK:
        monday = week_start(today)
        return lambda day: monday <= day < monday + timedelta(days=7)
    if window == TimeWindow.THIS_MONTH:
        return lambda day: same_month(day, today)
    if window == TimeWindow.LAST_MONTH:
        last_month = today - relativedelta(months=1)
        return lambda day: same_month(day, last_month)
    raise ValueError(f"Unknown time window: {window}")
