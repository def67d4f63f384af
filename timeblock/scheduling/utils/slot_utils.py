"""
Clock-time and record helpers shared by the grid, the store and reports.
"""

from typing import Iterable, Optional
from ..core.constants import MINUTES_PER_HOUR


def minutes_of(hhmm: str) -> int:
    """Convert a zero-padded "HH:MM" string to minutes since midnight."""
    hours, minutes = hhmm.split(":")
    return int(hours) * MINUTES_PER_HOUR + int(minutes)


def format_hhmm(total_minutes: int) -> str:
    """Convert minutes since midnight back to zero-padded "HH:MM"."""
    hours, minutes = divmod(total_minutes, MINUTES_PER_HOUR)
    return f"{hours:02d}:{minutes:02d}"


def format_minutes(total_minutes: int) -> str:
    """Human readable duration, e.g. 45m, 2h, 1h 30m"""
    hours, minutes = divmod(total_minutes, MINUTES_PER_HOUR)
    if hours == 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"


def find_record_by_id(record_id: str, records: Iterable) -> Optional[object]:
    """Find the record carrying a specific id"""
    for record in records:
        if getattr(record, "id", None) == record_id:
            return record
    return None


def sort_by_start_time(records: list) -> None:
    """Sort a day's records in place by start time.

    Plain string ordering is correct because every start time is
    fixed-width zero-padded HH:MM.
    """
    records.sort(key=lambda record: record.start_time)
