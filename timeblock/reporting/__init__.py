"""Reports over logged time."""

from .aggregator import build_report, filter_entries, is_meeting_purpose
from .windows import TimeWindow, WINDOW_LABELS, local_today, window_predicate
