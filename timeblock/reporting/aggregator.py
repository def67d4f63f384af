"""
Aggregate logged time into per-purpose, per-delegation, per-alignment and
per-person breakdowns for a rolling time window.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional
from ..models import Alignment, ALIGNMENT_OPTIONS, DELEGATION_POTENTIAL_OPTIONS
from ..schemas import (
    BreakdownEntry, LogRecord, Person, PersonBreakdownEntry, PurposeBreakdownEntry,
    PurposeCategory, ReportOut,
)
from ..scheduling.utils.slot_utils import format_minutes
from ..services.catalog_service import DEFAULT_COLOR
from .windows import TimeWindow, WINDOW_LABELS, local_today, window_predicate

logger = logging.getLogger(__name__)

UNCATEGORIZED_KEY = "uncategorized"


def is_meeting_purpose(purpose: Optional[PurposeCategory]) -> bool:
    """Explicit flag wins; catalogs that never declared one fall back to the label."""
    if purpose is None:
        return False
    if purpose.is_meeting is not None:
        return purpose.is_meeting
    return "meeting" in purpose.label.lower()


def percentage_of(duration: int, total: int) -> float:
    return duration / total * 100 if total > 0 else 0.0


def by_duration(items: List, attribute: str = "duration") -> List:
    # sorted() is stable with reverse=True, so ties keep catalog order
    return sorted(items, key=lambda item: getattr(item, attribute), reverse=True)


def filter_entries(entries_by_day: Dict[str, List[LogRecord]], window: TimeWindow, today: date) -> List[LogRecord]:
    """Flatten every day into one list and keep the records inside the window."""
    in_window = window_predicate(window, today)
    flat = [entry for entries in entries_by_day.values() for entry in entries]
    return [entry for entry in flat if in_window(entry.date)]


def purpose_breakdown(entries: Iterable[LogRecord], purposes: List[PurposeCategory], total: int) -> List[PurposeBreakdownEntry]:
    totals = {purpose.id: 0 for purpose in purposes}
    uncategorized = 0
    for entry in entries:
        if entry.purpose_id in totals:
            totals[entry.purpose_id] += entry.duration
        else:
            uncategorized += entry.duration

    stats = [
        PurposeBreakdownEntry(
            key=purpose.id,
            label=purpose.label,
            color=purpose.color,
            duration=totals[purpose.id],
            percentage=percentage_of(totals[purpose.id], total),
        )
        for purpose in purposes
    ]
    if uncategorized:
        stats.append(PurposeBreakdownEntry(
            key=UNCATEGORIZED_KEY,
            label="Uncategorized",
            color=DEFAULT_COLOR,
            duration=uncategorized,
            percentage=percentage_of(uncategorized, total),
        ))
    return by_duration(stats)


def option_breakdown(entries: Iterable[LogRecord], attribute: str, options: list, total: int) -> List[BreakdownEntry]:
    """Breakdown over a fixed enum, e.g. delegation potential or alignment."""
    totals = {value: 0 for value, _ in options}
    for entry in entries:
        totals[getattr(entry, attribute)] += entry.duration

    return by_duration([
        BreakdownEntry(
            key=value.value,
            label=label,
            duration=totals[value],
            percentage=percentage_of(totals[value], total),
        )
        for value, label in options
    ])


def person_breakdown(entries: Iterable[LogRecord], purposes: List[PurposeCategory],
                     people: List[Person], total: int) -> List[PersonBreakdownEntry]:
    purpose_map = {purpose.id: purpose for purpose in purposes}
    totals = {person.id: {"total": 0, "planned": 0, "unplanned": 0} for person in people}

    for entry in entries:
        # Records pointing at people no longer in the catalog are left out
        if not entry.person_id or entry.person_id not in totals:
            continue
        person_totals = totals[entry.person_id]
        person_totals["total"] += entry.duration
        if is_meeting_purpose(purpose_map.get(entry.purpose_id)):
            if entry.alignment == Alignment.ALIGNED:
                person_totals["planned"] += entry.duration
            else:
                person_totals["unplanned"] += entry.duration

    stats = [
        PersonBreakdownEntry(
            id=person.id,
            name=person.name,
            total=totals[person.id]["total"],
            planned_meeting=totals[person.id]["planned"],
            unplanned_meeting=totals[person.id]["unplanned"],
            percentage=percentage_of(totals[person.id]["total"], total),
        )
        for person in people
    ]
    return by_duration([stat for stat in stats if stat.total > 0], "total")


def build_report(entries_by_day: Dict[str, List[LogRecord]], window: TimeWindow,
                 purposes: List[PurposeCategory], people: List[Person],
                 today: Optional[date] = None) -> ReportOut:
    """
    Build every breakdown for one window.

    Percentages are relative to the total logged time in the window and are
    all 0 when nothing was logged.
    """
    today = today or local_today()
    entries = filter_entries(entries_by_day, window, today)
    total = sum(entry.duration for entry in entries)
    logger.debug(f"Report for {window.value} anchored at {today}: {len(entries)} records, {total} minutes")

    alignment = option_breakdown(entries, "alignment", ALIGNMENT_OPTIONS, total)
    alignment_pct = {stat.key: stat.percentage for stat in alignment}

    return ReportOut(
        window=window.value,
        window_label=WINDOW_LABELS[window],
        total_duration=total,
        total_label=format_minutes(total),
        entry_count=len(entries),
        planned_work_percentage=alignment_pct[Alignment.ALIGNED.value],
        disruption_percentage=alignment_pct[Alignment.DISRUPTION.value],
        purposes=purpose_breakdown(entries, purposes, total),
        delegation=option_breakdown(entries, "delegation_potential", DELEGATION_POTENTIAL_OPTIONS, total),
        alignment=alignment,
        people=person_breakdown(entries, purposes, people, total),
    )
