"""
In-memory store of plan and log records, keyed by calendar day.
"""

import logging
import secrets
import string
import time
from datetime import date
from typing import Callable, Dict, List, Union
from ..errors import StaleRecordError, InvalidRangeError
from ..models import GridMode
from ..schemas import PlanRecord, LogRecord
from ..scheduling.core.slot_grid import SlotGrid, DEFAULT_GRID
from ..scheduling.utils.slot_utils import sort_by_start_time

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_lowercase + string.digits

DayKey = Union[date, str]


def generate_record_id(suffix_length: int = 7) -> str:
    """Millisecond timestamp followed by a random base36 suffix."""
    suffix = ''.join(secrets.choice(ID_ALPHABET) for _ in range(suffix_length))
    return f"{int(time.time() * 1000)}{suffix}"


def _key(day: DayKey) -> str:
    return day.isoformat() if isinstance(day, date) else day


class DayBook:
    """
    Sparse map of ISO date -> records of one kind, each day sorted by start time.
    Days without records are never kept around as empty lists.
    """
    def __init__(self, mode: GridMode, record_type: type, grid: SlotGrid):
        self.mode = mode
        self.record_type = record_type
        self.grid = grid
        self.days: Dict[str, List] = {}

    def __contains__(self, day: DayKey) -> bool:
        return _key(day) in self.days

    def __len__(self) -> int:
        return sum(len(records) for records in self.days.values())

    def day(self, day: DayKey) -> List:
        return list(self.days.get(_key(day), []))

    def upsert(self, record):
        """Replace the record with the same id, or add it under a fresh id."""
        if not self.grid.fits(record.start_time, record.duration):
            raise InvalidRangeError(
                f"{record.start_time} + {record.duration}m does not fit the {self.grid.day_start}-{self.grid.day_end} grid"
            )

        day_key = record.day_key
        records = list(self.days.get(day_key, []))

        if record.id:
            index = next((i for i, existing in enumerate(records) if existing.id == record.id), None)
            if index is None:
                raise StaleRecordError(day_key, record.id)
            stored = record.model_copy()
            records[index] = stored
            logger.debug(f"Updated {self.mode.value} record {stored.id} on {day_key}")
        else:
            stored = record.model_copy(update={"id": generate_record_id()})
            records.append(stored)
            logger.debug(f"Created {self.mode.value} record {stored.id} on {day_key}")

        sort_by_start_time(records)
        self.days[day_key] = records
        return stored

    def remove(self, day: DayKey, record_id: str):
        day_key = _key(day)
        records = self.days.get(day_key, [])
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            raise StaleRecordError(day_key, record_id)

        removed = next(record for record in records if record.id == record_id)
        if remaining:
            self.days[day_key] = remaining
        else:
            del self.days[day_key]
        logger.debug(f"Removed {self.mode.value} record {record_id} from {day_key}")
        return removed

    def to_dict(self) -> Dict[str, List[dict]]:
        return {
            day_key: [record.model_dump(mode="json") for record in records]
            for day_key, records in self.days.items()
        }

    def load(self, data: Dict[str, list]):
        """Replace the contents with a snapshot; empty days are dropped."""
        self.days = {}
        for day_key, raw_records in (data or {}).items():
            records = [
                raw if isinstance(raw, self.record_type) else self.record_type.model_validate(raw)
                for raw in raw_records
            ]
            if records:
                sort_by_start_time(records)
                self.days[day_key] = records


class RecordStore:
    """
    Sole owner of plan and log records. Every mutation is followed by a
    change notification so the persistence layer can schedule a save.
    """
    def __init__(self, grid: SlotGrid = DEFAULT_GRID):
        self.grid = grid
        self.plans = DayBook(GridMode.PLAN, PlanRecord, grid)
        self.entries = DayBook(GridMode.LOG, LogRecord, grid)
        self._listeners: List[Callable[[], None]] = []

    def add_listener(self, listener: Callable[[], None]):
        self._listeners.append(listener)

    def _notify(self):
        for listener in self._listeners:
            listener()

    def book(self, mode: GridMode) -> DayBook:
        return self.plans if mode == GridMode.PLAN else self.entries

    def plans_for(self, day: DayKey) -> List[PlanRecord]:
        return self.plans.day(day)

    def entries_for(self, day: DayKey) -> List[LogRecord]:
        return self.entries.day(day)

    def records_for(self, day: DayKey, mode: GridMode) -> List:
        return self.book(mode).day(day)

    def upsert_plan(self, plan: PlanRecord) -> PlanRecord:
        stored = self.plans.upsert(plan)
        self._notify()
        return stored

    def upsert_entry(self, entry: LogRecord) -> LogRecord:
        stored = self.entries.upsert(entry)
        self._notify()
        return stored

    def remove_plan(self, day: DayKey, plan_id: str) -> PlanRecord:
        removed = self.plans.remove(day, plan_id)
        self._notify()
        return removed

    def remove_entry(self, day: DayKey, entry_id: str) -> LogRecord:
        removed = self.entries.remove(day, entry_id)
        self._notify()
        return removed

    def snapshot(self) -> dict:
        return {"entries": self.entries.to_dict(), "plans": self.plans.to_dict()}

    def load(self, entries: dict, plans: dict):
        """Load records handed back by the persistence layer. Does not notify."""
        self.entries.load(entries)
        self.plans.load(plans)
        logger.info(f"Loaded {len(self.entries)} log records and {len(self.plans)} plans")
