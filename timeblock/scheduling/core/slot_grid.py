"""
Fixed-resolution slot grid for a single working day.
"""

from typing import Iterator, NamedTuple, Tuple
from ...config import DAY_START, DAY_END, SLOT_MINUTES
from ..utils.slot_utils import minutes_of, format_hhmm
from .constants import MINUTES_PER_HOUR


class Slot(NamedTuple):
    index: int
    time: str
    is_start_of_hour: bool


class SlotGrid:
    """
    The ordered sequence of slots covering [day_start, day_end).

    Slot indexes are the unit of all range arithmetic: a record occupies
    slot_index_of(start_time) up to, but excluding, that index plus
    duration // slot_minutes.
    """
    def __init__(self, day_start: str = DAY_START, day_end: str = DAY_END, slot_minutes: int = SLOT_MINUTES):
        self.day_start = day_start
        self.day_end = day_end
        self.slot_minutes = slot_minutes
        self._start_minutes = minutes_of(day_start)

        self.slots: Tuple[Slot, ...] = self._generate_slots()
        self._index_by_time = {slot.time: slot.index for slot in self.slots}

    def _generate_slots(self) -> Tuple[Slot, ...]:
        """Generate every slot between the configured day bounds"""
        slots = []
        current = self._start_minutes
        end = minutes_of(self.day_end)
        while current < end:
            slots.append(Slot(len(slots), format_hhmm(current), current % MINUTES_PER_HOUR == 0))
            current += self.slot_minutes
        return tuple(slots)

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self) -> Iterator[Slot]:
        return iter(self.slots)

    def __getitem__(self, index: int) -> Slot:
        return self.slots[index]

    def __repr__(self):
        return f"SlotGrid({self.day_start}-{self.day_end}, {len(self.slots)} x {self.slot_minutes}m)"

    @property
    def last_index(self) -> int:
        return len(self.slots) - 1

    def slot_index_of(self, time: str) -> int:
        # Off-grid times are a caller error and are not checked here
        return (minutes_of(time) - self._start_minutes) // self.slot_minutes

    def time_of(self, index: int) -> str:
        return self.slots[index].time

    def contains_index(self, index: int) -> bool:
        return 0 <= index < len(self.slots)

    def span(self, start_time: str, duration: int) -> range:
        """Slot indexes covered by a range starting at start_time."""
        start = self.slot_index_of(start_time)
        return range(start, start + duration // self.slot_minutes)

    def fits(self, start_time: str, duration: int) -> bool:
        """Check a range starts on a slot and ends inside the day window"""
        if start_time not in self._index_by_time:
            return False
        if duration <= 0 or duration % self.slot_minutes != 0:
            return False
        return self.span(start_time, duration).stop - 1 <= self.last_index


# Generated once from settings and shared for the process lifetime
DEFAULT_GRID = SlotGrid()
TIME_SLOTS = DEFAULT_GRID.slots
