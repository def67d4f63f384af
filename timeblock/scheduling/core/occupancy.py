"""
Occupancy of the slot grid by a day's plan or log records.
"""

from typing import Iterable, Iterator, Set
from ...models import GridMode
from .slot_grid import SlotGrid


def occupied_slots(records: Iterable, grid: SlotGrid) -> Set[int]:
    """Union of the slot indexes covered by each record."""
    occupied: Set[int] = set()
    for record in records:
        occupied.update(grid.span(record.start_time, record.duration))
    return occupied


class OccupancySet:
    """
    Occupied slot indexes for one mode on one day.

    Plans and logs each get their own instance over the same grid, so a
    slot can be planned and logged at the same time.
    """
    def __init__(self, mode: GridMode, slots: Iterable[int] = ()):
        self.mode = mode
        self.slots = frozenset(slots)

    def __contains__(self, index: int) -> bool:
        return index in self.slots

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.slots))

    def __eq__(self, other):
        if not isinstance(other, OccupancySet):
            return NotImplemented
        return self.mode == other.mode and self.slots == other.slots

    def __repr__(self):
        return f"OccupancySet({self.mode.value}, {sorted(self.slots)})"

    def intersects(self, lo: int, hi: int) -> bool:
        """True if any index in the inclusive range [lo, hi] is occupied"""
        return any(index in self.slots for index in range(lo, hi + 1))


def build_occupancy(records: Iterable, mode: GridMode, grid: SlotGrid) -> OccupancySet:
    """Recompute occupancy from scratch; cheap enough to redo on every change."""
    return OccupancySet(mode, occupied_slots(records, grid))
