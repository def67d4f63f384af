"""
Drag-to-select state machine over the slot grid.
"""

import logging
from datetime import date
from typing import Callable, Optional, Tuple
from ...models import GridMode
from ...schemas import Selection
from .constants import IDLE, DRAGGING, COMMITTING
from .occupancy import OccupancySet
from .slot_grid import SlotGrid

logger = logging.getLogger(__name__)


class RangeSelector:
    """
    Turns press / move / release gestures into a validated Selection.

    The selector never looks at records directly. It asks occupancy_for(mode)
    for the occupancy set of the active mode every time it needs one, so it
    always validates against the current state of the day.
    """
    def __init__(self, grid: SlotGrid, occupancy_for: Callable[[GridMode], OccupancySet],
                 day: date, mode: GridMode = GridMode.LOG):
        self.grid = grid
        self.occupancy_for = occupancy_for
        self.day = day
        self.mode = mode
        self.state = IDLE
        self.start_index: Optional[int] = None
        self.end_index: Optional[int] = None

    def __repr__(self):
        return f"RangeSelector({self.state}, {self.mode.value}, {self.candidate()})"

    @property
    def occupancy(self) -> OccupancySet:
        return self.occupancy_for(self.mode)

    def press(self, index: int) -> bool:
        """Start a drag on a slot. Returns False if the press was refused."""
        if self.state != IDLE:
            return False
        if not self.grid.contains_index(index):
            logger.debug(f"Press on slot {index} ignored: outside the grid")
            return False
        if index in self.occupancy:
            logger.debug(f"Press on slot {index} refused: already occupied in {self.mode.value} mode")
            return False

        self.state = DRAGGING
        self.start_index = index
        self.end_index = index
        return True

    def move(self, index: int) -> bool:
        """Move the end anchor while dragging. Returns True if the candidate changed."""
        if self.state != DRAGGING or not self.grid.contains_index(index):
            return False
        if index == self.end_index:
            return False
        self.end_index = index
        return True

    def candidate(self) -> Optional[Tuple[int, int]]:
        """Current candidate as a normalized inclusive (lo, hi) pair."""
        if self.start_index is None or self.end_index is None:
            return None
        return min(self.start_index, self.end_index), max(self.start_index, self.end_index)

    @property
    def has_conflict(self) -> bool:
        """Whether the in-progress range currently covers an occupied slot."""
        candidate = self.candidate()
        if candidate is None:
            return False
        lo, hi = candidate
        return self.occupancy.intersects(lo, hi)

    def release(self) -> Optional[Selection]:
        """
        Finish the drag. Returns the committed Selection, or None when the
        gesture was discarded because the range overlaps an occupied slot.
        """
        if self.state != DRAGGING:
            return None

        self.state = COMMITTING
        lo, hi = self.candidate()
        selection = None
        if self.occupancy.intersects(lo, hi):
            logger.debug(f"Selection {lo}-{hi} discarded: overlaps existing {self.mode.value} records")
        else:
            selection = Selection(
                date=self.day,
                start_time=self.grid.time_of(lo),
                duration=(hi - lo + 1) * self.grid.slot_minutes,
            )
        self.reset()
        return selection

    def cancel(self) -> Optional[Selection]:
        """Pointer left the grid mid-drag. Ends the gesture exactly like a release."""
        return self.release()

    def set_mode(self, mode: GridMode):
        """Switch between plan and log mode, dropping any in-progress drag."""
        self.reset()
        self.mode = mode

    def set_day(self, day: date):
        self.reset()
        self.day = day

    def reset(self):
        self.state = IDLE
        self.start_index = None
        self.end_index = None
