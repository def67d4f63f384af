"""
Time Block Scheduling Grid

The fixed 15-minute slot grid, per-mode occupancy, the drag selection state
machine and plan/log overlay precedence. Pure in-process logic with no I/O.
"""

from .core.slot_grid import Slot, SlotGrid, DEFAULT_GRID, TIME_SLOTS
from .core.occupancy import OccupancySet, occupied_slots, build_occupancy
from .core.range_selector import RangeSelector
from .core.overlay import is_superseded, visible_plans, hidden_plan_ids
from .core.constants import IDLE, DRAGGING, COMMITTING
