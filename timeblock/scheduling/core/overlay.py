"""
Plan/log overlay precedence.

A logged record hides every plan that shares at least one slot with it,
no matter how small the overlap is.
"""

from typing import Iterable, List
from .occupancy import OccupancySet
from .slot_grid import SlotGrid


def is_superseded(plan, log_occupancy: OccupancySet, grid: SlotGrid) -> bool:
    span = grid.span(plan.start_time, plan.duration)
    if not span:
        return False
    return log_occupancy.intersects(span.start, span.stop - 1)


def visible_plans(plans: Iterable, log_occupancy: OccupancySet, grid: SlotGrid) -> List:
    return [plan for plan in plans if not is_superseded(plan, log_occupancy, grid)]


def hidden_plan_ids(plans: Iterable, log_occupancy: OccupancySet, grid: SlotGrid) -> List[str]:
    return [plan.id for plan in plans if is_superseded(plan, log_occupancy, grid)]
