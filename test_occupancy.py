"""
Tests for per-mode occupancy and plan/log overlay precedence
"""

from timeblock.models import GridMode
from timeblock.scheduling import (
    OccupancySet, build_occupancy, hidden_plan_ids, is_superseded, occupied_slots, visible_plans,
)


def test_occupied_slots_is_union_of_record_spans(grid, make_entry):
    entries = [make_entry("09:00", 30), make_entry("10:00", 15)]
    assert occupied_slots(entries, grid) == {4, 5, 8}


def test_occupancy_set_membership(grid, make_entry):
    occupancy = build_occupancy([make_entry("09:00", 30)], GridMode.LOG, grid)

    assert occupancy.mode == GridMode.LOG
    assert 4 in occupancy and 5 in occupancy
    assert 6 not in occupancy
    assert len(occupancy) == 2
    assert list(occupancy) == [4, 5]


def test_intersects_is_inclusive(grid):
    occupancy = OccupancySet(GridMode.LOG, {4, 5})
    assert occupancy.intersects(3, 4)
    assert occupancy.intersects(5, 9)
    assert not occupancy.intersects(6, 7)
    assert not occupancy.intersects(0, 3)


def test_plan_and_log_occupancy_are_independent(grid, make_plan, make_entry):
    plans = build_occupancy([make_plan("09:00", 30)], GridMode.PLAN, grid)
    logs = build_occupancy([make_entry("11:00", 15)], GridMode.LOG, grid)

    assert plans != logs
    assert 4 in plans and 4 not in logs
    assert 12 in logs and 12 not in plans


def test_empty_day_has_empty_occupancy(grid):
    occupancy = build_occupancy([], GridMode.PLAN, grid)
    assert len(occupancy) == 0
    assert occupancy == OccupancySet(GridMode.PLAN)


# ================================
# OVERLAY
# ================================

def test_any_log_overlap_hides_the_whole_plan(grid, make_plan, make_entry):
    plan = make_plan("10:00", 60, id="p1")
    logs = build_occupancy([make_entry("10:00", 15)], GridMode.LOG, grid)

    assert is_superseded(plan, logs, grid)
    assert visible_plans([plan], logs, grid) == []
    assert hidden_plan_ids([plan], logs, grid) == ["p1"]


def test_overlap_on_last_plan_slot_hides_it(grid, make_plan, make_entry):
    plan = make_plan("10:00", 60, id="p1")
    logs = build_occupancy([make_entry("10:45", 15)], GridMode.LOG, grid)
    assert is_superseded(plan, logs, grid)


def test_adjacent_log_leaves_plan_visible(grid, make_plan, make_entry):
    plans = [make_plan("10:00", 60, id="p1"), make_plan("13:00", 30, id="p2")]
    logs = build_occupancy([make_entry("11:00", 15), make_entry("13:15", 15)], GridMode.LOG, grid)

    assert [plan.id for plan in visible_plans(plans, logs, grid)] == ["p1"]
    assert hidden_plan_ids(plans, logs, grid) == ["p2"]
