"""Day view and drag-selection endpoints."""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Body

from ..schemas import DayViewOut, ModeChange, ReleaseOut, SelectionState, SlotGesture
from ..services.planner_service import PlannerService, get_planner
from ..errors import StaleRecordError

router = APIRouter(tags=["day"])


@router.get("/{day}", response_model=DayViewOut)
async def get_day(
    day: date,
    planner: PlannerService = Depends(get_planner),
):
    """Grid, visible plans, logged entries and the in-progress selection for a day."""
    return planner.day_view(day)

@router.post("/mode", response_model=SelectionState)
async def set_mode(
    mode_in: ModeChange = Body(...),
    planner: PlannerService = Depends(get_planner),
):
    planner.set_mode(mode_in.mode)
    return planner.selection_state()

@router.post("/{day}/press", response_model=SelectionState)
async def press_slot(
    day: date,
    gesture: SlotGesture = Body(...),
    planner: PlannerService = Depends(get_planner),
):
    if not planner.press(day, gesture.index):
        raise HTTPException(status_code=409, detail=f"Slot {gesture.index} cannot start a selection")
    return planner.selection_state()

@router.post("/{day}/move", response_model=SelectionState)
async def move_over_slot(
    day: date,
    gesture: SlotGesture = Body(...),
    planner: PlannerService = Depends(get_planner),
):
    return planner.move(day, gesture.index)

@router.post("/{day}/release", response_model=ReleaseOut)
async def release_selection(
    day: date,
    planner: PlannerService = Depends(get_planner),
):
    return planner.release(day)

@router.post("/{day}/leave", response_model=ReleaseOut)
async def leave_grid(
    day: date,
    planner: PlannerService = Depends(get_planner),
):
    """Pointer left the grid while dragging; ends the selection like a release."""
    return planner.cancel(day)

@router.post("/{day}/plans/{plan_id}/log", response_model=ReleaseOut)
async def log_from_plan(
    day: date,
    plan_id: str,
    planner: PlannerService = Depends(get_planner),
):
    """Select exactly the range of a plan so it can be logged as-is."""
    try:
        return planner.log_from_plan(day, plan_id)
    except StaleRecordError as e:
        raise HTTPException(status_code=404, detail=str(e))
