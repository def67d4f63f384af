"""Plan and log record endpoints: create from a selection, edit, delete."""

from typing import List
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Body

from ..schemas import LogRecord, PlanRecord
from ..services.planner_service import PlannerService, get_planner
from ..services.forms import FormError
from ..errors import StaleRecordError, InvalidRangeError

router = APIRouter(tags=["records"])


def _save(save, record):
    try:
        return save(record)
    except StaleRecordError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FormError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _delete(delete, day: date, record_id: str):
    try:
        delete(day, record_id)
    except StaleRecordError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "message": "Record deleted"}

# ----------------- Plans ---------------------

@router.get("/plans/{day}", response_model=List[PlanRecord])
async def list_plans(day: date, planner: PlannerService = Depends(get_planner)):
    return planner.store.plans_for(day)

@router.post("/plans", response_model=PlanRecord)
async def create_plan(
    plan_in: PlanRecord = Body(...),
    planner: PlannerService = Depends(get_planner),
):
    if plan_in.id:
        raise HTTPException(status_code=400, detail="New plans must not carry an id")
    return _save(planner.save_plan, plan_in)

@router.put("/plans/{plan_id}", response_model=PlanRecord)
async def update_plan(
    plan_id: str,
    plan_in: PlanRecord = Body(...),
    planner: PlannerService = Depends(get_planner),
):
    return _save(planner.save_plan, plan_in.model_copy(update={"id": plan_id}))

@router.delete("/plans/{day}/{plan_id}")
async def delete_plan(day: date, plan_id: str, planner: PlannerService = Depends(get_planner)):
    return _delete(planner.delete_plan, day, plan_id)

# ----------------- Log Entries ---------------------

@router.get("/entries/{day}", response_model=List[LogRecord])
async def list_entries(day: date, planner: PlannerService = Depends(get_planner)):
    return planner.store.entries_for(day)

@router.post("/entries", response_model=LogRecord)
async def create_entry(
    entry_in: LogRecord = Body(...),
    planner: PlannerService = Depends(get_planner),
):
    if entry_in.id:
        raise HTTPException(status_code=400, detail="New entries must not carry an id")
    return _save(planner.save_entry, entry_in)

@router.put("/entries/{entry_id}", response_model=LogRecord)
async def update_entry(
    entry_id: str,
    entry_in: LogRecord = Body(...),
    planner: PlannerService = Depends(get_planner),
):
    return _save(planner.save_entry, entry_in.model_copy(update={"id": entry_id}))

@router.delete("/entries/{day}/{entry_id}")
async def delete_entry(day: date, entry_id: str, planner: PlannerService = Depends(get_planner)):
    return _delete(planner.delete_entry, day, entry_id)
