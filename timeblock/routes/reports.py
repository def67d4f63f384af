"""
Report endpoints for logged time
"""

from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, Query

from ..schemas import ReportOut
from ..reporting.windows import TimeWindow
from ..services.planner_service import PlannerService, get_planner

router = APIRouter()

@router.get("/", response_model=ReportOut)
async def get_report(
    window: TimeWindow = Query(TimeWindow.THIS_WEEK, description="Rolling window to report on"),
    today: Optional[date] = Query(None, description="Anchor day for the window, defaults to the local today"),
    planner: PlannerService = Depends(get_planner),
):
    """Time by purpose, delegation potential, alignment and person for one window."""
    return planner.report(window, today=today)
