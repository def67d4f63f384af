"""
Form-side rules for turning a selection or an edit into a storable record.
"""

from typing import List, Optional
from ..errors import TimeblockError
from ..models import Alignment, ExtraInfoType
from ..schemas import LogDraft, LogRecord, PlanRecord, Selection
from .catalog_service import CatalogService


class FormError(TimeblockError, ValueError):
    """The submitted form is incomplete."""


def selection_from_plan(plan: PlanRecord) -> Selection:
    """The "Log this" shortcut on a plan block: select exactly the plan's range."""
    return Selection(date=plan.date, start_time=plan.start_time, duration=plan.duration)


def plan_for_selection(selection: Selection, plans: List[PlanRecord]) -> Optional[PlanRecord]:
    for plan in plans:
        if plan.date == selection.date and plan.start_time == selection.start_time:
            return plan
    return None


def log_draft(selection: Selection, plans: List[PlanRecord], catalog: CatalogService) -> LogDraft:
    """
    Default values for logging a fresh selection. Time that was planned is
    prefilled from the plan and counted as aligned; anything else starts
    out as a disruption.
    """
    plan = plan_for_selection(selection, plans)
    if plan:
        return LogDraft(
            activity_description=plan.activity_description,
            purpose_id=plan.purpose_id,
            alignment=Alignment.ALIGNED,
            from_plan_id=plan.id,
        )

    purposes = catalog.purposes
    return LogDraft(
        purpose_id=purposes[0].id if purposes else "",
        alignment=Alignment.DISRUPTION,
    )


def build_plan_record(plan: PlanRecord) -> PlanRecord:
    if not plan.activity_description.strip():
        raise FormError("Activity description is required.")
    return plan


def build_log_record(entry: LogRecord, catalog: CatalogService) -> LogRecord:
    """Validate a submitted log form and drop extra info the purpose does not ask for."""
    if not entry.activity_description.strip():
        raise FormError("Activity description is required.")
    if entry.alignment == Alignment.DISRUPTION and not (entry.disruption_reason or "").strip():
        raise FormError("Disruption reason is required when the activity is a disruption.")

    purpose = catalog.purpose(entry.purpose_id)
    extra_info_type = purpose.extra_info_type if purpose else ExtraInfoType.NONE
    if extra_info_type == ExtraInfoType.TEXT and not (entry.purpose_extra_info or "").strip():
        raise FormError(f"{purpose.extra_info_prompt} is required for this purpose.")
    if extra_info_type == ExtraInfoType.PERSON and not entry.person_id:
        raise FormError(f"Selecting a person for '{purpose.extra_info_prompt}' is required.")

    return entry.model_copy(update={
        "purpose_extra_info": entry.purpose_extra_info if extra_info_type == ExtraInfoType.TEXT else None,
        "person_id": entry.person_id if extra_info_type == ExtraInfoType.PERSON else None,
        "disruption_reason": entry.disruption_reason if entry.alignment == Alignment.DISRUPTION else None,
    })
