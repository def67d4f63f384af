from pydantic import BaseModel, Field, field_validator
from datetime import date as _date
from typing import Optional, List
import re
from .models import GridMode, DelegationPotential, Alignment, ExtraInfoType, SaveStatus

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# ----------------- Catalog Schemas ---------------------

class ColorScheme(BaseModel):
    bg: str
    border: str
    text: str

class PurposeCategory(BaseModel):
    id: str
    label: str
    extra_info_type: ExtraInfoType = ExtraInfoType.NONE
    extra_info_prompt: str = ""
    color: ColorScheme
    # None means "not declared"; reports then fall back to the label
    is_meeting: Optional[bool] = None

    class Config:
        from_attributes = True

class PurposeCreate(BaseModel):
    label: str
    extra_info_type: ExtraInfoType = ExtraInfoType.NONE
    extra_info_prompt: str = ""
    is_meeting: Optional[bool] = None

class Person(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True

class PersonCreate(BaseModel):
    name: str

class CatalogOut(BaseModel):
    purpose_categories: List[PurposeCategory]
    people: List[Person]

# ----------------- Record Schemas ---------------------

class TimeRange(BaseModel):
    date: _date
    start_time: str = Field(..., description="Slot start in zero-padded HH:MM format")
    duration: int = Field(..., description="Length in minutes, a positive multiple of 15")

    @field_validator("start_time")
    @classmethod
    def check_start_time(cls, value: str) -> str:
        if not HHMM_PATTERN.match(value):
            raise ValueError("start_time must be zero-padded HH:MM")
        if int(value[3:]) % 15 != 0:
            raise ValueError("start_time must fall on a 15 minute boundary")
        return value

    @field_validator("duration")
    @classmethod
    def check_duration(cls, value: int) -> int:
        if value <= 0 or value % 15 != 0:
            raise ValueError("duration must be a positive multiple of 15")
        return value

    @property
    def day_key(self) -> str:
        return self.date.isoformat()

class Selection(TimeRange):
    """Uncommitted range produced by a drag gesture. Never stored."""

class PlanRecord(TimeRange):
    id: Optional[str] = None  # Assigned by the record store
    activity_description: str
    purpose_id: str

    class Config:
        from_attributes = True

class LogRecord(TimeRange):
    id: Optional[str] = None  # Assigned by the record store
    activity_description: str
    purpose_id: str
    purpose_extra_info: Optional[str] = None  # For text-based purposes
    person_id: Optional[str] = None           # For person-based purposes
    delegation_potential: DelegationPotential = DelegationPotential.ONLY_ME
    alignment: Alignment = Alignment.ALIGNED
    disruption_reason: Optional[str] = None

    class Config:
        from_attributes = True

class LogDraft(BaseModel):
    """Default form values offered when logging a fresh selection."""
    activity_description: str = ""
    purpose_id: str = ""
    delegation_potential: DelegationPotential = DelegationPotential.ONLY_ME
    alignment: Alignment = Alignment.DISRUPTION
    from_plan_id: Optional[str] = None

class Snapshot(BaseModel):
    entries: dict[str, List[LogRecord]] = Field(default_factory=dict)
    plans: dict[str, List[PlanRecord]] = Field(default_factory=dict)
    purpose_categories: List[PurposeCategory] = Field(default_factory=list)
    people: List[Person] = Field(default_factory=list)

# ----------------- Day View Schemas ---------------------

class SlotGesture(BaseModel):
    index: int

class ModeChange(BaseModel):
    mode: GridMode

class SlotOut(BaseModel):
    index: int
    time: str
    is_start_of_hour: bool
    planned: bool
    logged: bool

class SelectionState(BaseModel):
    state: str
    mode: GridMode
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    conflict: bool = False

class PlanBlock(BaseModel):
    plan: PlanRecord
    start_index: int
    slot_count: int
    color: ColorScheme

class LogBlock(BaseModel):
    entry: LogRecord
    start_index: int
    slot_count: int
    color: ColorScheme
    person_name: Optional[str] = None

class DayViewOut(BaseModel):
    date: _date
    mode: GridMode
    slots: List[SlotOut]
    plans: List[PlanBlock]
    hidden_plan_ids: List[str]
    entries: List[LogBlock]
    selection: SelectionState
    save_status: SaveStatus

class ReleaseOut(BaseModel):
    committed: bool
    mode: GridMode
    selection: Optional[Selection] = None
    draft: Optional[LogDraft] = None

# ----------------- Report Schemas ---------------------

class BreakdownEntry(BaseModel):
    key: str
    label: str
    duration: int
    percentage: float

class PurposeBreakdownEntry(BreakdownEntry):
    color: ColorScheme

class PersonBreakdownEntry(BaseModel):
    id: str
    name: str
    total: int
    planned_meeting: int
    unplanned_meeting: int
    percentage: float

class ReportOut(BaseModel):
    window: str
    window_label: str
    total_duration: int
    total_label: str
    entry_count: int
    planned_work_percentage: float
    disruption_percentage: float
    purposes: List[PurposeBreakdownEntry]
    delegation: List[BreakdownEntry]
    alignment: List[BreakdownEntry]
    people: List[PersonBreakdownEntry]
