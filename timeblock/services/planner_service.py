"""
Planner session service that keeps the engine state in memory.
"""

import logging
from datetime import date
from typing import Callable, Optional
from sqlalchemy.orm import Session
from ..models import GridMode, SaveStatus
from ..reporting.aggregator import build_report
from ..reporting.windows import TimeWindow, local_today
from ..schemas import (
    DayViewOut, LogBlock, LogRecord, Person, PlanBlock, PlanRecord, PurposeCategory,
    PurposeCreate, ReleaseOut, ReportOut, SelectionState, Selection, SlotOut, Snapshot,
)
from ..scheduling.core.occupancy import OccupancySet, build_occupancy
from ..scheduling.core.overlay import hidden_plan_ids, visible_plans
from ..scheduling.core.constants import IDLE
from ..scheduling.core.range_selector import RangeSelector
from ..scheduling.core.slot_grid import SlotGrid, DEFAULT_GRID
from ..scheduling.utils.slot_utils import find_record_by_id
from ..errors import StaleRecordError
from . import forms
from .catalog_service import CatalogService
from .persistence import DebouncedSaver, SnapshotRepository
from .record_store import RecordStore

logger = logging.getLogger(__name__)


class PlannerService:
    """
    Owns the record store, the catalog and the drag selector for the day
    currently on screen. All engine work happens synchronously in here;
    saving is handed off to the debounced saver.
    """

    def __init__(self, grid: SlotGrid = DEFAULT_GRID, store: Optional[RecordStore] = None,
                 catalog: Optional[CatalogService] = None, saver: Optional[DebouncedSaver] = None,
                 today_fn: Callable[[], date] = local_today):
        self.grid = grid
        self.store = store or RecordStore(grid)
        self.catalog = catalog or CatalogService()
        self.saver = saver
        self.today_fn = today_fn
        self.current_date = today_fn()
        self.selector = RangeSelector(grid, self.occupancy_for, self.current_date)
        self.store.add_listener(self._schedule_save)

# ================================
# PERSISTENCE
# ================================

    def attach_saver(self, saver: DebouncedSaver):
        self.saver = saver

    @property
    def save_status(self) -> SaveStatus:
        return self.saver.status if self.saver else SaveStatus.IDLE

    def snapshot(self) -> dict:
        snapshot = self.store.snapshot()
        snapshot.update(self.catalog.snapshot())
        return snapshot

    def _schedule_save(self):
        if self.saver:
            self.saver.schedule(self.snapshot())

    def load_snapshot(self, snapshot: dict):
        """Replace engine state with a snapshot supplied by the persistence layer."""
        data = Snapshot.model_validate(snapshot)
        self.catalog.load(data.purpose_categories, data.people)
        self.store.load(data.entries, data.plans)
        self.selector.reset()
        logger.info(f"Planner loaded with {len(self.catalog.purposes)} purposes and {len(self.catalog.people)} people")

    def load_from(self, db: Session, repository: Optional[SnapshotRepository] = None):
        repository = repository or SnapshotRepository()
        self.load_snapshot(repository.load(db))

# ================================
# NAVIGATION & MODE
# ================================

    def go_to(self, day: date):
        if day != self.current_date:
            self.current_date = day
            self.selector.set_day(day)

    @property
    def mode(self) -> GridMode:
        return self.selector.mode

    def set_mode(self, mode: GridMode):
        self.selector.set_mode(mode)

    def occupancy_for(self, mode: GridMode, day: Optional[date] = None) -> OccupancySet:
        day = day or self.current_date
        return build_occupancy(self.store.records_for(day, mode), mode, self.grid)

# ================================
# DRAG GESTURES
# ================================

    def press(self, day: date, index: int) -> bool:
        self.go_to(day)
        return self.selector.press(index)

    def move(self, day: date, index: int) -> SelectionState:
        self.go_to(day)
        self.selector.move(index)
        return self.selection_state()

    def release(self, day: date) -> ReleaseOut:
        """
        Finish the drag. A committed selection in log mode comes back with the
        default log form values; in plan mode it goes straight to plan creation.
        """
        self.go_to(day)
        mode = self.selector.mode
        return self._offer(self.selector.release(), mode)

    def cancel(self, day: date) -> ReleaseOut:
        self.go_to(day)
        mode = self.selector.mode
        return self._offer(self.selector.cancel(), mode)

    def log_from_plan(self, day: date, plan_id: str) -> ReleaseOut:
        plan = find_record_by_id(plan_id, self.store.plans_for(day))
        if plan is None:
            raise StaleRecordError(day.isoformat(), plan_id)
        span = self.grid.span(plan.start_time, plan.duration)
        if self.occupancy_for(GridMode.LOG, day).intersects(span.start, span.stop - 1):
            logger.debug(f"Plan {plan_id} on {day} overlaps logged time and cannot be logged as-is")
            return self._offer(None, GridMode.LOG)
        return self._offer(forms.selection_from_plan(plan), GridMode.LOG)

    def _offer(self, selection: Optional[Selection], mode: GridMode) -> ReleaseOut:
        if selection is None:
            return ReleaseOut(committed=False, mode=mode)
        draft = None
        if mode == GridMode.LOG:
            draft = forms.log_draft(selection, self.store.plans_for(selection.date), self.catalog)
        return ReleaseOut(committed=True, mode=mode, selection=selection, draft=draft)

    def selection_state(self) -> SelectionState:
        candidate = self.selector.candidate()
        return SelectionState(
            state=self.selector.state,
            mode=self.selector.mode,
            start_index=candidate[0] if candidate else None,
            end_index=candidate[1] if candidate else None,
            conflict=self.selector.has_conflict,
        )

# ================================
# DAY VIEW
# ================================

    def day_view(self, day: date) -> DayViewOut:
        """
        Everything needed to draw one day: grid, blocks and the live selection.
        Read-only: viewing another day leaves a drag on the current day alone.
        """
        plans = self.store.plans_for(day)
        entries = self.store.entries_for(day)
        plan_occupancy = build_occupancy(plans, GridMode.PLAN, self.grid)
        log_occupancy = build_occupancy(entries, GridMode.LOG, self.grid)

        slots = [
            SlotOut(
                index=slot.index,
                time=slot.time,
                is_start_of_hour=slot.is_start_of_hour,
                planned=slot.index in plan_occupancy,
                logged=slot.index in log_occupancy,
            )
            for slot in self.grid
        ]
        plan_blocks = [
            PlanBlock(
                plan=plan,
                start_index=self.grid.slot_index_of(plan.start_time),
                slot_count=plan.duration // self.grid.slot_minutes,
                color=self.catalog.color_for(plan.purpose_id),
            )
            for plan in visible_plans(plans, log_occupancy, self.grid)
        ]
        log_blocks = []
        for entry in entries:
            person = self.catalog.person(entry.person_id)
            log_blocks.append(LogBlock(
                entry=entry,
                start_index=self.grid.slot_index_of(entry.start_time),
                slot_count=entry.duration // self.grid.slot_minutes,
                color=self.catalog.color_for(entry.purpose_id),
                person_name=person.name if person else None,
            ))

        return DayViewOut(
            date=day,
            mode=self.mode,
            slots=slots,
            plans=plan_blocks,
            hidden_plan_ids=hidden_plan_ids(plans, log_occupancy, self.grid),
            entries=log_blocks,
            selection=self.selection_state() if day == self.current_date else SelectionState(state=IDLE, mode=self.mode),
            save_status=self.save_status,
        )

# ================================
# RECORDS & CATALOG
# ================================

    def save_plan(self, plan: PlanRecord) -> PlanRecord:
        return self.store.upsert_plan(forms.build_plan_record(plan))

    def delete_plan(self, day: date, plan_id: str) -> PlanRecord:
        return self.store.remove_plan(day, plan_id)

    def save_entry(self, entry: LogRecord) -> LogRecord:
        return self.store.upsert_entry(forms.build_log_record(entry, self.catalog))

    def delete_entry(self, day: date, entry_id: str) -> LogRecord:
        return self.store.remove_entry(day, entry_id)

    def add_purpose(self, purpose_in: PurposeCreate) -> PurposeCategory:
        purpose = self.catalog.add_purpose(purpose_in)
        self._schedule_save()
        return purpose

    def add_person(self, name: str) -> Person:
        person = self.catalog.add_person(name)
        self._schedule_save()
        return person

# ================================
# REPORTS
# ================================

    def report(self, window: TimeWindow, today: Optional[date] = None) -> ReportOut:
        return build_report(
            self.store.entries.days,
            window,
            self.catalog.purposes,
            self.catalog.people,
            today=today or self.today_fn(),
        )


# Global planner service instance
planner_service = PlannerService()


def get_planner() -> PlannerService:
    """FastAPI dependency; tests override it with a fresh service."""
    return planner_service
