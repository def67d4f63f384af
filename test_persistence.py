"""
Tests for the snapshot repository and the debounced saver
"""

import time
from datetime import date

import pytest
from apscheduler.schedulers.background import BackgroundScheduler
from timeblock.models import SaveStatus, UserData
from timeblock.services.persistence import EMPTY_SNAPSHOT, DebouncedSaver, SnapshotRepository
from timeblock.services.planner_service import PlannerService
from timeblock.services.record_store import RecordStore
from timeblock.services.catalog_service import CatalogService

TODAY = date(2024, 3, 13)


class FakeScheduler:
    """Holds jobs until the test fires them."""

    def __init__(self):
        self.jobs = {}
        self.running = False

    def add_job(self, func=None, id=None, **kwargs):
        self.jobs[id] = func

    def get_job(self, job_id):
        return self.jobs.get(job_id)

    def remove_job(self, job_id):
        del self.jobs[job_id]

    def start(self):
        self.running = True

    def shutdown(self):
        self.running = False

    def fire(self):
        jobs, self.jobs = self.jobs, {}
        for func in jobs.values():
            func()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def saved():
    return []


@pytest.fixture
def saver(scheduler, saved):
    return DebouncedSaver(saved.append, delay_seconds=1.0, scheduler=scheduler)


# ================================
# DEBOUNCED SAVER
# ================================

def test_rapid_changes_coalesce_into_one_save(saver, scheduler, saved):
    saver.schedule({"n": 1})
    saver.schedule({"n": 2})
    saver.schedule({"n": 3})

    assert len(scheduler.jobs) == 1
    assert saved == []

    scheduler.fire()

    assert saved == [{"n": 3}]
    assert saver.status == SaveStatus.SAVED
    assert saver.last_saved_at is not None
    assert not saver.has_pending


def test_flush_saves_immediately_and_cancels_timer(saver, scheduler, saved):
    saver.schedule({"n": 1})
    saver.flush()

    assert saved == [{"n": 1}]
    assert scheduler.jobs == {}


def test_flush_with_nothing_pending_is_a_no_op(saver, saved):
    saver.flush()
    assert saved == []
    assert saver.status == SaveStatus.IDLE


def test_failed_save_sets_error_status(scheduler):
    def broken(snapshot):
        raise IOError("disk full")

    saver = DebouncedSaver(broken, scheduler=scheduler)
    saver.schedule({"n": 1})
    scheduler.fire()

    assert saver.status == SaveStatus.ERROR
    assert not saver.has_pending


def test_change_during_save_is_written_by_a_follow_up_job(scheduler, saved):
    saver = None

    def save_and_edit(snapshot):
        saved.append(snapshot)
        if len(saved) == 1:
            # Another mutation arrives while the first write is in flight
            saver.schedule({"n": 2})

    saver = DebouncedSaver(save_and_edit, scheduler=scheduler)
    saver.schedule({"n": 1})
    scheduler.fire()

    assert saved == [{"n": 1}]
    assert saver.has_pending
    assert saver.status != SaveStatus.SAVED
    assert DebouncedSaver.JOB_ID in scheduler.jobs

    scheduler.fire()

    assert saved == [{"n": 1}, {"n": 2}]
    assert saver.status == SaveStatus.SAVED
    assert not saver.has_pending


def test_slow_save_does_not_drop_later_changes(saved):
    def slow_save(snapshot):
        time.sleep(0.4)
        saved.append(snapshot)

    saver = DebouncedSaver(slow_save, delay_seconds=0.05, scheduler=BackgroundScheduler())
    saver.start()
    try:
        saver.schedule({"n": 1})
        time.sleep(0.15)
        saver.schedule({"n": 2})

        deadline = time.monotonic() + 5
        while (saver.has_pending or saver.status != SaveStatus.SAVED) and time.monotonic() < deadline:
            time.sleep(0.05)
    finally:
        saver.stop()

    assert saved[-1] == {"n": 2}
    assert saver.status == SaveStatus.SAVED
    assert not saver.has_pending


def test_flush_waits_for_a_running_save_then_writes_the_rest(scheduler, saved):
    saver = None

    def save_and_edit(snapshot):
        saved.append(snapshot)
        if len(saved) == 1:
            saver.schedule({"n": 2})

    saver = DebouncedSaver(save_and_edit, scheduler=scheduler)
    saver.schedule({"n": 1})
    saver.flush()

    assert saved == [{"n": 1}, {"n": 2}]
    assert saver.status == SaveStatus.SAVED


def test_stop_flushes_pending_save_with_real_scheduler(saved):
    saver = DebouncedSaver(saved.append, delay_seconds=60, scheduler=BackgroundScheduler())
    saver.start()
    saver.schedule({"n": 1})

    saver.stop()

    assert saved == [{"n": 1}]
    assert not saver.scheduler.running


# ================================
# SNAPSHOT REPOSITORY
# ================================

def test_load_from_empty_database(db_session):
    assert SnapshotRepository().load(db_session) == EMPTY_SNAPSHOT


def test_save_keeps_a_single_row(db_session):
    repository = SnapshotRepository()
    repository.save(db_session, {"entries": {}, "plans": {"2024-03-13": []}})
    repository.save(db_session, {"entries": {}, "plans": {}, "people": [{"id": "lee", "name": "Lee"}]})

    assert db_session.query(UserData).count() == 1
    assert repository.load(db_session)["people"] == [{"id": "lee", "name": "Lee"}]


# ================================
# PLANNER INTEGRATION
# ================================

def test_mutations_schedule_a_snapshot_of_that_moment(planner, saver, scheduler, saved, make_plan):
    planner.attach_saver(saver)

    stored = planner.save_plan(make_plan())
    planner.add_person("Lee")
    scheduler.fire()

    assert len(saved) == 1
    snapshot = saved[0]
    assert snapshot["plans"]["2024-03-13"][0]["id"] == stored.id
    assert snapshot["people"][-1]["name"] == "Lee"
    assert planner.save_status == SaveStatus.SAVED


def test_save_failure_keeps_in_memory_state(planner, scheduler, make_plan):
    def broken(snapshot):
        raise IOError("database is locked")

    planner.attach_saver(DebouncedSaver(broken, scheduler=scheduler))
    stored = planner.save_plan(make_plan())
    scheduler.fire()

    assert planner.save_status == SaveStatus.ERROR
    assert planner.store.plans_for(TODAY) == [stored]


def test_state_survives_a_restart(grid, catalog, session_factory, make_plan, make_entry):
    repository = SnapshotRepository(session_factory=session_factory)
    first = PlannerService(grid=grid, store=RecordStore(grid), catalog=catalog, today_fn=lambda: TODAY)
    saver = DebouncedSaver(repository.save_snapshot, scheduler=FakeScheduler())
    first.attach_saver(saver)

    plan = first.save_plan(make_plan("09:00", 30))
    entry = first.save_entry(make_entry("10:00", 15))
    saver.flush()

    second = PlannerService(grid=grid, store=RecordStore(grid), catalog=CatalogService(),
                            today_fn=lambda: TODAY)
    db = session_factory()
    try:
        second.load_from(db, repository)
    finally:
        db.close()

    assert second.store.plans_for(TODAY) == [plan]
    assert second.store.entries_for(TODAY) == [entry]
    assert [purpose.id for purpose in second.catalog.purposes] == [p.id for p in catalog.purposes]
