"""
Shared pytest fixtures: a fixed grid, a fixed catalog, a fresh planner
and an in-memory SQLite database.
"""

import os

# Keep the app's import-time create_all away from the working directory
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timeblock.database import Base
from timeblock.models import Alignment, ExtraInfoType
from timeblock.schemas import ColorScheme, LogRecord, Person, PlanRecord, PurposeCategory
from timeblock.scheduling.core.slot_grid import SlotGrid
from timeblock.services.catalog_service import CatalogService
from timeblock.services.planner_service import PlannerService
from timeblock.services.record_store import RecordStore

# A Wednesday, so "this week" runs 2024-03-11 .. 2024-03-17
TODAY = date(2024, 3, 13)


def _color(name):
    return ColorScheme(bg=f"bg-{name}-100", border=f"border-{name}-400", text=f"text-{name}-800")


@pytest.fixture
def grid():
    return SlotGrid("08:00", "17:30", 15)


@pytest.fixture
def purposes():
    return [
        PurposeCategory(id="bau", label="BAU", color=_color("purple")),
        PurposeCategory(id="project", label="Project Work", extra_info_type=ExtraInfoType.TEXT,
                        extra_info_prompt="Which project?", color=_color("blue")),
        PurposeCategory(id="meeting", label="Meeting", extra_info_type=ExtraInfoType.PERSON,
                        extra_info_prompt="Who set the meeting?", color=_color("yellow"), is_meeting=True),
        PurposeCategory(id="support", label="Other Dept Support", extra_info_type=ExtraInfoType.PERSON,
                        extra_info_prompt="Who was it for?", color=_color("green")),
    ]


@pytest.fixture
def people():
    return [Person(id="alan", name="Alan F"), Person(id="roxy", name="Roxy")]


@pytest.fixture
def catalog(purposes, people):
    return CatalogService(purposes, people)


@pytest.fixture
def store(grid):
    return RecordStore(grid)


@pytest.fixture
def planner(grid, store, catalog):
    return PlannerService(grid=grid, store=store, catalog=catalog, today_fn=lambda: TODAY)


@pytest.fixture
def make_plan():
    def factory(start_time="09:00", duration=30, day=TODAY, **fields):
        fields.setdefault("activity_description", "Planned work")
        fields.setdefault("purpose_id", "bau")
        return PlanRecord(date=day, start_time=start_time, duration=duration, **fields)
    return factory


@pytest.fixture
def make_entry():
    def factory(start_time="09:00", duration=30, day=TODAY, **fields):
        fields.setdefault("activity_description", "Logged work")
        fields.setdefault("purpose_id", "bau")
        if fields.get("alignment") == Alignment.DISRUPTION:
            fields.setdefault("disruption_reason", "Walk-up request")
        return LogRecord(date=day, start_time=start_time, duration=duration, **fields)
    return factory


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
