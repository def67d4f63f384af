from sqlalchemy import Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.sqlite import JSON as SQLiteJSON
from datetime import datetime
from .database import Base
import enum

# Enums

class GridMode(str, enum.Enum):
    PLAN = "plan"
    LOG = "log"

class DelegationPotential(str, enum.Enum):
    ONLY_ME = "Only I Can Do This"
    SOMEONE_ELSE = "Someone Else Could Do This"
    ELIMINATE = "Could Be Eliminated"

class Alignment(str, enum.Enum):
    ALIGNED = "Aligned"          # Planned work
    DISRUPTION = "Disruption"    # Unplanned

class ExtraInfoType(str, enum.Enum):
    NONE = "none"
    TEXT = "text"
    PERSON = "person"

class SaveStatus(str, enum.Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"

# Display labels, in the order reports enumerate them
DELEGATION_POTENTIAL_OPTIONS = [
    (DelegationPotential.ONLY_ME, "Only I Can Do This"),
    (DelegationPotential.SOMEONE_ELSE, "Someone Else Could Do This"),
    (DelegationPotential.ELIMINATE, "Could Be Eliminated"),
]

ALIGNMENT_OPTIONS = [
    (Alignment.ALIGNED, "Aligned (Planned Work)"),
    (Alignment.DISRUPTION, "Disruption (Unplanned)"),
]

# Models

class UserData(Base):
    """
    Single-row snapshot of everything the planner owns. Records are kept
    as JSON keyed by ISO date, exactly as the in-memory store hands them over.
    """
    __tablename__ = "user_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    entries: Mapped[dict] = mapped_column(SQLiteJSON, default=dict)
    plans: Mapped[dict] = mapped_column(SQLiteJSON, default=dict)
    purpose_categories: Mapped[list] = mapped_column(SQLiteJSON, default=list)
    people: Mapped[list] = mapped_column(SQLiteJSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
