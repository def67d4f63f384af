"""
Domain errors raised by the planner engine.

Rejected drag gestures are not errors; the range selector reports them
as a refused press or an empty release.
"""


class TimeblockError(Exception):
    """Base class for planner errors."""


class StaleRecordError(TimeblockError, LookupError):
    """An upsert or remove referenced an id that is not in the day's records."""

    def __init__(self, day: str, record_id: str):
        self.day = day
        self.record_id = record_id
        super().__init__(f"No record with id {record_id!r} on {day}")


class InvalidRangeError(TimeblockError, ValueError):
    """A time range does not fit inside the configured slot grid."""


class CatalogError(TimeblockError, ValueError):
    """A purpose or person could not be added to the catalog."""
