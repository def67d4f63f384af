"""
Snapshot persistence: a single user-data row plus a debounced background saver.

The engine never waits on a save. Every mutation re-arms one delayed job with
the latest full snapshot, so edits made before the job fires are coalesced
into a single write.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session
from ..config import SAVE_DEBOUNCE_SECONDS
from ..database import SessionLocal
from ..models import SaveStatus, UserData

logger = logging.getLogger(__name__)

EMPTY_SNAPSHOT = {"entries": {}, "plans": {}, "purpose_categories": [], "people": []}


class SnapshotRepository:
    """Reads and writes the user-data row."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def load(self, db: Session) -> dict:
        row = db.query(UserData).order_by(UserData.updated_at.desc()).first()
        if not row:
            return dict(EMPTY_SNAPSHOT)
        return {
            "entries": row.entries or {},
            "plans": row.plans or {},
            "purpose_categories": row.purpose_categories or [],
            "people": row.people or [],
        }

    def save(self, db: Session, snapshot: dict):
        row = db.query(UserData).first()
        if not row:
            row = UserData()
            db.add(row)
        row.entries = snapshot.get("entries", {})
        row.plans = snapshot.get("plans", {})
        row.purpose_categories = snapshot.get("purpose_categories", [])
        row.people = snapshot.get("people", [])
        row.updated_at = datetime.utcnow()
        db.commit()

    def save_snapshot(self, snapshot: dict):
        """Save in a session of its own; called from the saver's worker thread."""
        db = self.session_factory()
        try:
            self.save(db, snapshot)
        finally:
            db.close()


class DebouncedSaver:
    """
    Delayed save job re-armed on every mutation.

    The snapshot is captured when the mutation happens, so the worker thread
    never reads live engine state. A mutation that lands while a save is
    running is written by a follow-up job once that save finishes.
    """
    JOB_ID = "snapshot_save"

    def __init__(self, save_fn: Callable[[dict], None], delay_seconds: float = SAVE_DEBOUNCE_SECONDS,
                 scheduler: Optional[BackgroundScheduler] = None):
        self.save_fn = save_fn
        self.delay_seconds = delay_seconds
        self.scheduler = scheduler or BackgroundScheduler()
        self.status = SaveStatus.IDLE
        self.last_saved_at: Optional[datetime] = None
        self._pending: Optional[dict] = None
        # _lock guards _pending and status; _save_lock keeps saves one at a time
        self._lock = threading.Lock()
        self._save_lock = threading.Lock()

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def start(self):
        if not self.scheduler.running:
            self.scheduler.start()

    def stop(self):
        """Write anything still pending, then stop the background scheduler."""
        self.flush()
        if self.scheduler.running:
            self.scheduler.shutdown()

    def schedule(self, snapshot: dict):
        """Replace the pending snapshot and push the save out by the debounce delay."""
        with self._lock:
            self._pending = snapshot
        self._arm()

    def _arm(self):
        self.scheduler.add_job(
            func=self._run,
            trigger="date",
            run_date=datetime.now() + timedelta(seconds=self.delay_seconds),
            id=self.JOB_ID,
            replace_existing=True,
            name="Debounced snapshot save",
        )

    def flush(self):
        """Run the pending save now instead of waiting for the timer."""
        if self.scheduler.get_job(self.JOB_ID):
            self.scheduler.remove_job(self.JOB_ID)
        self._run(rearm=False)

    def _run(self, rearm: bool = True):
        with self._save_lock:
            with self._lock:
                snapshot, self._pending = self._pending, None
                if snapshot is None:
                    return
                self.status = SaveStatus.SAVING

            failed = False
            try:
                self.save_fn(snapshot)
            except Exception as e:
                # In-memory state stays authoritative; the next mutation schedules another save
                failed = True
                logger.error(f"Failed to save snapshot: {e}")

            with self._lock:
                still_pending = self._pending is not None
                if failed:
                    self.status = SaveStatus.ERROR
                elif not still_pending:
                    self.status = SaveStatus.SAVED
                    self.last_saved_at = datetime.utcnow()

        if not failed:
            logger.info(f"Saved snapshot with {len(snapshot.get('entries', {}))} logged days and {len(snapshot.get('plans', {}))} planned days")
        if still_pending:
            if rearm:
                # The job re-armed during the save was skipped while this one ran
                self._arm()
            else:
                self._run(rearm=False)
