# app/services/tracker.py
"""
TrackerContext — the per-owner bundle of registry, event log and occupancy.

One context is built per request (or per session in a script) from a storage
backend and an owner id. Writes for the same owner are serialised through a
process-wide lock so a replay never observes a half-finished append, and the
occupancy state only moves forward after storage has confirmed the write.
"""

import threading
import weakref
from typing import Optional
from app.config import settings
from app.schemas.entry import EntryRecord, PersonSnapshot
from app.schemas.person import PersonCreate, PersonOut
from app.services import occupancy_engine, scan_classifier
from app.services.event_log import EventLog
from app.services.identity_codec import decode_payload
from app.services.occupancy_engine import OccupancyEngine, OccupancyState
from app.services.person_registry import PersonRegistry
from app.storage.base import Storage
from app.utils.clock import resolve_timezone
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Only owners with a live TrackerContext keep a lock; the map does not grow
# with every X-Owner-Id ever seen.
_owner_locks: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()
_owner_locks_guard = threading.Lock()


def owner_lock(owner_id: str) -> threading.RLock:
    with _owner_locks_guard:
        lock = _owner_locks.get(owner_id)
        if lock is None:
            lock = threading.RLock()
            _owner_locks[owner_id] = lock
        return lock


class TrackerContext:

    def __init__(self, storage: Storage, owner_id: str, report_timezone: Optional[str] = None):
        self.owner_id = owner_id
        self.storage = storage
        self.registry = PersonRegistry(storage, owner_id)
        self.event_log = EventLog(storage, owner_id)
        self.tz = resolve_timezone(report_timezone or settings.REPORT_TIMEZONE)
        self._lock = owner_lock(owner_id)
        self._engine: Optional[OccupancyEngine] = None

    # ── Occupancy ────────────────────────────────────────────────────────
    @property
    def engine(self) -> OccupancyEngine:
        if self._engine is None:
            with self._lock:
                self._engine = OccupancyEngine(self.event_log.records())
        return self._engine

    @property
    def state(self) -> OccupancyState:
        return self.engine.state

    def refresh(self) -> OccupancyState:
        """Drop the cache and replay the whole log from storage."""
        self._engine = None
        return self.state

    def today(self):
        return occupancy_engine.daily_summary(self.engine.entries, tz=self.tz)

    def daily(self):
        return occupancy_engine.daily_breakdown(self.engine.entries, tz=self.tz)

    def person_status(self, person_id: str) -> str:
        return occupancy_engine.person_status(self.state, person_id)

    # ── People ───────────────────────────────────────────────────────────
    def add_person(self, fields: PersonCreate) -> PersonOut:
        with self._lock:
            return self.registry.add_person(fields)

    def delete_person(self, person_id: str) -> None:
        with self._lock:
            self.registry.delete_person(person_id)

    # ── Entries ──────────────────────────────────────────────────────────
    def record(self, event_type: str, person: Optional[PersonSnapshot] = None) -> EntryRecord:
        with self._lock:
            engine = self.engine
            entry = self.event_log.append(event_type, person)
            engine.apply(entry)
        logger.info(f"[Tracker] owner={self.owner_id} now inside: {self.state.current_count}")
        return entry

    def clear_entries(self) -> int:
        with self._lock:
            removed = self.event_log.clear_all()
            self._engine = OccupancyEngine()
        return removed

    # ── Scanning ─────────────────────────────────────────────────────────
    def propose(self, raw_text: str) -> scan_classifier.Proposal:
        """Decoded QR text → suggested entry/exit for the operator to confirm."""
        payload = decode_payload(raw_text)
        proposal = scan_classifier.classify(payload, self.state)
        logger.info(f"[Tracker] Scan {payload.name} ({payload.id}) → propose {proposal.type}")
        return proposal

    def confirm(self, proposal: scan_classifier.Proposal, override: Optional[str] = None) -> EntryRecord:
        final = scan_classifier.resolve(proposal, override)
        if final.type != proposal.type:
            logger.info(f"[Tracker] Operator override {proposal.type} → {final.type} for {proposal.person.id}")
        return self.record(final.type, final.person)
