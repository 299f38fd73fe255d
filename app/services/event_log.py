# app/services/event_log.py
"""
Event Log: append-only store of entry/exit records.

append() is the only validation point for event types — anything that is
not "entry" or "exit" stops here and never reaches the occupancy fold.
"""

from typing import Optional
from app.errors import ValidationError
from app.schemas.entry import EntryRecord, PersonSnapshot
from app.storage.base import Storage
from app.utils.clock import utcnow
from app.utils.ids import generate_id
from app.utils.logger import get_logger

logger = get_logger(__name__)

ENTRY = "entry"
EXIT = "exit"
EVENT_TYPES = (ENTRY, EXIT)


def validate_type(event_type) -> str:
    if event_type not in EVENT_TYPES:
        raise ValidationError(
            f"Unknown event type {event_type!r}, expected 'entry' or 'exit'",
            code=ValidationError.INVALID_TYPE,
        )
    return event_type


class EventLog:

    def __init__(self, storage: Storage, owner_id: str):
        self.storage = storage
        self.owner_id = owner_id

    def append(self, event_type: str, person: Optional[PersonSnapshot] = None) -> EntryRecord:
        validate_type(event_type)
        record = EntryRecord(
            id=generate_id("entry"),
            owner_id=self.owner_id,
            type=event_type,
            timestamp=utcnow(),
            person_id=person.id if person else None,
            person_name=person.name if person else None,
            person_enrollment_no=person.enrollment_no if person else None,
        )
        stored = self.storage.add_entry(record)
        who = f"{stored.person_name} ({stored.person_id})" if stored.person_id else "anonymous"
        logger.info(f"[EventLog] {stored.type.upper()} | {who} | owner={self.owner_id}")
        return stored

    def records(self) -> list[EntryRecord]:
        """Raw records in storage order, for the occupancy engine."""
        return self.storage.list_entries(self.owner_id)

    def list_all(self, event_type: Optional[str] = None, limit: Optional[int] = None) -> list[EntryRecord]:
        """Newest first; same-timestamp records keep the later append first."""
        entries = sorted(self.records(), key=lambda e: e.sort_key, reverse=True)
        if event_type:
            validate_type(event_type)
            entries = [e for e in entries if e.type == event_type]
        if limit is not None:
            entries = entries[:max(0, limit)]
        return entries

    def clear_all(self) -> int:
        """Irreversible wipe of every entry for this owner."""
        removed = self.storage.clear_entries(self.owner_id)
        logger.warning(f"[EventLog] Cleared {removed} entries for owner={self.owner_id}")
        return removed
