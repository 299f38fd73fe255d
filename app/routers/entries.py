"""Entry/exit log — history, manual recording and the administrative wipe."""

from typing import Optional
from fastapi import APIRouter, Depends
from app.config import settings
from app.dependencies import get_tracker
from app.schemas.entry import EntryCreate, EntryRecord
from app.services.tracker import TrackerContext

router = APIRouter()


@router.get("/entries", response_model=list[EntryRecord], summary="Entry/exit history")
def list_entries(type: Optional[str] = None, limit: Optional[int] = None,
                 tracker: TrackerContext = Depends(get_tracker)):
    """Newest first. Filter with ?type=entry|exit."""
    return tracker.event_log.list_all(event_type=type, limit=settings.ENTRY_LIST_LIMIT if limit is None else limit)


@router.post("/entries", response_model=EntryRecord, status_code=201, summary="Record an entry or exit")
def record_entry(body: EntryCreate, tracker: TrackerContext = Depends(get_tracker)):
    """Manual recording. Omit person for an anonymous head-count event."""
    return tracker.record(body.type, body.person)


@router.delete("/entries", summary="Clear all entries")
def clear_entries(tracker: TrackerContext = Depends(get_tracker)):
    """Irreversible. Removes every entry for the current owner."""
    removed = tracker.clear_entries()
    return {"status": "cleared", "removed": removed}
