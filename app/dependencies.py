"""FastAPI dependencies shared by the routers."""

from typing import Optional
from fastapi import Depends, Header
from app.config import settings
from app.services.tracker import TrackerContext
from app.storage import Storage, get_storage


def get_owner_id(x_owner_id: Optional[str] = Header(default=None)) -> str:
    """Opaque owner id from the auth layer in front of us; falls back to the configured default."""
    owner = (x_owner_id or "").strip()
    return owner or settings.DEFAULT_OWNER_ID


def get_tracker(
    storage: Storage = Depends(get_storage),
    owner_id: str = Depends(get_owner_id),
) -> TrackerContext:
    return TrackerContext(storage, owner_id)
