"""Selects the storage backend from settings.STORAGE_BACKEND."""

from fastapi import Depends
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app.storage.base import Storage
from app.storage.memory_storage import MemoryStorage
from app.storage.sql_storage import SqlStorage

# The memory backend must outlive a single request.
_memory_storage = MemoryStorage()


def get_storage(db: Session = Depends(get_db)) -> Storage:
    """FastAPI dependency — storage for the current request."""
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        return _memory_storage
    if backend == "sql":
        return SqlStorage(db)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")
