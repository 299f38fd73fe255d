"""
In-process store: the "local storage" backend. Data lives only as long as
the process; useful for demos, single-user kiosks and tests.
"""

import itertools
import threading
from app.schemas.entry import EntryRecord
from app.schemas.person import PersonRecord
from app.storage.base import Storage


class MemoryStorage(Storage):

    def __init__(self):
        self._people: dict[str, list[PersonRecord]] = {}
        self._entries: dict[str, list[EntryRecord]] = {}
        self._seq = itertools.count(1)
        self._lock = threading.Lock()

    def list_people(self, owner_id):
        with self._lock:
            return list(self._people.get(owner_id, []))

    def add_person(self, record):
        with self._lock:
            bucket = self._people.setdefault(record.owner_id, [])
            for existing in bucket:
                if existing.id == record.id:
                    return existing
            stored = record.model_copy(update={"seq": next(self._seq)})
            bucket.append(stored)
            return stored

    def delete_person(self, person_id, owner_id):
        with self._lock:
            bucket = self._people.get(owner_id, [])
            kept = [p for p in bucket if p.id != person_id]
            if len(kept) == len(bucket):
                return False
            self._people[owner_id] = kept
            return True

    def list_entries(self, owner_id):
        with self._lock:
            return list(self._entries.get(owner_id, []))

    def add_entry(self, record):
        with self._lock:
            bucket = self._entries.setdefault(record.owner_id, [])
            for existing in bucket:
                if existing.id == record.id:
                    return existing
            stored = record.model_copy(update={"seq": next(self._seq)})
            bucket.append(stored)
            return stored

    def clear_entries(self, owner_id):
        with self._lock:
            return len(self._entries.pop(owner_id, []))
