"""
Persistence interface consumed by the registry and the event log.

Backends only need list-all and append semantics over two record streams,
scoped by an opaque owner id. add_* calls are idempotent on the record id so
a caller may safely retry after a failed write.
"""

from abc import ABC, abstractmethod
from app.schemas.entry import EntryRecord
from app.schemas.person import PersonRecord


class Storage(ABC):

    @abstractmethod
    def list_people(self, owner_id: str) -> list[PersonRecord]:
        """All people for the owner, in insertion order."""

    @abstractmethod
    def add_person(self, record: PersonRecord) -> PersonRecord:
        """Persist a person, returning it with seq assigned."""

    @abstractmethod
    def delete_person(self, person_id: str, owner_id: str) -> bool:
        """Remove a person. False if the owner has no such person."""

    @abstractmethod
    def list_entries(self, owner_id: str) -> list[EntryRecord]:
        """All entries for the owner, in insertion order."""

    @abstractmethod
    def add_entry(self, record: EntryRecord) -> EntryRecord:
        """Append an entry, returning it with seq assigned."""

    @abstractmethod
    def clear_entries(self, owner_id: str) -> int:
        """Remove every entry for the owner. Returns how many were removed."""

    def ping(self) -> bool:
        return True
