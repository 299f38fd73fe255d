"""
SQLAlchemy-backed store over the `people` and `entries` tables.
Any SQLAlchemy error is rolled back and re-raised as PersistenceError so the
API can report it without leaking driver details.
"""

from functools import wraps
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.errors import PersistenceError
from app.models.entry import Entry
from app.models.person import Person
from app.schemas.entry import EntryRecord
from app.schemas.person import PersonRecord
from app.storage.base import Storage
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _wrap_db_errors(fn):
    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Storage failure in {fn.__name__}: {e}")
            raise PersistenceError(f"Storage unavailable during {fn.__name__}") from e
    return wrapper


class SqlStorage(Storage):

    def __init__(self, db: Session):
        self.db = db

    @_wrap_db_errors
    def list_people(self, owner_id):
        rows = (
            self.db.query(Person)
            .filter(Person.owner_id == owner_id)
            .order_by(Person.seq)
            .all()
        )
        return [PersonRecord.model_validate(r) for r in rows]

    @_wrap_db_errors
    def add_person(self, record):
        existing = self.db.query(Person).filter(Person.id == record.id).first()
        if existing:
            return PersonRecord.model_validate(existing)
        row = Person(**record.model_dump(exclude={"seq"}))
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return PersonRecord.model_validate(row)

    @_wrap_db_errors
    def delete_person(self, person_id, owner_id):
        row = (
            self.db.query(Person)
            .filter(Person.id == person_id, Person.owner_id == owner_id)
            .first()
        )
        if not row:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    @_wrap_db_errors
    def list_entries(self, owner_id):
        rows = (
            self.db.query(Entry)
            .filter(Entry.owner_id == owner_id)
            .order_by(Entry.seq)
            .all()
        )
        return [EntryRecord.model_validate(r) for r in rows]

    @_wrap_db_errors
    def add_entry(self, record):
        existing = self.db.query(Entry).filter(Entry.id == record.id).first()
        if existing:
            return EntryRecord.model_validate(existing)
        row = Entry(**record.model_dump(exclude={"seq"}))
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return EntryRecord.model_validate(row)

    @_wrap_db_errors
    def clear_entries(self, owner_id):
        removed = (
            self.db.query(Entry)
            .filter(Entry.owner_id == owner_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return removed

    def ping(self):
        try:
            self.db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False
