"""
Entry/exit log table. Append-only: rows are inserted and only ever removed
by the owner-wide clear. The person columns are a snapshot taken when the
event was recorded, not a foreign key.
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base


class Entry(Base):
    __tablename__ = "entries"

    seq = Column(Integer, primary_key=True, autoincrement=True)   # tie-break for equal timestamps
    id = Column(String(64), unique=True, nullable=False, index=True)
    owner_id = Column(String(100), nullable=False, index=True)
    type = Column(String(10), nullable=False)        # entry | exit
    timestamp = Column(DateTime, nullable=False, index=True)
    person_id = Column(String(64), index=True)       # null for anonymous events
    person_name = Column(String(200))
    person_enrollment_no = Column(String(100))

    def __repr__(self):
        return f"<Entry {self.id} type={self.type} person={self.person_id}>"
