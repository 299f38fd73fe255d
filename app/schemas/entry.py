from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional


class PersonSnapshot(BaseModel):
    """Identifying fields copied onto an entry when it is recorded."""
    id: str
    name: str
    enrollment_no: Optional[str] = None

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class EntryCreate(BaseModel):
    type: str                                 # entry | exit
    person: Optional[PersonSnapshot] = None


class EntryRecord(BaseModel):
    id: str
    owner_id: str
    type: str
    timestamp: datetime
    person_id: Optional[str] = None
    person_name: Optional[str] = None
    person_enrollment_no: Optional[str] = None
    seq: Optional[int] = None       # assigned by storage

    class Config:
        from_attributes = True

    @property
    def person(self) -> Optional[PersonSnapshot]:
        if self.person_id is None:
            return None
        return PersonSnapshot(id=self.person_id, name=self.person_name or "",
                              enrollment_no=self.person_enrollment_no)

    @property
    def sort_key(self) -> tuple:
        return (self.timestamp, self.seq if self.seq is not None else 0)
