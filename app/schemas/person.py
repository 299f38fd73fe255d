from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class PersonCreate(BaseModel):
    name: str
    enrollment_no: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class PersonRecord(BaseModel):
    id: str
    owner_id: str
    name: str
    enrollment_no: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    qr_code_data: Optional[str] = None
    created_at: datetime
    seq: Optional[int] = None       # assigned by storage

    class Config:
        from_attributes = True


class PersonOut(PersonRecord):
    qr_code_image: Optional[str] = None   # PNG data URL, only on create
