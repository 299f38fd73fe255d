from pydantic import BaseModel
from typing import Optional
from app.schemas.entry import PersonSnapshot


class ScanRequest(BaseModel):
    raw: str           # text decoded from the QR code by the client


class ProposalOut(BaseModel):
    type: str
    person: PersonSnapshot


class ScanConfirm(BaseModel):
    type: str
    person: PersonSnapshot
    override: Optional[str] = None   # operator's explicit choice, wins over type
