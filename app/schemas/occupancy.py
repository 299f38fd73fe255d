from pydantic import BaseModel
from typing import Optional


class OccupancyOut(BaseModel):
    inside_person_ids: list[str]
    anonymous_count: int
    current_count: int


class DailySummaryOut(BaseModel):
    date: str
    entries: int
    exits: int
    net_count: int     # may be negative


class PersonStatusOut(BaseModel):
    person_id: str
    status: str        # inside | outside
    last_event: Optional[str] = None
