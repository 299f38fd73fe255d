from pydantic import BaseModel, field_validator
from typing import Optional


class IdentityPayload(BaseModel):
    """JSON embedded in a person's QR code. Unknown keys are ignored."""
    id: str
    name: str
    enrollmentNo: Optional[str] = None
    timestamp: Optional[str] = None    # informational only

    model_config = {"extra": "ignore"}

    @field_validator("id", "name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value
