# app/services/person_registry.py
"""
Person Registry: register, list and remove people.

Registration builds the identity payload, hands it to the QR renderer and
persists the person. Removing a person never touches the entry log — past
entries keep their own snapshot of the person's name and enrollment number.
"""

from typing import Optional
from app.errors import NotFoundError, ValidationError
from app.schemas.person import PersonCreate, PersonOut, PersonRecord
from app.services import identity_codec, qr_renderer
from app.storage.base import Storage
from app.utils.clock import utcnow
from app.utils.ids import generate_id
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PersonRegistry:

    def __init__(self, storage: Storage, owner_id: str):
        self.storage = storage
        self.owner_id = owner_id

    def add_person(self, fields: PersonCreate) -> PersonOut:
        name = (fields.name or "").strip()
        if not name:
            raise ValidationError("Please enter a name", code=ValidationError.MISSING_NAME)

        record = PersonRecord(
            id=generate_id("person"),
            owner_id=self.owner_id,
            name=name,
            enrollment_no=_clean(fields.enrollment_no),
            email=_clean(fields.email),
            phone=_clean(fields.phone),
            created_at=utcnow(),
        )
        record.qr_code_data = identity_codec.encode_payload(record)
        image = qr_renderer.render_data_url(record.qr_code_data)

        stored = self.storage.add_person(record)
        logger.info(f"[Registry] Added {stored.id} ({stored.name}) owner={self.owner_id}")
        return PersonOut(**stored.model_dump(), qr_code_image=image)

    def list_people(self) -> list[PersonRecord]:
        """Newest first; equal timestamps keep the later insert first."""
        people = self.storage.list_people(self.owner_id)
        return sorted(people, key=lambda p: (p.created_at, p.seq or 0), reverse=True)

    def get_person(self, person_id: str) -> PersonRecord:
        for person in self.storage.list_people(self.owner_id):
            if person.id == person_id:
                return person
        raise NotFoundError(f"Person '{person_id}' not found")

    def delete_person(self, person_id: str) -> None:
        if not self.storage.delete_person(person_id, self.owner_id):
            raise NotFoundError(f"Person '{person_id}' not found")
        logger.info(f"[Registry] Removed {person_id} owner={self.owner_id}")

    def render_qr(self, person_id: str) -> tuple[bytes, str]:
        """PNG bytes and a download filename for the person's code."""
        person = self.get_person(person_id)
        payload = person.qr_code_data or identity_codec.encode_payload(person)
        return qr_renderer.render_png(payload), qr_renderer.download_filename(person.name)
