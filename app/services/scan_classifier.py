# app/services/scan_classifier.py
"""
Presence toggle: a scanned person who is inside is proposed an exit,
anyone else an entry. The proposal is only a suggestion — the operator can
flip it before it is recorded.
"""

from dataclasses import dataclass
from typing import Optional
from app.schemas.entry import PersonSnapshot
from app.schemas.identity import IdentityPayload
from app.services.event_log import ENTRY, EXIT, validate_type
from app.services.occupancy_engine import OccupancyState


@dataclass(frozen=True)
class Proposal:
    type: str
    person: PersonSnapshot


def snapshot_from_payload(payload: IdentityPayload) -> PersonSnapshot:
    return PersonSnapshot(id=payload.id, name=payload.name, enrollment_no=payload.enrollmentNo)


def classify(payload: IdentityPayload, state: OccupancyState) -> Proposal:
    proposed = EXIT if payload.id in state.inside_person_ids else ENTRY
    return Proposal(type=proposed, person=snapshot_from_payload(payload))


def resolve(proposal: Proposal, override: Optional[str] = None) -> Proposal:
    """Apply the operator's explicit choice, if any."""
    if override is None:
        return proposal
    return Proposal(type=validate_type(override), person=proposal.person)
