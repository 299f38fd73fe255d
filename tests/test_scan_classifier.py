"""Unit tests for the presence-toggle scan classifier."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from app.errors import ValidationError
from app.schemas.identity import IdentityPayload
from app.services.occupancy_engine import OccupancyState
from app.services.scan_classifier import classify, resolve


def make_payload(id="p1", name="Alice", enrollment="EN-1"):
    return IdentityPayload(id=id, name=name, enrollmentNo=enrollment)


class TestClassify:
    def test_outside_person_proposed_entry(self):
        proposal = classify(make_payload(), OccupancyState())
        assert proposal.type == "entry"

    def test_inside_person_proposed_exit(self):
        state = OccupancyState(inside_person_ids=frozenset({"p1"}))
        assert classify(make_payload(), state).type == "exit"

    def test_anonymous_count_does_not_affect_people(self):
        state = OccupancyState(anonymous_count=5)
        assert classify(make_payload(), state).type == "entry"

    def test_proposal_carries_snapshot(self):
        proposal = classify(make_payload(), OccupancyState())
        assert proposal.person.id == "p1"
        assert proposal.person.name == "Alice"
        assert proposal.person.enrollment_no == "EN-1"


class TestResolve:
    def test_no_override_keeps_proposal(self):
        proposal = classify(make_payload(), OccupancyState())
        assert resolve(proposal) is proposal

    def test_override_wins(self):
        proposal = classify(make_payload(), OccupancyState())
        final = resolve(proposal, "exit")
        assert final.type == "exit"
        assert final.person == proposal.person

    def test_invalid_override_rejected(self):
        proposal = classify(make_payload(), OccupancyState())
        with pytest.raises(ValidationError) as exc:
            resolve(proposal, "maybe")
        assert exc.value.code == ValidationError.INVALID_TYPE
