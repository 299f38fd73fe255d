"""Unit tests for the per-owner tracker context."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import gc
import pytest
from app.errors import DecodeError, PersistenceError
from app.schemas.entry import PersonSnapshot
from app.schemas.person import PersonCreate
from app.services.occupancy_engine import replay
from app.services import tracker as tracker_module
from app.services.tracker import TrackerContext, owner_lock
from app.storage.memory_storage import MemoryStorage


class FlakyStorage(MemoryStorage):
    """Memory storage whose entry writes can be switched off."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False

    def add_entry(self, record):
        if self.fail_writes:
            raise PersistenceError("backend unreachable")
        return super().add_entry(record)


@pytest.fixture
def storage():
    return FlakyStorage()


@pytest.fixture
def tracker(storage):
    return TrackerContext(storage, "owner-1", report_timezone="UTC")


class TestScanFlow:
    def test_scan_toggles_presence(self, tracker):
        alice = tracker.add_person(PersonCreate(name="Alice"))

        first = tracker.propose(alice.qr_code_data)
        assert first.type == "entry"
        tracker.confirm(first)
        assert tracker.person_status(alice.id) == "inside"

        second = tracker.propose(alice.qr_code_data)
        assert second.type == "exit"
        tracker.confirm(second)
        assert tracker.person_status(alice.id) == "outside"

    def test_operator_override(self, tracker):
        alice = tracker.add_person(PersonCreate(name="Alice"))
        proposal = tracker.propose(alice.qr_code_data)
        entry = tracker.confirm(proposal, override="exit")
        assert entry.type == "exit"
        assert tracker.state.inside_person_ids == frozenset()

    def test_bad_scan_records_nothing(self, tracker):
        with pytest.raises(DecodeError):
            tracker.propose('{"name":"Bob"}')
        assert tracker.event_log.list_all() == []

    def test_unregistered_payload_still_classified(self, tracker):
        proposal = tracker.propose('{"id":"visitor-9","name":"Guest"}')
        assert proposal.type == "entry"


class TestRecording:
    def test_state_matches_fresh_replay(self, tracker, storage):
        tracker.record("entry", PersonSnapshot(id="p1", name="Alice"))
        tracker.record("entry")
        tracker.record("entry")
        tracker.record("exit")

        fresh = TrackerContext(storage, "owner-1")
        assert fresh.state == tracker.state == replay(storage.list_entries("owner-1"))
        assert fresh.state.current_count == 2

    def test_deleting_person_keeps_occupancy(self, tracker):
        alice = tracker.add_person(PersonCreate(name="Alice"))
        tracker.record("entry", PersonSnapshot(id=alice.id, name=alice.name))
        before = tracker.refresh()

        tracker.delete_person(alice.id)

        assert tracker.refresh() == before
        assert tracker.event_log.list_all()[0].person_name == "Alice"

    def test_failed_write_leaves_state_untouched(self, tracker, storage):
        tracker.record("entry")
        storage.fail_writes = True

        with pytest.raises(PersistenceError):
            tracker.record("entry")

        assert tracker.state.anonymous_count == 1
        assert tracker.engine.verify()

    def test_clear_entries_resets_state(self, tracker):
        tracker.record("entry", PersonSnapshot(id="p1", name="Alice"))
        assert tracker.clear_entries() == 1
        assert tracker.state.current_count == 0
        assert tracker.refresh().current_count == 0

    def test_today_summary(self, tracker):
        tracker.record("entry")
        tracker.record("exit")
        tracker.record("entry")
        today = tracker.today()
        assert (today.entries, today.exits, today.net_count) == (2, 1, 1)
        assert tracker.daily()[0].date == today.date


class TestOwnerLocks:
    def test_same_owner_shares_lock(self):
        a1 = owner_lock("a")
        a2 = owner_lock("a")
        b = owner_lock("b")
        assert a1 is a2
        assert b is not a1

    def test_contexts_for_one_owner_share_lock(self, storage):
        first = TrackerContext(storage, "shared")
        second = TrackerContext(storage, "shared")
        assert first._lock is second._lock is owner_lock("shared")

    def test_lock_dropped_once_unreferenced(self, storage):
        context = TrackerContext(storage, "transient")
        assert "transient" in tracker_module._owner_locks

        del context
        gc.collect()
        assert "transient" not in tracker_module._owner_locks
