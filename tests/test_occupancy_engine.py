"""Unit tests for the occupancy fold, the incremental engine and daily aggregates."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import itertools
import random
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo
from app.schemas.entry import EntryRecord
from app.services.occupancy_engine import (
    INSIDE, OUTSIDE, OccupancyEngine, OccupancyState,
    daily_breakdown, daily_summary, person_status, replay,
)

BASE_TIME = datetime(2026, 3, 2, 10, 0, 0)


def make_entry(type="entry", minute=0, person_id=None, seq=None, at=None):
    seq = minute if seq is None else seq
    return EntryRecord(
        id=f"entry_{seq}_{type}_{person_id or 'anon'}",
        owner_id="owner-1",
        type=type,
        timestamp=at or BASE_TIME + timedelta(minutes=minute),
        person_id=person_id,
        person_name=f"Name {person_id}" if person_id else None,
        seq=seq,
    )


class TestReplay:
    def test_empty_log(self):
        state = replay([])
        assert state.inside_person_ids == frozenset()
        assert state.anonymous_count == 0
        assert state.current_count == 0

    def test_entry_then_exit_leaves_absent(self):
        state = replay([make_entry("entry", 0, "p1"), make_entry("exit", 5, "p1")])
        assert "p1" not in state.inside_person_ids

    def test_entry_alone_is_present(self):
        assert replay([make_entry("entry", 0, "p1")]).inside_person_ids == {"p1"}

    def test_entry_exit_entry_is_present(self):
        state = replay([
            make_entry("entry", 0, "p1"),
            make_entry("exit", 1, "p1"),
            make_entry("entry", 2, "p1"),
        ])
        assert state.inside_person_ids == {"p1"}

    def test_duplicate_entry_does_not_double_count(self):
        state = replay([make_entry("entry", 0, "p1"), make_entry("entry", 5, "p1")])
        assert state.inside_person_ids == {"p1"}
        assert state.current_count == 1

    def test_exit_without_entry_is_noop(self):
        state = replay([make_entry("exit", 5, "p1")])
        assert state.inside_person_ids == frozenset()
        assert state.last_event_by_person == {"p1": "exit"}

    def test_anonymous_counts(self):
        state = replay([make_entry("entry", 1), make_entry("entry", 2), make_entry("exit", 3)])
        assert state.anonymous_count == 1

    def test_anonymous_count_never_negative(self):
        entries = [make_entry("exit", i) for i in range(3)] + [make_entry("entry", 10)]
        state = replay(entries)
        assert state.anonymous_count == 1

    def test_empty_person_id_is_not_anonymous(self):
        state = replay([make_entry("entry", 0, person_id="")])
        assert state.anonymous_count == 0
        assert state.inside_person_ids == {""}

    def test_current_count_combines_people_and_anonymous(self):
        state = replay([
            make_entry("entry", 0, "p1"),
            make_entry("entry", 1, "p2"),
            make_entry("entry", 2),
            make_entry("exit", 3, "p2"),
        ])
        assert state.current_count == 2

    def test_same_timestamp_uses_insertion_order(self):
        at = BASE_TIME
        exit_first = [make_entry("exit", seq=1, person_id="p1", at=at),
                      make_entry("entry", seq=2, person_id="p1", at=at)]
        entry_first = [make_entry("entry", seq=1, person_id="p1", at=at),
                       make_entry("exit", seq=2, person_id="p1", at=at)]
        assert replay(reversed(exit_first)).inside_person_ids == {"p1"}
        assert replay(reversed(entry_first)).inside_person_ids == frozenset()

    def test_redelivered_record_folded_once(self):
        anon = make_entry("entry", 1)
        state = replay([anon, anon, make_entry("entry", 2)])
        assert state.anonymous_count == 2

    def test_order_independent_after_sort(self):
        entries = [
            make_entry("entry", 0, "p1"),
            make_entry("entry", 1),
            make_entry("exit", 2, "p1"),
            make_entry("exit", 3),
            make_entry("exit", 4),
            make_entry("entry", 5, "p2"),
        ]
        expected = replay(entries)
        for perm in itertools.permutations(entries):
            assert replay(perm) == expected

    def test_fold_is_idempotent(self):
        entries = [make_entry("entry", 0, "p1"), make_entry("entry", 1), make_entry("exit", 2)]
        snapshot = list(entries)
        assert replay(entries) == replay(entries)
        assert entries == snapshot


class TestOccupancyEngine:
    def test_incremental_matches_replay(self):
        rng = random.Random(7)
        people = ["p1", "p2", "p3", None]
        entries = [make_entry(rng.choice(["entry", "exit"]), i, rng.choice(people)) for i in range(40)]

        engine = OccupancyEngine()
        for entry in entries:
            engine.apply(entry)
            assert engine.verify()
        assert engine.state == replay(entries)

    def test_out_of_order_arrival_refolds(self):
        engine = OccupancyEngine([make_entry("entry", 0, "p1"), make_entry("exit", 10, "p1")])
        assert engine.state.inside_person_ids == frozenset()

        # Delivered last, but stamped before the exit.
        late = make_entry("entry", 5, "p1", seq=99)
        engine.apply(late)
        assert engine.state.inside_person_ids == frozenset()
        assert engine.verify()

    def test_out_of_order_exit_refolds(self):
        engine = OccupancyEngine([make_entry("entry", 0, "p1"), make_entry("entry", 10, "p2")])
        engine.apply(make_entry("exit", 5, "p1", seq=50))
        assert engine.state.inside_person_ids == {"p2"}
        assert engine.verify()

    def test_duplicate_apply_is_ignored(self):
        entry = make_entry("entry", 0)
        engine = OccupancyEngine([entry])
        engine.apply(entry)
        assert engine.state.anonymous_count == 1
        assert len(engine.entries) == 1

    def test_state_snapshot_is_immutable(self):
        engine = OccupancyEngine([make_entry("entry", 0, "p1")])
        before = engine.state
        engine.apply(make_entry("exit", 1, "p1"))
        assert before.inside_person_ids == {"p1"}
        assert engine.state.inside_person_ids == frozenset()

    def test_person_status(self):
        state = OccupancyState(inside_person_ids=frozenset({"p1"}))
        assert person_status(state, "p1") == INSIDE
        assert person_status(state, "p2") == OUTSIDE


class TestDailyAggregates:
    def test_today_counts(self):
        entries = [make_entry("entry", 0), make_entry("entry", 1, "p1"), make_entry("exit", 2)]
        summary = daily_summary(entries, day=BASE_TIME.date())
        assert (summary.entries, summary.exits, summary.net_count) == (2, 1, 1)

    def test_net_may_be_negative(self):
        yesterday = BASE_TIME - timedelta(days=1)
        entries = [
            make_entry("entry", seq=1, person_id="p1", at=yesterday),
            make_entry("exit", seq=2, person_id="p1", at=BASE_TIME),
        ]
        summary = daily_summary(entries, day=BASE_TIME.date())
        assert summary.entries == 0
        assert summary.exits == 1
        assert summary.net_count == -1

    def test_other_days_excluded(self):
        entries = [make_entry("entry", seq=1, at=BASE_TIME - timedelta(days=2))]
        assert daily_summary(entries, day=BASE_TIME.date()).entries == 0

    def test_reference_timezone_shifts_day(self):
        # 23:30 UTC on Mar 2 is already Mar 3 in Tokyo.
        late = datetime(2026, 3, 2, 23, 30)
        entries = [make_entry("entry", seq=1, at=late)]
        assert daily_summary(entries, day=date(2026, 3, 2), tz=timezone.utc).entries == 1
        assert daily_summary(entries, day=date(2026, 3, 3), tz=ZoneInfo("Asia/Tokyo")).entries == 1

    def test_breakdown_newest_first(self):
        entries = [
            make_entry("entry", seq=1, at=BASE_TIME - timedelta(days=1)),
            make_entry("entry", seq=2, at=BASE_TIME),
            make_entry("exit", seq=3, at=BASE_TIME + timedelta(hours=1)),
        ]
        days = daily_breakdown(entries)
        assert [d.date for d in days] == [BASE_TIME.date(), (BASE_TIME - timedelta(days=1)).date()]
        assert (days[0].entries, days[0].exits) == (1, 1)
        assert days[1].net_count == 1
