# app/services/occupancy_engine.py
"""
Occupancy Engine — derives "who is inside" from the entry/exit log.

The state is a fold over the log in chronological order:
  - person entry  → add person id to the inside set
  - person exit   → discard person id (absent id is a no-op)
  - anonymous entry → anonymous_count + 1
  - anonymous exit  → anonymous_count - 1, floored at 0

Ordering is (timestamp, seq): seq is the storage insertion number and breaks
ties between events recorded in the same instant. Records delivered twice
(same id) are folded once.

replay() is the authority. OccupancyEngine keeps an incremental cache for
the common case of events arriving in order, and re-folds from scratch when
an event lands earlier than something it has already folded.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, timezone, tzinfo
from typing import Iterable, Optional
from app.schemas.entry import EntryRecord
from app.services.event_log import ENTRY, EXIT
from app.utils.clock import local_date, utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)

INSIDE = "inside"
OUTSIDE = "outside"


@dataclass(frozen=True)
class OccupancyState:
    inside_person_ids: frozenset = frozenset()
    anonymous_count: int = 0
    last_event_by_person: dict = field(default_factory=dict, hash=False)

    @property
    def current_count(self) -> int:
        return len(self.inside_person_ids) + self.anonymous_count


@dataclass
class DailySummary:
    date: date
    entries: int = 0
    exits: int = 0

    @property
    def net_count(self) -> int:
        # Negative is legitimate: someone who came in yesterday left today.
        return self.entries - self.exits


class _Fold:
    """Mutable accumulator behind replay() and the engine cache."""

    def __init__(self):
        self.inside: set[str] = set()
        self.anonymous = 0
        self.last_event: dict[str, str] = {}
        self.seen_ids: set[str] = set()

    def step(self, entry: EntryRecord) -> bool:
        if entry.id in self.seen_ids:
            return False
        self.seen_ids.add(entry.id)

        if entry.person_id is not None:
            if entry.type == ENTRY:
                self.inside.add(entry.person_id)
            elif entry.type == EXIT:
                self.inside.discard(entry.person_id)
            self.last_event[entry.person_id] = entry.type
        elif entry.type == ENTRY:
            self.anonymous += 1
        elif entry.type == EXIT:
            self.anonymous = max(0, self.anonymous - 1)
        return True

    def snapshot(self) -> OccupancyState:
        return OccupancyState(
            inside_person_ids=frozenset(self.inside),
            anonymous_count=self.anonymous,
            last_event_by_person=dict(self.last_event),
        )


def chronological(entries: Iterable[EntryRecord]) -> list[EntryRecord]:
    return sorted(entries, key=lambda e: e.sort_key)


def replay(entries: Iterable[EntryRecord]) -> OccupancyState:
    """Full re-derivation. Pure: same records in any order → same state."""
    fold = _Fold()
    for entry in chronological(entries):
        fold.step(entry)
    return fold.snapshot()


class OccupancyEngine:
    """Incrementally maintained OccupancyState, always verifiable by replay()."""

    def __init__(self, entries: Iterable[EntryRecord] = ()):
        self._entries: "OrderedDict[str, EntryRecord]" = OrderedDict()
        for entry in entries:
            self._entries.setdefault(entry.id, entry)
        self._refold()

    def _refold(self):
        self._fold = _Fold()
        self._last_key = None
        for entry in chronological(self._entries.values()):
            self._fold.step(entry)
            self._last_key = entry.sort_key
        self._state = self._fold.snapshot()

    @property
    def state(self) -> OccupancyState:
        return self._state

    @property
    def entries(self) -> list[EntryRecord]:
        return list(self._entries.values())

    def apply(self, entry: EntryRecord) -> OccupancyState:
        if entry.id in self._entries:
            return self._state
        self._entries[entry.id] = entry

        if self._last_key is not None and entry.sort_key < self._last_key:
            logger.warning(
                f"[Occupancy] Out-of-order event {entry.id} at {entry.timestamp.isoformat()} "
                f"— re-folding {len(self._entries)} entries"
            )
            self._refold()
            return self._state

        self._fold.step(entry)
        self._last_key = entry.sort_key
        self._state = self._fold.snapshot()
        return self._state

    def verify(self) -> bool:
        """True when the cached state matches a from-scratch replay."""
        return self._state == replay(self._entries.values())


def person_status(state: OccupancyState, person_id: str) -> str:
    return INSIDE if person_id in state.inside_person_ids else OUTSIDE


def _unique(entries: Iterable[EntryRecord]) -> list[EntryRecord]:
    seen = {}
    for entry in entries:
        seen.setdefault(entry.id, entry)
    return list(seen.values())


def daily_summary(entries: Iterable[EntryRecord], day: Optional[date] = None,
                  tz: tzinfo = timezone.utc) -> DailySummary:
    """Entry/exit counts for one calendar day in the reference timezone (default: today)."""
    if day is None:
        day = local_date(utcnow(), tz)
    summary = DailySummary(date=day)
    for entry in _unique(entries):
        if local_date(entry.timestamp, tz) != day:
            continue
        if entry.type == ENTRY:
            summary.entries += 1
        elif entry.type == EXIT:
            summary.exits += 1
    return summary


def daily_breakdown(entries: Iterable[EntryRecord], tz: tzinfo = timezone.utc) -> list[DailySummary]:
    """One summary per day that has activity, newest day first."""
    days: dict[date, DailySummary] = {}
    for entry in _unique(entries):
        day = local_date(entry.timestamp, tz)
        summary = days.setdefault(day, DailySummary(date=day))
        if entry.type == ENTRY:
            summary.entries += 1
        elif entry.type == EXIT:
            summary.exits += 1
    return [days[d] for d in sorted(days, reverse=True)]
