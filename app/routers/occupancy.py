"""Occupancy — current headcount, per-person status and daily aggregates."""

from fastapi import APIRouter, Depends
from app.dependencies import get_tracker
from app.schemas.occupancy import DailySummaryOut, OccupancyOut, PersonStatusOut
from app.services.tracker import TrackerContext

router = APIRouter()


def _summary_out(summary) -> DailySummaryOut:
    return DailySummaryOut(date=summary.date.isoformat(), entries=summary.entries,
                           exits=summary.exits, net_count=summary.net_count)


@router.get("/occupancy", response_model=OccupancyOut)
def get_occupancy(tracker: TrackerContext = Depends(get_tracker)):
    """Who is inside right now, derived from the full log."""
    state = tracker.state
    return OccupancyOut(
        inside_person_ids=sorted(state.inside_person_ids),
        anonymous_count=state.anonymous_count,
        current_count=state.current_count,
    )


@router.get("/occupancy/today", response_model=DailySummaryOut)
def get_today(tracker: TrackerContext = Depends(get_tracker)):
    return _summary_out(tracker.today())


@router.get("/occupancy/daily", response_model=list[DailySummaryOut])
def get_daily(tracker: TrackerContext = Depends(get_tracker)):
    """Per-day counts, newest day first."""
    return [_summary_out(s) for s in tracker.daily()]


@router.get("/occupancy/people/{person_id}", response_model=PersonStatusOut)
def get_person_status(person_id: str, tracker: TrackerContext = Depends(get_tracker)):
    return PersonStatusOut(
        person_id=person_id,
        status=tracker.person_status(person_id),
        last_event=tracker.state.last_event_by_person.get(person_id),
    )
