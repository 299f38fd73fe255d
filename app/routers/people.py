"""Person registration — CRUD for people and their QR codes."""

from fastapi import APIRouter, Depends, Response
from app.dependencies import get_tracker
from app.schemas.person import PersonCreate, PersonOut, PersonRecord
from app.services.tracker import TrackerContext

router = APIRouter()


@router.get("/people", response_model=list[PersonRecord], summary="List registered people")
def list_people(tracker: TrackerContext = Depends(get_tracker)):
    """Newest registrations first."""
    return tracker.registry.list_people()


@router.post("/people", response_model=PersonOut, status_code=201, summary="Register a person")
def add_person(body: PersonCreate, tracker: TrackerContext = Depends(get_tracker)):
    """Creates the person and returns their QR code as a PNG data URL in qr_code_image."""
    return tracker.add_person(body)


@router.get("/people/{person_id}", response_model=PersonRecord)
def get_person(person_id: str, tracker: TrackerContext = Depends(get_tracker)):
    return tracker.registry.get_person(person_id)


@router.delete("/people/{person_id}", summary="Remove a person")
def delete_person(person_id: str, tracker: TrackerContext = Depends(get_tracker)):
    """Past entries keep their snapshot of this person."""
    tracker.delete_person(person_id)
    return {"status": "removed", "id": person_id}


@router.get("/people/{person_id}/qr.png", summary="Download a person's QR code")
def download_qr(person_id: str, tracker: TrackerContext = Depends(get_tracker)):
    png, filename = tracker.registry.render_qr(person_id)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
