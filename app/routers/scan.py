"""
Scan flow: the browser decodes the QR code and posts the text here.
POST /scan proposes entry or exit; POST /scan/confirm records it, with the
operator's override if they flipped the choice.
"""

from fastapi import APIRouter, Depends
from app.dependencies import get_tracker
from app.schemas.entry import EntryRecord
from app.schemas.scan import ProposalOut, ScanConfirm, ScanRequest
from app.services.scan_classifier import Proposal
from app.services.tracker import TrackerContext

router = APIRouter()


@router.post("/scan", response_model=ProposalOut, summary="Classify a scanned code")
def scan(body: ScanRequest, tracker: TrackerContext = Depends(get_tracker)):
    """Nothing is recorded here; a bad code returns 400 with the decode reason."""
    proposal = tracker.propose(body.raw)
    return ProposalOut(type=proposal.type, person=proposal.person)


@router.post("/scan/confirm", response_model=EntryRecord, status_code=201, summary="Record a scanned entry/exit")
def confirm(body: ScanConfirm, tracker: TrackerContext = Depends(get_tracker)):
    return tracker.confirm(Proposal(type=body.type, person=body.person), override=body.override)
