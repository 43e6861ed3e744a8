from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.actions import Approval, Cancellation, Draft, Rejection, Submittal
from app.schemas.timesheet import (
    DocumentLine,
    DocumentLinePatch,
    DocumentPerson,
    TimecardLineResponse,
    TimecardResponse,
    TransitionResponse,
)
from app.services import timesheet_service

router = APIRouter(prefix="/timesheets", tags=["Timesheets"])


@router.get("", response_model=List[TimecardResponse])
def list_timesheets(db: Session = Depends(get_db)):
    return timesheet_service.list_timecards(db=db)


@router.get("/{timecard_id}", response_model=TimecardResponse)
def get_timesheet(timecard_id: str, db: Session = Depends(get_db)):
    return timesheet_service.get_timecard(timecard_id, db=db)


@router.post("", response_model=TimecardResponse)
def create_timesheet(person: DocumentPerson, db: Session = Depends(get_db)):
    return timesheet_service.create_timecard(person.id, db=db)


@router.delete("/{timecard_id}")
def delete_timesheet(timecard_id: str, db: Session = Depends(get_db)):
    timesheet_service.delete_timecard(timecard_id, db=db)
    return {"id": timecard_id, "deleted": True}


@router.get("/{timecard_id}/lines", response_model=List[TimecardLineResponse])
def list_lines(timecard_id: str, db: Session = Depends(get_db)):
    return timesheet_service.list_lines(timecard_id, db=db)


@router.get("/{timecard_id}/lines/{line_id}", response_model=TimecardLineResponse)
def get_line(timecard_id: str, line_id: str, db: Session = Depends(get_db)):
    return timesheet_service.get_line(timecard_id, line_id, db=db)


@router.post("/{timecard_id}/lines", response_model=TimecardLineResponse)
def add_line(timecard_id: str, line: DocumentLine, db: Session = Depends(get_db)):
    return timesheet_service.add_line(timecard_id, line.model_dump(), db=db)


@router.post("/{timecard_id}/lines/{line_id}", response_model=TimecardLineResponse)
def replace_line(
    timecard_id: str,
    line_id: str,
    line: DocumentLine,
    db: Session = Depends(get_db),
):
    return timesheet_service.update_line(timecard_id, line_id, line.model_dump(), db=db)


@router.patch("/{timecard_id}/lines/{line_id}", response_model=TimecardLineResponse)
def patch_line(
    timecard_id: str,
    line_id: str,
    patch: DocumentLinePatch,
    db: Session = Depends(get_db),
):
    return timesheet_service.update_line(
        timecard_id,
        line_id,
        patch.model_dump(exclude_unset=True),
        db=db,
    )


@router.get("/{timecard_id}/transitions", response_model=List[TransitionResponse])
def list_transitions(timecard_id: str, db: Session = Depends(get_db)):
    return timesheet_service.list_transitions(timecard_id, db=db)


@router.post("/{timecard_id}/submittal", response_model=TransitionResponse)
def submit_timesheet(timecard_id: str, submittal: Submittal, db: Session = Depends(get_db)):
    return timesheet_service.apply_transition(timecard_id, "submittal", submittal, db=db)


@router.get("/{timecard_id}/submittal", response_model=TransitionResponse)
def get_submittal(timecard_id: str, db: Session = Depends(get_db)):
    return timesheet_service.get_transition(timecard_id, "submittal", db=db)


@router.post("/{timecard_id}/cancellation", response_model=TransitionResponse)
def cancel_timesheet(timecard_id: str, cancellation: Cancellation, db: Session = Depends(get_db)):
    return timesheet_service.apply_transition(timecard_id, "cancellation", cancellation, db=db)


@router.get("/{timecard_id}/cancellation", response_model=TransitionResponse)
def get_cancellation(timecard_id: str, db: Session = Depends(get_db)):
    return timesheet_service.get_transition(timecard_id, "cancellation", db=db)


@router.post("/{timecard_id}/rejection", response_model=TransitionResponse)
def reject_timesheet(timecard_id: str, rejection: Rejection, db: Session = Depends(get_db)):
    return timesheet_service.apply_transition(timecard_id, "rejection", rejection, db=db)


@router.get("/{timecard_id}/rejection", response_model=TransitionResponse)
def get_rejection(timecard_id: str, db: Session = Depends(get_db)):
    return timesheet_service.get_transition(timecard_id, "rejection", db=db)


@router.post("/{timecard_id}/approval", response_model=TransitionResponse)
def approve_timesheet(timecard_id: str, approval: Approval, db: Session = Depends(get_db)):
    return timesheet_service.apply_transition(timecard_id, "approval", approval, db=db)


@router.get("/{timecard_id}/approval", response_model=TransitionResponse)
def get_approval(timecard_id: str, db: Session = Depends(get_db)):
    return timesheet_service.get_transition(timecard_id, "approval", db=db)


# Reopen a submitted timecard. The capitalised segment is part of the published API.
@router.post("/{timecard_id}/Draft", response_model=TransitionResponse)
def reopen_timesheet(timecard_id: str, draft: Draft, db: Session = Depends(get_db)):
    return timesheet_service.apply_transition(timecard_id, "Draft", draft, db=db)


@router.get("/{timecard_id}/Draft", response_model=TransitionResponse)
def get_draft(timecard_id: str, db: Session = Depends(get_db)):
    return timesheet_service.get_transition(timecard_id, "Draft", db=db)
