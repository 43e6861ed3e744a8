import logging
import os

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    InvalidStateError,
    MissingTransitionError,
    NotFoundError,
    TimesheetError,
)
from app.core.lifecycle import check_line_entry, check_transition, get_rule
from app.models.timecard import Timecard, TimecardLine, TimecardTransition
from app.schemas.actions import Action
from app.services.timecard_store import TimecardStore

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _line_updates_draft_only() -> bool:
    return os.getenv("LINE_UPDATES_DRAFT_ONLY", "").strip().lower() in _TRUTHY


def _load(store: TimecardStore, timecard_id: str, *, for_update: bool = False) -> Timecard:
    logger.info("Looking for timesheet", extra={"timecard_id": timecard_id})

    timecard = store.find(timecard_id, for_update=for_update)
    if timecard is None:
        raise NotFoundError(
            f"Timecard {timecard_id} not found",
            details={"timecard_id": timecard_id},
        )
    return timecard


def _refuse(exc: TimesheetError, timecard: Timecard, operation: str) -> TimesheetError:
    logger.warning(
        "Refused timesheet operation",
        extra={
            "timecard_id": timecard.id,
            "operation": operation,
            "error": exc.error,
            "status": timecard.status.value,
        },
    )
    return exc


def list_timecards(*, db: Session) -> list[Timecard]:
    return TimecardStore(db).all()


def get_timecard(timecard_id: str, *, db: Session) -> Timecard:
    return _load(TimecardStore(db), timecard_id)


def create_timecard(employee_id: int, *, db: Session) -> Timecard:
    logger.info("Creating timesheet", extra={"employee": int(employee_id)})

    timecard = Timecard.create(int(employee_id))
    return TimecardStore(db).add(timecard)


def delete_timecard(timecard_id: str, *, db: Session) -> None:
    """
    Delete a timecard nothing has happened to yet.

    Any line or any transition past the initial one is history, and a
    timecard with history is never deleted, whatever its status.
    """
    store = TimecardStore(db)
    timecard = _load(store, timecard_id, for_update=True)

    if not timecard.can_be_deleted():
        raise _refuse(
            InvalidStateError(
                "Timecard has recorded history and cannot be deleted",
                details={
                    "timecard_id": timecard.id,
                    "lines": len(timecard.lines),
                    "transitions": len(timecard.transitions),
                },
            ),
            timecard,
            "delete",
        )

    logger.info("Deleting timesheet", extra={"timecard_id": timecard.id})
    store.delete(timecard.id)


def list_lines(timecard_id: str, *, db: Session) -> list[TimecardLine]:
    timecard = _load(TimecardStore(db), timecard_id)
    return timecard.sorted_lines()


def get_line(timecard_id: str, line_id: str, *, db: Session) -> TimecardLine:
    timecard = _load(TimecardStore(db), timecard_id)

    logger.info("Looking for line", extra={"timecard_id": timecard.id, "line_id": line_id})

    line = timecard.find_line(line_id)
    if line is None:
        raise NotFoundError(
            f"Timecard line {line_id} not found",
            details={"timecard_id": timecard.id, "line_id": line_id},
        )
    return line


def add_line(timecard_id: str, document: dict, *, db: Session) -> TimecardLine:
    store = TimecardStore(db)
    timecard = _load(store, timecard_id, for_update=True)

    try:
        check_line_entry(timecard.status)
    except TimesheetError as exc:
        raise _refuse(exc, timecard, "add_line")

    line = timecard.add_line(document)
    store.update(timecard)

    logger.info(
        "Added line",
        extra={"timecard_id": timecard.id, "line_id": line.unique_identifier},
    )
    return line


def update_line(timecard_id: str, line_id: str, document: dict, *, db: Session) -> TimecardLine:
    """
    Merge `document` into a line.

    Callers pass the full document for a replace and only the changed keys
    for a patch. Status is only checked when LINE_UPDATES_DRAFT_ONLY is set.
    """
    store = TimecardStore(db)
    timecard = _load(store, timecard_id, for_update=True)

    if _line_updates_draft_only():
        try:
            check_line_entry(timecard.status)
        except TimesheetError as exc:
            raise _refuse(exc, timecard, "update_line")

    line = timecard.update_line(line_id, document)
    if line is None:
        raise NotFoundError(
            f"Timecard line {line_id} not found",
            details={"timecard_id": timecard.id, "line_id": line_id},
        )

    store.update(timecard)

    logger.info(
        "Updated line",
        extra={"timecard_id": timecard.id, "line_id": line.unique_identifier, "fields": sorted(document)},
    )
    return line


def list_transitions(timecard_id: str, *, db: Session) -> list[TimecardTransition]:
    timecard = _load(TimecardStore(db), timecard_id)
    return list(timecard.transitions)


def apply_transition(timecard_id: str, name: str, action: Action, *, db: Session) -> TimecardTransition:
    store = TimecardStore(db)
    timecard = _load(store, timecard_id, for_update=True)
    return record_transition(store, timecard, name, action)


def _append(store: TimecardStore, timecard: Timecard, name: str, action: Action) -> TimecardTransition:
    rule = get_rule(name)

    try:
        check_transition(
            rule,
            status=timecard.status,
            line_count=len(timecard.lines),
            employee=timecard.employee,
            actor=action.person,
        )
    except TimesheetError as exc:
        raise _refuse(exc, timecard, name)

    transition = timecard.add_transition(action, rule.target)

    logger.info(
        f"Adding {name} transition",
        extra={
            "timecard_id": timecard.id,
            "transition": name,
            "status": transition.transitioned_to,
            "person": action.person,
        },
    )

    store.update(timecard)
    return transition


def record_transition(store: TimecardStore, timecard: Timecard, name: str, action: Action) -> TimecardTransition:
    """
    Guard and append a transition to an already loaded timecard.

    If another writer appended first, the sequence number collides. The
    timecard is then reloaded and checked again against what was committed,
    so a move that is no longer legal raises its usual error.
    """
    timecard_id = timecard.id

    try:
        return _append(store, timecard, name, action)
    except IntegrityError:
        store.db.rollback()
        logger.warning(
            "Timecard changed while adding transition, retrying",
            extra={"timecard_id": timecard_id, "transition": name},
        )

    timecard = _load(store, timecard_id, for_update=True)
    return _append(store, timecard, name, action)


def get_transition(timecard_id: str, name: str, *, db: Session) -> TimecardTransition:
    """
    Latest transition into `name`'s target status.

    Only answered while the timecard still sits in that status; once it
    has moved on, the record is only visible in the full history.
    """
    rule = get_rule(name)
    timecard = _load(TimecardStore(db), timecard_id)

    transition = None
    if timecard.status == rule.target:
        transition = timecard.find_transition(rule.target)

    if transition is None:
        raise MissingTransitionError(
            f"Timecard is {timecard.status.value}, not {rule.target.value}",
            details={
                "timecard_id": timecard.id,
                "status": timecard.status.value,
                "transition": name,
            },
        )
    return transition
