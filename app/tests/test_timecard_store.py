from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.lifecycle import TimecardStatus
from app.database import SessionLocal
from app.models.timecard import Timecard, TimecardTransition
from app.schemas.actions import Submittal
from app.services.timecard_store import TimecardStore


def _reload(timecard_id: str) -> Timecard:
    db = SessionLocal()
    try:
        row = TimecardStore(db).find(timecard_id)
        assert row is not None
        return row
    finally:
        db.close()


def test_add_then_find_restores_lines_and_transitions(db):
    store = TimecardStore(db)
    timecard = Timecard.create(41001)
    timecard.add_line({"work_date": date(2026, 4, 1), "hours": 7.5, "project": "ops"})
    timecard.add_transition(Submittal(person=41001), TimecardStatus.SUBMITTED)
    store.add(timecard)

    loaded = _reload(timecard.id)

    assert loaded.employee == 41001
    assert loaded.status == TimecardStatus.SUBMITTED
    assert [t.transitioned_to for t in loaded.transitions] == ["DRAFT", "SUBMITTED"]
    assert [t.action["kind"] for t in loaded.transitions] == ["entered", "submittal"]
    assert len(loaded.lines) == 1
    assert loaded.lines[0].work_date == date(2026, 4, 1)
    assert loaded.lines[0].hours == 7.5


def test_find_missing_returns_none(db):
    assert TimecardStore(db).find("missing") is None


def test_update_persists_appended_transition(db):
    store = TimecardStore(db)
    timecard = store.add(Timecard.create(42001))
    timecard.add_line({"work_date": date(2026, 4, 2), "hours": 8, "project": "ops"})
    timecard.add_transition(Submittal(person=42001), TimecardStatus.SUBMITTED)

    store.update(timecard)

    loaded = _reload(timecard.id)
    assert loaded.status == TimecardStatus.SUBMITTED
    assert [t.sequence for t in loaded.transitions] == [0, 1]


def test_delete_removes_timecard_and_children(db):
    store = TimecardStore(db)
    timecard = store.add(Timecard.create(43001))

    assert store.delete(timecard.id) is True
    assert store.find(timecard.id) is None
    assert db.query(TimecardTransition).filter(TimecardTransition.timecard_id == timecard.id).count() == 0

    assert store.delete(timecard.id) is False


def test_all_orders_by_opened_at(db):
    store = TimecardStore(db)
    start = datetime(2026, 4, 6, 9, 0, tzinfo=timezone.utc)

    later = store.add(Timecard.create(44001, opened_at=start + timedelta(days=1)))
    earlier = store.add(Timecard.create(44002, opened_at=start))
    latest = store.add(Timecard.create(44003, opened_at=start + timedelta(days=2)))

    assert [t.id for t in store.all()] == [earlier.id, later.id, latest.id]


def test_recorded_transitions_cannot_be_modified(db):
    store = TimecardStore(db)
    timecard = store.add(Timecard.create(45001))

    timecard.transitions[0].transitioned_to = "APPROVED"
    with pytest.raises(ValueError):
        db.commit()
    db.rollback()

    assert _reload(timecard.id).status == TimecardStatus.DRAFT
