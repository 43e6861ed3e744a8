from typing import Optional

from sqlalchemy.orm import Session, object_session

from app.models.timecard import Timecard


class TimecardStore:
    """
    Keyed store of timecards.

    Each write commits, so a request's load-mutate-save cycle is one
    transaction. Writers load with `for_update=True`, which takes a row lock
    on the timecard (where the database supports it) and re-reads it, so
    overlapping writers to one timecard run one after the other.
    """

    def __init__(self, db: Session):
        self.db = db

    def add(self, timecard: Timecard) -> Timecard:
        self.db.add(timecard)
        self.db.commit()
        return timecard

    def find(self, timecard_id: str, *, for_update: bool = False) -> Optional[Timecard]:
        q = self.db.query(Timecard).filter(Timecard.id == str(timecard_id))

        if for_update:
            q = q.with_for_update().populate_existing()

        return q.one_or_none()

    def update(self, timecard: Timecard) -> Timecard:
        if object_session(timecard) is None:
            timecard = self.db.merge(timecard)
        self.db.commit()
        return timecard

    def delete(self, timecard_id: str) -> bool:
        timecard = self.find(timecard_id)
        if timecard is None:
            return False
        self.db.delete(timecard)
        self.db.commit()
        return True

    def all(self) -> list[Timecard]:
        return (
            self.db.query(Timecard)
            .order_by(Timecard.opened_at.asc(), Timecard.id.asc())
            .all()
        )
