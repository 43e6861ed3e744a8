import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import relationship

from app.core.lifecycle import TimecardStatus, available_actions
from app.database import Base
from app.schemas.actions import Action, Entered, parse_action

LINE_FIELDS = ("work_date", "hours", "project", "description")
REQUIRED_LINE_FIELDS = frozenset({"work_date", "hours", "project"})


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # sqlite returns naive datetimes for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TimecardLine(Base):
    __tablename__ = "timecard_lines"

    __table_args__ = (
        CheckConstraint("hours > 0 AND hours <= 24", name="ck_timecard_lines_hours_range"),
    )

    unique_identifier = Column(String, primary_key=True, index=True)
    timecard_id = Column(
        String,
        ForeignKey("timecards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    line_number = Column(Integer, nullable=False)

    work_date = Column(Date, nullable=False)
    recorded = Column(DateTime(timezone=True), nullable=False)

    hours = Column(Float, nullable=False)
    project = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    def update(self, document: dict) -> "TimecardLine":
        """
        Merge a line document into this line.

        Only keys present in `document` are applied, so a full document
        replaces every field and a partial one patches just what it names.
        Nulls clear optional fields and are ignored for required ones.
        """
        for key in LINE_FIELDS:
            if key not in document:
                continue
            value = document[key]
            if value is None and key in REQUIRED_LINE_FIELDS:
                continue
            setattr(self, key, value)
        return self

    @property
    def sort_key(self):
        return (self.work_date, _as_utc(self.recorded))


class TimecardTransition(Base):
    __tablename__ = "timecard_transitions"

    __table_args__ = (
        UniqueConstraint("timecard_id", "sequence", name="uq_timecard_transitions_sequence"),
        CheckConstraint(
            "transitioned_to in ('DRAFT','SUBMITTED','APPROVED','REJECTED','CANCELLED')",
            name="ck_timecard_transitions_status_valid",
        ),
    )

    id = Column(Integer, primary_key=True)
    timecard_id = Column(
        String,
        ForeignKey("timecards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sequence = Column(Integer, nullable=False)

    occurred_at = Column(DateTime(timezone=True), nullable=False)
    transitioned_to = Column(String, nullable=False)
    action = Column(JSON, nullable=False)

    @property
    def status(self) -> TimecardStatus:
        return TimecardStatus(self.transitioned_to)

    @property
    def action_payload(self) -> Action:
        return parse_action(self.action)

    @property
    def sort_key(self):
        return (_as_utc(self.occurred_at), self.sequence)

    def __repr__(self) -> str:
        return (
            f"<TimecardTransition {self.sequence} {self.action.get('kind')} "
            f"-> {self.transitioned_to} at {self.occurred_at.isoformat()}>"
        )


@event.listens_for(TimecardTransition, "before_update")
def _block_transition_update(mapper, connection, target):
    raise ValueError("timecard transitions are immutable")


class Timecard(Base):
    """
    A worker's timesheet.

    Status is never stored: it is the `transitioned_to` of the last entry
    in `transitions`, which is append-only. Lifecycle guards live in
    `app.core.lifecycle` and are applied by the service before
    `add_transition` is called.
    """

    __tablename__ = "timecards"

    id = Column(String, primary_key=True, index=True)
    employee_id = Column(Integer, nullable=False, index=True)
    opened_at = Column(DateTime(timezone=True), nullable=False, index=True)

    lines = relationship(
        "TimecardLine",
        order_by="TimecardLine.line_number",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    transitions = relationship(
        "TimecardTransition",
        order_by="TimecardTransition.sequence",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @classmethod
    def create(cls, employee: int, *, opened_at: Optional[datetime] = None) -> "Timecard":
        opened_at = opened_at or _utc_now()
        timecard = cls(
            id=str(uuid.uuid4()),
            employee_id=int(employee),
            opened_at=opened_at,
        )
        timecard.add_transition(
            Entered(person=int(employee)),
            TimecardStatus.DRAFT,
            occurred_at=opened_at,
        )
        return timecard

    @property
    def employee(self) -> int:
        return self.employee_id

    @property
    def status(self) -> TimecardStatus:
        return self.transitions[-1].status

    @property
    def actions(self) -> list[dict]:
        return available_actions(self.id, self.status)

    def add_line(self, document: dict, *, recorded: Optional[datetime] = None) -> TimecardLine:
        line = TimecardLine(
            unique_identifier=str(uuid.uuid4()),
            line_number=len(self.lines) + 1,
            recorded=recorded or _utc_now(),
        )
        line.update(document)
        self.lines.append(line)
        return line

    def find_line(self, line_id: str) -> Optional[TimecardLine]:
        for line in self.lines:
            if line.unique_identifier == str(line_id):
                return line
        return None

    def update_line(self, line_id: str, document: dict) -> Optional[TimecardLine]:
        line = self.find_line(line_id)
        if line is None:
            return None
        return line.update(document)

    def sorted_lines(self) -> list[TimecardLine]:
        return sorted(self.lines, key=lambda line: line.sort_key)

    def can_be_deleted(self) -> bool:
        return len(self.transitions) <= 1 and len(self.lines) == 0

    def add_transition(
        self,
        action: Action,
        transitioned_to: TimecardStatus,
        *,
        occurred_at: Optional[datetime] = None,
    ) -> TimecardTransition:
        transition = TimecardTransition(
            sequence=len(self.transitions),
            occurred_at=occurred_at or _utc_now(),
            transitioned_to=TimecardStatus(transitioned_to).value,
            action=action.model_dump(mode="json"),
        )
        self.transitions.append(transition)
        return transition

    def find_transition(self, transitioned_to: TimecardStatus) -> Optional[TimecardTransition]:
        matches = [t for t in self.transitions if t.transitioned_to == TimecardStatus(transitioned_to).value]
        if not matches:
            return None
        return max(matches, key=lambda t: t.sort_key)
