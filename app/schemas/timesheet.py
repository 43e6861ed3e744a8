from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.lifecycle import TimecardStatus


class DocumentPerson(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int


class DocumentLine(BaseModel):
    """Full line document, used by POST on /lines and /lines/{line_id}."""

    model_config = ConfigDict(extra="ignore")

    work_date: date
    hours: float = Field(gt=0, le=24)
    project: str = Field(min_length=1)
    description: Optional[str] = None


class DocumentLinePatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    work_date: Optional[date] = None
    hours: Optional[float] = Field(default=None, gt=0, le=24)
    project: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None

    @field_validator("work_date", "hours", "project")
    @classmethod
    def reject_null(cls, v):
        """Omit a required field to keep it; null cannot clear it."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class TimecardLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    unique_identifier: str
    work_date: date
    recorded: datetime
    hours: float
    project: str
    description: Optional[str]


class TransitionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    occurred_at: datetime
    transitioned_to: str
    action: dict[str, Any]


class ActionLink(BaseModel):
    relationship: str
    method: str
    href: str


class TimecardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    employee: int
    opened_at: datetime
    status: TimecardStatus
    lines: list[TimecardLineResponse]
    transitions: list[TransitionResponse]
    actions: list[ActionLink]
