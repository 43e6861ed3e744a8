from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Action(BaseModel):
    model_config = ConfigDict(extra="ignore")

    person: int


class Entered(_Action):
    kind: Literal["entered"] = "entered"


class Submittal(_Action):
    kind: Literal["submittal"] = "submittal"


class Approval(_Action):
    kind: Literal["approval"] = "approval"


class Rejection(_Action):
    kind: Literal["rejection"] = "rejection"
    reason: Optional[str] = None


class Cancellation(_Action):
    kind: Literal["cancellation"] = "cancellation"
    reason: Optional[str] = None


class Draft(_Action):
    kind: Literal["draft"] = "draft"
    reason: Optional[str] = None


Action = Annotated[
    Union[Entered, Submittal, Approval, Rejection, Cancellation, Draft],
    Field(discriminator="kind"),
]

_action_adapter = TypeAdapter(Action)


def parse_action(document: dict) -> Action:
    return _action_adapter.validate_python(document)
