from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.core.errors import EmptyTimecardError, InvalidApproverError, InvalidStateError


class TimecardStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class ActionRelationship(str, Enum):
    RECORD_LINE = "record_line"
    SUBMIT = "submit"
    CANCEL = "cancel"
    REJECT = "reject"
    APPROVE = "approve"
    DRAFT = "draft"


@dataclass(frozen=True)
class TransitionRule:
    """
    Guard for one lifecycle endpoint.

    `name` is the path segment under /timesheets/{id}/. A POST there is legal
    only from `allowed_from`; `requires_lines` and `forbids_self_approval`
    add the data guards.
    """

    name: str
    relationship: ActionRelationship
    target: TimecardStatus
    allowed_from: frozenset
    requires_lines: bool = False
    forbids_self_approval: bool = False


RULES = {
    rule.name: rule
    for rule in (
        TransitionRule(
            name="submittal",
            relationship=ActionRelationship.SUBMIT,
            target=TimecardStatus.SUBMITTED,
            allowed_from=frozenset({TimecardStatus.DRAFT}),
            requires_lines=True,
        ),
        TransitionRule(
            name="cancellation",
            relationship=ActionRelationship.CANCEL,
            target=TimecardStatus.CANCELLED,
            allowed_from=frozenset({TimecardStatus.DRAFT, TimecardStatus.SUBMITTED}),
        ),
        TransitionRule(
            name="rejection",
            relationship=ActionRelationship.REJECT,
            target=TimecardStatus.REJECTED,
            allowed_from=frozenset({TimecardStatus.SUBMITTED}),
        ),
        TransitionRule(
            name="approval",
            relationship=ActionRelationship.APPROVE,
            target=TimecardStatus.APPROVED,
            allowed_from=frozenset({TimecardStatus.SUBMITTED}),
            forbids_self_approval=True,
        ),
        TransitionRule(
            name="Draft",
            relationship=ActionRelationship.DRAFT,
            target=TimecardStatus.DRAFT,
            allowed_from=frozenset({TimecardStatus.SUBMITTED}),
        ),
    )
}


def get_rule(name: str) -> TransitionRule:
    if name not in RULES:
        raise ValueError(f"Unknown transition: {name}")
    return RULES[name]


def check_transition(
    rule: TransitionRule,
    *,
    status: TimecardStatus,
    line_count: int,
    employee: int,
    actor: Optional[int],
) -> None:
    """
    Raise the error a POST to `rule` must produce, or return if it is legal.

    Self-approval is refused before the status check, so an employee
    approving their own timecard always gets InvalidApproverError.
    """
    if rule.forbids_self_approval and actor is not None and int(actor) == int(employee):
        raise InvalidApproverError(details={"employee": employee, "approver": actor})

    if status not in rule.allowed_from:
        raise InvalidStateError(
            f"Cannot apply {rule.name} to a timecard in status {status.value}",
            details={"status": status.value, "transition": rule.name},
        )

    if rule.requires_lines and line_count < 1:
        raise EmptyTimecardError(details={"transition": rule.name})


def check_line_entry(status: TimecardStatus) -> None:
    if status != TimecardStatus.DRAFT:
        raise InvalidStateError(
            f"Lines can only be recorded on a {TimecardStatus.DRAFT.value} timecard",
            details={"status": status.value},
        )


def available_actions(timecard_id: str, status: TimecardStatus) -> list[dict]:
    base = f"/timesheets/{timecard_id}"

    links = []
    if status == TimecardStatus.DRAFT:
        links.append(
            {
                "relationship": ActionRelationship.RECORD_LINE.value,
                "method": "POST",
                "href": f"{base}/lines",
            }
        )

    for rule in RULES.values():
        if status in rule.allowed_from:
            links.append(
                {
                    "relationship": rule.relationship.value,
                    "method": "POST",
                    "href": f"{base}/{rule.name}",
                }
            )

    return links
