"""
Timesheet errors.

Every anticipated failure of a timesheet operation is one of these. Routers
never build error responses themselves: the handler registered in
``app.main`` turns any ``TimesheetError`` into a JSON body with the
matching status code.
"""

from typing import Any, Optional


class TimesheetError(Exception):
    """
    Base class for timesheet errors.

    Attributes:
        status_code: HTTP status the error maps to
        error: kind name, used by clients to tell errors apart
        message: human-readable description
        details: additional context (identifiers, statuses)
    """

    status_code = 409
    error = "TimesheetError"
    default_message = "Timesheet operation failed"

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(TimesheetError):
    status_code = 404
    error = "NotFound"
    default_message = "Not found"


class InvalidStateError(TimesheetError):
    """Action is not legal for the timecard's current status."""

    status_code = 409
    error = "InvalidStateError"
    default_message = "Action is not valid for the timecard's current status"


class EmptyTimecardError(TimesheetError):
    status_code = 409
    error = "EmptyTimecardError"
    default_message = "Timecard has no lines"


class MissingTransitionError(TimesheetError):
    """Requested transition does not match the timecard's current status."""

    status_code = 409
    error = "MissingTransitionError"
    default_message = "No such transition for the timecard's current status"


class InvalidApproverError(TimesheetError):
    status_code = 403
    error = "InvalidApproverError"
    default_message = "Approver cannot be the timecard's employee"
