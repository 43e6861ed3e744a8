from app.models.timecard import Timecard, TimecardLine, TimecardTransition

__all__ = [
    "Timecard",
    "TimecardLine",
    "TimecardTransition",
]
