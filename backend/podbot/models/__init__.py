# Data models - Enums and value objects
from .enums import (
    HolidayKind,
)
from .schemas import (
    HolidayRecord,
    DayClassification,
    CountdownResult,
    Milestone,
    StandupCategory,
    UserStory,
)

__all__ = [
    # Enums
    "HolidayKind",
    # Calendar / countdown
    "HolidayRecord",
    "DayClassification",
    "CountdownResult",
    # Reminders
    "Milestone",
    "StandupCategory",
    # Jira
    "UserStory",
]
