"""
Value objects for the Pod Countdown Bot.

Everything here is immutable and computed fresh per invocation;
nothing is cached or persisted.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class HolidayRecord:
    """One observed holiday occurrence."""
    date: date
    name: str
    kind: str  # provider category tag: public, bank, optional, ...


@dataclass(frozen=True)
class DayClassification:
    """Per-date evaluation used while counting down to a target."""
    date: date
    is_weekend: bool
    # (locale, business-impacting records) in calendar order
    holidays_by_locale: tuple[tuple[str, tuple[HolidayRecord, ...]], ...] = ()

    @property
    def is_business_holiday(self) -> bool:
        return any(records for _, records in self.holidays_by_locale)

    @property
    def holidays(self) -> tuple[HolidayRecord, ...]:
        """All business-impacting records for the day, locale order."""
        return tuple(record for _, records in self.holidays_by_locale for record in records)


@dataclass(frozen=True)
class CountdownResult:
    """Aggregate over the inclusive range [today, target_date]."""
    target_date: date
    today: date
    business_days_with_holidays: int
    business_days_without_holidays: int
    total_days: int
    holiday_details: tuple[HolidayRecord, ...] = ()


@dataclass(frozen=True)
class Milestone:
    """A labelled target date shown in the countdown message."""
    label: str
    date: date
    emoji: str = ""
    note: Optional[str] = None


@dataclass(frozen=True)
class StandupCategory:
    """One topic pod leads are asked to report on before release standup."""
    title: str
    description: str
    emoji: str


@dataclass(frozen=True)
class UserStory:
    """Remapped subset of a Jira issue."""
    key: str
    summary: str
    description: str
    acceptance_criteria: str
