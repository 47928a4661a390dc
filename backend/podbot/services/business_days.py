"""
Business Day Calculator for the Pod Countdown Bot.

Counts down from today to a milestone date, day by day, classifying each
date against the weekend and the configured holiday calendars.

Key Rules:
- Saturday and Sunday are weekend days
- Only business-impacting holiday kinds count (default: "public");
  other kinds are dropped before classification and never reported
- A date with holidays in several locales is excluded from the
  holiday-adjusted count once, but every record is reported
- A target date in the past yields an empty countdown, never an error
"""
import math
from datetime import date, timedelta
from typing import Iterable, Iterator, Optional, Sequence, TYPE_CHECKING

from podbot.models.enums import HolidayKind
from podbot.models.schemas import CountdownResult, DayClassification
from podbot.services.holiday_calendars import HolidayCalendar

if TYPE_CHECKING:
    from podbot.services.context import BotContext


# Added to the computed range length. 0 reports target - today as the total
# and iterates today..target; 1 reproduces the revision that counted one
# extra day past the target.
RANGE_INCLUSIVITY_OFFSET = 0

DEFAULT_BUSINESS_HOLIDAY_KINDS: frozenset[str] = frozenset({HolidayKind.PUBLIC.value})

SECONDS_PER_DAY = 24 * 60 * 60


def is_weekend(check_date: date) -> bool:
    """Check if date is a weekend (Saturday=5, Sunday=6)."""
    return check_date.weekday() >= 5


def range_length_days(
    target_date: date,
    today: date,
    range_inclusivity_offset: int = RANGE_INCLUSIVITY_OFFSET
) -> int:
    """
    Whole days from today to target, rounded up, plus the inclusivity offset.

    Negative when the target is in the past.
    """
    delta = target_date - today
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY) + range_inclusivity_offset


def classify_day(
    day: date,
    calendars: Sequence[HolidayCalendar],
    business_kinds: Iterable[str] = DEFAULT_BUSINESS_HOLIDAY_KINDS
) -> DayClassification:
    """
    Classify a single date.

    Args:
        day: Date to evaluate
        calendars: Holiday providers, in reporting order
        business_kinds: Holiday kinds that suppress a business day

    Returns:
        DayClassification with only business-impacting holidays attached
    """
    kinds = frozenset(business_kinds)
    holidays_by_locale = tuple(
        (
            calendar.locale,
            tuple(record for record in calendar.query_holiday(day) if record.kind in kinds),
        )
        for calendar in calendars
    )
    return DayClassification(
        date=day,
        is_weekend=is_weekend(day),
        holidays_by_locale=holidays_by_locale,
    )


def iter_day_classifications(
    target_date: date,
    today: date,
    calendars: Sequence[HolidayCalendar],
    business_kinds: Iterable[str] = DEFAULT_BUSINESS_HOLIDAY_KINDS,
    range_inclusivity_offset: int = RANGE_INCLUSIVITY_OFFSET
) -> Iterator[DayClassification]:
    """Yield one classification per day in today..today + range length."""
    kinds = frozenset(business_kinds)
    length = range_length_days(target_date, today, range_inclusivity_offset)

    # range() is empty for a negative bound
    for offset in range(length + 1):
        yield classify_day(today + timedelta(days=offset), calendars, kinds)


def compute_countdown(
    target_date: date,
    today: date,
    calendars: Sequence[HolidayCalendar],
    *,
    business_kinds: Iterable[str] = DEFAULT_BUSINESS_HOLIDAY_KINDS,
    range_inclusivity_offset: int = RANGE_INCLUSIVITY_OFFSET
) -> CountdownResult:
    """
    Count business days between today and a target date.

    Example:
        today = Monday Jan 6 2025, target = Friday Jan 10 2025, no holidays
        result.total_days = 4
        result.business_days_with_holidays = 5
        result.business_days_without_holidays = 5

    Args:
        target_date: Milestone date (past, present or future)
        today: Current local date
        calendars: Holiday providers, in reporting order
        business_kinds: Holiday kinds that suppress a business day
        range_inclusivity_offset: 0 or 1, see RANGE_INCLUSIVITY_OFFSET

    Returns:
        CountdownResult aggregated over the range
    """
    with_holidays = 0
    without_holidays = 0
    holiday_details = []

    for day in iter_day_classifications(
        target_date, today, calendars, business_kinds, range_inclusivity_offset
    ):
        holiday_details.extend(day.holidays)

        if not day.is_weekend:
            with_holidays += 1
            if not day.is_business_holiday:
                without_holidays += 1

    return CountdownResult(
        target_date=target_date,
        today=today,
        business_days_with_holidays=with_holidays,
        business_days_without_holidays=without_holidays,
        total_days=range_length_days(target_date, today, range_inclusivity_offset),
        holiday_details=tuple(holiday_details),
    )


def countdown_for(
    target_date: date,
    context: "BotContext",
    today: Optional[date] = None
) -> CountdownResult:
    """Countdown using the calendars and rules held by the bot context."""
    return compute_countdown(
        target_date,
        today or date.today(),
        context.calendars,
        business_kinds=context.business_kinds,
        range_inclusivity_offset=context.range_inclusivity_offset,
    )
