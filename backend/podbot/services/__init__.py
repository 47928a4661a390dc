# Services - Business Logic Layer
"""
Pod Countdown Bot Services Module.

This module provides:
- Holiday calendars and business-day countdowns
- Slack message composition and delivery
- Jira issue access
- Background job scheduling
"""

# Holiday Calendars
from .holiday_calendars import (
    HolidayCalendar,
    LocaleHolidayCalendar,
    build_calendars,
    parse_locale,
)

# Business Day Calculations
from .business_days import (
    RANGE_INCLUSIVITY_OFFSET,
    DEFAULT_BUSINESS_HOLIDAY_KINDS,
    is_weekend,
    range_length_days,
    classify_day,
    iter_day_classifications,
    compute_countdown,
    countdown_for,
)

# Runtime Context
from .context import (
    BotContext,
    StatusLinks,
    DEFAULT_MILESTONES,
    build_bot_context,
)

# Slack
from .slack import (
    SlackClient,
    find_slack_user_id_by_email,
    format_mention,
)

# Reminders
from .reminders import (
    build_important_dates_blocks,
    build_release_standup_blocks,
    build_weekly_status_blocks,
    send_important_dates,
    send_release_standup_reminder,
    send_weekly_status_reminder,
)

# Jira
from .jira import (
    JiraClient,
    JiraProcessor,
    JIRA_CUSTOM_FIELD_MAPPING,
)

__all__ = [
    # Holiday Calendars
    "HolidayCalendar",
    "LocaleHolidayCalendar",
    "build_calendars",
    "parse_locale",
    # Business Days
    "RANGE_INCLUSIVITY_OFFSET",
    "DEFAULT_BUSINESS_HOLIDAY_KINDS",
    "is_weekend",
    "range_length_days",
    "classify_day",
    "iter_day_classifications",
    "compute_countdown",
    "countdown_for",
    # Context
    "BotContext",
    "StatusLinks",
    "DEFAULT_MILESTONES",
    "build_bot_context",
    # Slack
    "SlackClient",
    "find_slack_user_id_by_email",
    "format_mention",
    # Reminders
    "build_important_dates_blocks",
    "build_release_standup_blocks",
    "build_weekly_status_blocks",
    "send_important_dates",
    "send_release_standup_reminder",
    "send_weekly_status_reminder",
    # Jira
    "JiraClient",
    "JiraProcessor",
    "JIRA_CUSTOM_FIELD_MAPPING",
]
