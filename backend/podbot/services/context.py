"""
Runtime context for the scheduled jobs.

Built once at startup from Settings and passed to every job, so the
calendars and target channel are never read from module globals.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from podbot.core.config import Settings
from podbot.models.schemas import Milestone
from podbot.services.holiday_calendars import HolidayCalendar, build_calendars


logger = logging.getLogger(__name__)


DEFAULT_MILESTONES: tuple[Milestone, ...] = (
    Milestone(
        label=":small_blue_diamond: AI Agent Creation in Studio – Enable Citizen Developers to build & deploy AIAgents seamlessly.",
        date=date(2025, 2, 19),
        emoji="🎥",
    ),
    Milestone(
        label=":small_blue_diamond: Preview AIAgent Chatbot – Powered by GenCXA Workflow-based Orchestration (current chatbot).",
        date=date(2025, 2, 20),
        emoji="🎥",
    ),
    Milestone(
        label=":small_blue_diamond: NextGen AIAgent – MAS-powered orchestration with AXA Declaration-driven agent behavior.",
        date=date(2025, 2, 20),
        emoji="🎥",
    ),
    Milestone(
        label=":small_blue_diamond: Studio-Integrated NextGen AIAgent",
        note=(
            "Supports dynamic custom task injection, enabling adaptive decision-making and "
            "multi-agent collaboration, making orchestration more intelligent and autonomous "
            "than the current AI Agent."
        ),
        date=date(2025, 2, 25),
        emoji="🎥",
    ),
    Milestone(label="Official Demo at SKO", date=date(2025, 3, 4), emoji="🤖"),
)


@dataclass(frozen=True)
class StatusLinks:
    """Spreadsheets pod leads keep current for the weekly status meeting."""
    calendar_schedule: str
    status_sheet: str
    release_sheet: str


@dataclass(frozen=True)
class BotContext:
    """Immutable configuration threaded through the scheduled jobs."""
    calendars: tuple[HolidayCalendar, ...]
    channel_id: str
    business_kinds: frozenset[str]
    range_inclusivity_offset: int = 0
    milestones: tuple[Milestone, ...] = DEFAULT_MILESTONES
    pod_lead_emails: tuple[str, ...] = ()
    release_manager_email: str = ""
    status_presenter_email: str = ""
    status_links: Optional[StatusLinks] = field(default=None)


def build_bot_context(
    config: Settings,
    calendars: Optional[tuple[HolidayCalendar, ...]] = None,
    milestones: tuple[Milestone, ...] = DEFAULT_MILESTONES
) -> BotContext:
    """
    Build the bot context for this process.

    Args:
        config: Application settings
        calendars: Pre-built providers (default: one per configured locale)
        milestones: Milestones for the countdown post

    Raises:
        ConfigurationError: a configured holiday locale is not supported
    """
    if calendars is None:
        calendars = build_calendars(config.holiday_locales)

    context = BotContext(
        calendars=tuple(calendars),
        channel_id=config.slack_channel,
        business_kinds=frozenset(config.business_holiday_kinds),
        range_inclusivity_offset=config.range_inclusivity_offset,
        milestones=tuple(milestones),
        pod_lead_emails=tuple(config.pod_lead_emails),
        release_manager_email=config.release_manager_email,
        status_presenter_email=config.status_presenter_email,
        status_links=StatusLinks(
            calendar_schedule=config.pod_calendar_schedule_url,
            status_sheet=config.pod_status_sheet_url,
            release_sheet=config.pod_release_sheet_url,
        ),
    )

    logger.info(
        f"Bot context ready: channel={context.channel_id}, "
        f"locales={[c.locale for c in context.calendars]}, "
        f"kinds={sorted(context.business_kinds)}"
    )
    return context
