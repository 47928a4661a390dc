"""
Reminder Composer for the Pod Countdown Bot.

Builds the Slack Block Kit messages posted by the scheduled jobs:
- Milestone countdown (business days left per milestone)
- Release standup reminder (twice weekly)
- Weekly status reminder (Fridays)

Block builders are pure; the send_* functions resolve mentions,
post the message and log (never raise) on delivery failure.
"""
import logging
from datetime import date
from typing import Any, Optional, Sequence

from podbot.core.exceptions import SlackAPIError
from podbot.models.schemas import CountdownResult, Milestone, StandupCategory
from podbot.services.business_days import countdown_for
from podbot.services.context import BotContext, StatusLinks
from podbot.services.slack import SlackClient, find_slack_user_id_by_email, format_mention


logger = logging.getLogger(__name__)


Block = dict[str, Any]

NO_HOLIDAYS_TEXT = "No business holidays during this period."
HOLIDAYS_HEADING = "*Business holidays to consider during this period:*"

COUNTDOWN_HEADER = "📅 Deadlines: Because Time Travel Isn’t Real (Yet)"
COUNTDOWN_FOCUS = (
    ":white_check_mark: Focus: Elevating AI Agents from static workflow execution to "
    "context-aware, modular, and scalable MAS-based orchestration"
)
DAYS_OFF_NOTE = (
    "🚨 *Note*\nIf you have planned holidays or expect to take any days off due to illness, "
    "please let the team know so we can plan accordingly. 🙏"
)

STANDUP_CATEGORIES: tuple[StandupCategory, ...] = (
    StandupCategory(
        title="Waiting",
        description="Check if you're waiting on input, deliverables, or approvals from others or any other teams.",
        emoji="⏳",
    ),
    StandupCategory(
        title="Are We On Track?",
        description=(
            "Assess timelines:\n"
            "- Are we on track based on the calendar?\n"
            "- Are there any shifts in deadlines that need attention?"
        ),
        emoji="📅",
    ),
    StandupCategory(
        title="Blockers",
        description=(
            "Identify blockers:\n"
            "- *Technical blockers*: Are there unresolved technical challenges?\n"
            "- *Resource blockers*: Are we missing key resources or personnel?"
        ),
        emoji="🚧",
    ),
)


# ==========================================
# BLOCK HELPERS
# ==========================================

def header_block(text: str) -> Block:
    return {"type": "header", "text": {"type": "plain_text", "text": text}}


def section_block(text: str) -> Block:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def divider_block() -> Block:
    return {"type": "divider"}


def join_mentions(mentions: Sequence[str]) -> str:
    return " and ".join(mentions)


# ==========================================
# COUNTDOWN
# ==========================================

def format_display_date(value: date) -> str:
    """Render a date as e.g. ``Wed Feb 19 2025``."""
    return value.strftime("%a %b %d %Y")


def format_holiday_details(result: CountdownResult) -> str:
    """Bulleted holiday list, or the fixed no-holidays line."""
    if not result.holiday_details:
        return NO_HOLIDAYS_TEXT

    lines = [
        f"- {holiday.date.isoformat()}: {holiday.name} ({holiday.kind})"
        for holiday in result.holiday_details
    ]
    return HOLIDAYS_HEADING + "\n" + "\n".join(lines)


def format_countdown_text(milestone: Milestone, result: CountdownResult) -> str:
    return (
        f"*Date:* {format_display_date(milestone.date)}\n"
        f"- *{result.business_days_with_holidays} business days left* (including business holidays)\n"
        f"- *{result.business_days_without_holidays} business days left* (excluding business holidays)\n"
        f"- *{result.total_days} total days left*\n"
        f"\n"
        f"{format_holiday_details(result)}"
    )


def build_milestone_blocks(milestone: Milestone, result: CountdownResult) -> list[Block]:
    blocks = [header_block(milestone.label)]
    if milestone.note:
        blocks.append(section_block(f"_{milestone.note}_"))
    blocks.append(section_block(format_countdown_text(milestone, result)))
    blocks.append(divider_block())
    return blocks


def build_important_dates_blocks(
    milestones: Sequence[Milestone],
    context: BotContext,
    today: Optional[date] = None
) -> list[Block]:
    """
    Build the countdown message for all milestones, in list order.

    Args:
        milestones: Milestones to count down to
        context: Bot context (calendars and counting rules)
        today: Current local date (default: date.today())
    """
    today = today or date.today()
    blocks = [header_block(COUNTDOWN_HEADER), divider_block()]

    for milestone in milestones:
        result = countdown_for(milestone.date, context, today=today)
        blocks.extend(build_milestone_blocks(milestone, result))

    blocks.append(section_block(COUNTDOWN_FOCUS))
    blocks.append(section_block(DAYS_OFF_NOTE))
    return blocks


# ==========================================
# RELEASE STANDUP
# ==========================================

def build_release_standup_blocks(
    pod_lead_mentions: Sequence[str],
    release_manager_mention: str,
    categories: Sequence[StandupCategory] = STANDUP_CATEGORIES
) -> list[Block]:
    blocks = [
        header_block("🔔 Release Standup Reminder: Please provide an update"),
        section_block(
            f"Hi {join_mentions(pod_lead_mentions)}, please provide an update to "
            f"{release_manager_mention} on any categories below. "
            f"{release_manager_mention} represents the R2D2 pod in the twice weekly "
            f"release standup and the next standup is the next business day."
        ),
    ]

    for category in categories:
        blocks.append(header_block(f"{category.emoji} {category.title}"))
        blocks.append(section_block(category.description))

    blocks.append(section_block(
        f"✅ *Action Required*\nPlease add a note as a thread for this slack and tag {release_manager_mention}"
    ))
    return blocks


# ==========================================
# WEEKLY STATUS
# ==========================================

def build_weekly_status_blocks(
    pod_lead_mentions: Sequence[str],
    presenter_mention: str,
    links: StatusLinks
) -> list[Block]:
    return [
        header_block("📊 Weekly Status Reminder!"),
        divider_block(),
        section_block(
            f"Hi {join_mentions(pod_lead_mentions)}! Please take a few moments to update the "
            f"status for the week - {presenter_mention} will present this info in the next "
            f"status meeting on Monday."
        ),
        divider_block(),
        section_block(
            f"✅ *Action Required*: Please update the <{links.calendar_schedule}|POD Sprint Calendar Schedule> before EOD."
        ),
        section_block(
            f"✅ *Action Required*: Please update the <{links.status_sheet}|POD Status Sheet> before EOD."
        ),
        section_block(
            "✅ *Action Required*: Update the Engineering Weekly Status slides before the EOD "
            "for the template that will be posted in the #enggdashboard slack channel"
        ),
        section_block(
            f"✅ *Action Required*: Keep the <{links.release_sheet}|POD Releases> up to date before the EOD."
        ),
    ]


# ==========================================
# DISPATCH
# ==========================================

async def resolve_mentions(slack_client: SlackClient, emails: Sequence[str]) -> list[str]:
    """Resolve emails to mentions one at a time; unknown users become ``<@>``."""
    mentions = []
    for email in emails:
        user_id = await find_slack_user_id_by_email(slack_client, email)
        mentions.append(format_mention(user_id))
    return mentions


async def _post(slack_client: SlackClient, channel: str, blocks: list[Block], what: str) -> bool:
    try:
        await slack_client.post_message(channel, blocks, text=what)
    except SlackAPIError as e:
        logger.error(f"Error sending {what}: {e.message}")
        return False

    logger.info(f"Sent {what} to {channel}")
    return True


async def send_important_dates(
    slack_client: SlackClient,
    context: BotContext,
    today: Optional[date] = None
) -> bool:
    """Post the milestone countdown. Returns True if Slack accepted it."""
    blocks = build_important_dates_blocks(context.milestones, context, today=today)
    return await _post(slack_client, context.channel_id, blocks, "milestone countdown")


async def send_release_standup_reminder(slack_client: SlackClient, context: BotContext) -> bool:
    """Ask pod leads for release standup updates."""
    pod_leads = await resolve_mentions(slack_client, context.pod_lead_emails)
    release_manager = (await resolve_mentions(slack_client, [context.release_manager_email]))[0]

    blocks = build_release_standup_blocks(pod_leads, release_manager)
    return await _post(slack_client, context.channel_id, blocks, "release standup reminder")


async def send_weekly_status_reminder(slack_client: SlackClient, context: BotContext) -> bool:
    """Remind pod leads to update the weekly status sheets."""
    pod_leads = await resolve_mentions(slack_client, context.pod_lead_emails)
    presenter = (await resolve_mentions(slack_client, [context.status_presenter_email]))[0]

    links = context.status_links or StatusLinks("", "", "")
    blocks = build_weekly_status_blocks(pod_leads, presenter, links)
    return await _post(slack_client, context.channel_id, blocks, "weekly status reminder")
