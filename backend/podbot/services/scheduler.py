"""
Background Job Scheduler for the Pod Countdown Bot.

Handles scheduled posts using APScheduler cron triggers
(process local time unless SCHEDULER_TIMEZONE is set):
- Milestone countdown (0 17 * * 1-5, weekdays)
- Release standup reminder (0 12 * * 3,5, Wednesday and Friday)
- Weekly status reminder (0 10 * * 5, Fridays)

Every job catches and logs its own failures. A failed run is recorded
for the health endpoint and the next trigger runs as usual; nothing is
retried or paused.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from podbot.core.config import Settings, settings
from podbot.services.context import BotContext
from podbot.services.jira import JiraProcessor
from podbot.services.reminders import (
    send_important_dates,
    send_release_standup_reminder,
    send_weekly_status_reminder,
)
from podbot.services.slack import SlackClient


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BotServices:
    """Everything a scheduled job needs, built once at startup."""
    context: BotContext
    slack_client: SlackClient
    jira_processor: Optional[JiraProcessor] = None
    openai_api_key: str = ""


# ==========================================
# CRON TRIGGERS
# ==========================================

# crontab numbers days from Sunday (0 or 7); APScheduler 3 numbers them from Monday
_CRONTAB_WEEKDAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")
_SCHEDULER_WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def _crontab_days(item: str) -> set[int]:
    """Expand one day-of-week list item (``5``, ``1-5``, ``*/2``, ``1-5/2``) to crontab day numbers."""
    value, _, step_text = item.partition("/")
    step = int(step_text) if step_text else 1

    if value == "*":
        first, last = 0, 6
    elif "-" in value:
        first_text, last_text = value.split("-", 1)
        first, last = int(first_text), int(last_text)
    else:
        first = int(value)
        last = 7 if step_text else first

    if step < 1 or not 0 <= first <= last <= 7:
        raise ValueError(f"Invalid day-of-week value {item!r}")

    return {day % 7 for day in range(first, last + 1, step)}


def _translate_day_of_week(field: str) -> str:
    """
    Rewrite a numeric crontab day-of-week field as APScheduler day names.

    Days are expanded first and then regrouped in Monday-first order, so
    ``0-6`` becomes ``mon-sun`` and ``6-7`` becomes ``sat-sun``.
    Fields that already use names are passed through.
    """
    if field == "*" or any(char.isalpha() for char in field):
        return field

    days: set[int] = set()
    for item in field.split(","):
        days |= _crontab_days(item)

    indexes = sorted(_SCHEDULER_WEEKDAYS.index(_CRONTAB_WEEKDAYS[day]) for day in days)

    runs: list[list[int]] = []
    for index in indexes:
        if runs and index == runs[-1][-1] + 1:
            runs[-1].append(index)
        else:
            runs.append([index])

    return ",".join(
        _SCHEDULER_WEEKDAYS[run[0]] if len(run) == 1
        else f"{_SCHEDULER_WEEKDAYS[run[0]]}-{_SCHEDULER_WEEKDAYS[run[-1]]}"
        for run in runs
    )


def crontab_trigger(expression: str, tz: Optional[str] = None) -> CronTrigger:
    """
    Build a CronTrigger from a standard five-field crontab expression.

    Numeric day-of-week values are translated to names so ``1-5`` means
    Monday to Friday as it does in crontab.
    """
    fields = expression.split()
    if len(fields) != 5:
        raise ValueError(f"Wrong number of fields in crontab expression {expression!r}")

    minute, hour, day, month, day_of_week = fields

    return CronTrigger(
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=_translate_day_of_week(day_of_week),
        timezone=tz,
    )


# ==========================================
# Job Failure Monitor
# ==========================================

class JobFailureMonitor:
    """
    Track job failures over a rolling 24 hour window.

    Reporting only: feeds the health endpoint, never pauses a job.
    """

    def __init__(self, window: timedelta = timedelta(hours=24)):
        self.window = window
        self.failed_jobs: Dict[str, List[datetime]] = defaultdict(list)
        self.last_errors: Dict[str, str] = {}

    def record_success(self, job_id: str) -> None:
        """Record job success - reset failure count."""
        self.failed_jobs[job_id] = []
        self.last_errors.pop(job_id, None)

    def record_failure(self, job_id: str, error: str) -> int:
        """
        Record a job failure.

        Returns the number of failures inside the window.
        """
        now = datetime.now(timezone.utc)
        cutoff = now - self.window

        failures = [t for t in self.failed_jobs[job_id] if t > cutoff]
        failures.append(now)
        self.failed_jobs[job_id] = failures
        self.last_errors[job_id] = error

        logger.error(f"Job {job_id} failed ({len(failures)} in window): {error}")
        return len(failures)

    def get_status(self) -> Dict[str, Any]:
        """Get current failure status for all jobs."""
        return {
            job_id: {
                "failure_count": len(failures),
                "last_failure": failures[-1].isoformat() if failures else None,
                "last_error": self.last_errors.get(job_id),
            }
            for job_id, failures in self.failed_jobs.items()
        }


# Global job monitor
job_monitor = JobFailureMonitor()


# ==========================================
# JOB IMPLEMENTATIONS
# ==========================================

async def _run_job(
    job_id: str,
    description: str,
    send: Callable[[], Awaitable[bool]],
    monitor: Optional[JobFailureMonitor] = None
) -> bool:
    """Run one post, logging and recording the outcome. Never raises."""
    monitor = monitor or job_monitor
    logger.info(f"Running {description}...")

    try:
        sent = await send()
    except Exception as e:
        logger.exception(f"❌ {description} failed")
        monitor.record_failure(job_id, str(e))
        return False

    if sent:
        monitor.record_success(job_id)
    else:
        monitor.record_failure(job_id, "Slack rejected the message")
    return sent


async def daily_countdown_job(services: BotServices) -> bool:
    """Post the milestone countdown (weekdays)."""
    return await _run_job(
        "daily_countdown",
        "milestone countdown",
        lambda: send_important_dates(services.slack_client, services.context),
    )


async def release_standup_job(services: BotServices) -> bool:
    """Ask pod leads for release standup updates."""
    return await _run_job(
        "release_standup",
        "release standup reminder",
        lambda: send_release_standup_reminder(services.slack_client, services.context),
    )


async def weekly_status_job(services: BotServices) -> bool:
    """Remind pod leads to update the weekly status sheets."""
    return await _run_job(
        "weekly_status",
        "weekly status reminder",
        lambda: send_weekly_status_reminder(services.slack_client, services.context),
    )


async def run_startup_jobs(services: BotServices) -> None:
    """Run the countdown once immediately (development mode)."""
    await daily_countdown_job(services)


# ==========================================
# SCHEDULER
# ==========================================

class PodBotScheduler:
    """
    Background job scheduler for the Pod Countdown Bot.

    Wraps an AsyncIOScheduler with one cron job per reminder.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.is_running = False
        self.job_monitor = job_monitor

        tz = self.config.scheduler_timezone
        self.jobs_config = {
            "daily_countdown": {
                "func": daily_countdown_job,
                "trigger": crontab_trigger(self.config.countdown_cron, tz),
                "name": "Milestone Countdown",
            },
            "release_standup": {
                "func": release_standup_job,
                "trigger": crontab_trigger(self.config.release_standup_cron, tz),
                "name": "Release Standup Reminder",
            },
            "weekly_status": {
                "func": weekly_status_job,
                "trigger": crontab_trigger(self.config.weekly_status_cron, tz),
                "name": "Weekly Status Reminder",
            },
        }

    def create_scheduler(self) -> AsyncIOScheduler:
        """Create and configure the scheduler."""
        options: Dict[str, Any] = {
            "jobstores": {"default": MemoryJobStore()},
            "executors": {"default": AsyncIOExecutor()},
            "job_defaults": {
                "coalesce": True,  # Combine missed runs into one
                "max_instances": 1,
                "misfire_grace_time": 300,
            },
        }
        if self.config.scheduler_timezone:
            options["timezone"] = self.config.scheduler_timezone

        return AsyncIOScheduler(**options)

    def start(self, services: BotServices) -> None:
        """Start the scheduler with all jobs."""
        if self.is_running:
            logger.warning("Scheduler is already running")
            return

        self.scheduler = self.create_scheduler()

        for job_id, job in self.jobs_config.items():
            self.scheduler.add_job(
                job["func"],
                job["trigger"],
                args=[services],
                id=job_id,
                name=job["name"],
                replace_existing=True,
            )

        self.scheduler.start()
        self.is_running = True
        logger.info("🚀 Scheduler started")

        for job in self.scheduler.get_jobs():
            logger.info(f"  - {job.name}: Next run at {job.next_run_time}")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self.scheduler and self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("🛑 Scheduler stopped")

    def trigger_job(self, job_id: str) -> bool:
        """Manually trigger a job to run immediately."""
        if not self.scheduler:
            logger.error("Scheduler not initialized")
            return False

        job = self.scheduler.get_job(job_id)
        if not job:
            logger.error(f"Job not found: {job_id}")
            return False

        job.modify(next_run_time=datetime.now(timezone.utc))
        logger.info(f"Manually triggered job: {job_id}")
        return True

    def get_jobs_status(self) -> list:
        """Get status of all scheduled jobs."""
        if not self.scheduler:
            return []

        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
            }
            for job in self.scheduler.get_jobs()
        ]

    def get_health_status(self) -> Dict[str, Any]:
        """Scheduler status and recent job failures."""
        failures = self.job_monitor.get_status()
        has_failures = any(info["failure_count"] > 0 for info in failures.values())

        return {
            "status": "degraded" if has_failures else "healthy",
            "is_running": self.is_running,
            "jobs": self.get_jobs_status(),
            "failures": failures,
        }


# ==========================================
# GLOBAL SCHEDULER INSTANCE
# ==========================================

scheduler = PodBotScheduler()


def get_scheduler() -> PodBotScheduler:
    """Get the global scheduler instance."""
    return scheduler
