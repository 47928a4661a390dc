"""Pod Countdown Bot - scheduled business-day countdowns and reminders for Slack."""

__version__ = "0.1.0"
