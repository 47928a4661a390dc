"""
Configuration management using Pydantic Settings.
Loads environment variables from .env file.
"""
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Pod Countdown Bot"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "local"  # development | production | anything else

    # Server (no routes beyond health; keeps the process alive)
    host: str = "0.0.0.0"
    port: int = 50052

    # Slack Configuration
    slack_api_base_url: str = "https://slack.com/api"
    slack_default_channel: str = "C03V9AM9Y4C"  # #kam-slack-testing
    slack_production_channel: str = "C0856K5G2BB"  # r2d2 pod channel
    slack_timeout_seconds: float = 10.0

    # Development-mode credentials (production reads AWS Secrets Manager)
    slack_apikey: Optional[str] = None
    jira_username: Optional[str] = None
    jira_password: Optional[str] = None
    openai_apikey: Optional[str] = None

    # Jira Configuration
    jira_protocol: str = "https"
    jira_host: str = "ushur.atlassian.net"
    jira_api_version: str = "2"
    jira_strict_ssl: bool = True

    # AWS Secrets Manager
    aws_region: str = "us-west-2"
    jira_secret_name: str = "dev/kam/jira/credentials"
    slack_secret_name: str = "dev/kam/slack/credentials"
    openai_secret_name: str = "dev/kam/oai"

    # Scheduler Settings
    enable_scheduler: bool = True
    scheduler_timezone: Optional[str] = None  # None = process local time
    countdown_cron: str = "0 17 * * 1-5"  # 9:00 AM PST, Monday to Friday
    release_standup_cron: str = "0 12 * * 3,5"  # Wednesday and Friday
    weekly_status_cron: str = "0 10 * * 5"  # every Friday

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_retention_days: int = 14
    log_max_bytes: int = 20 * 1024 * 1024  # 0 disables size rotation

    # Business Day Calculation
    holiday_locales: list[str] = ["US", "IN-KA"]  # COUNTRY[-SUBDIVISION]
    business_holiday_kinds: list[str] = ["public"]
    range_inclusivity_offset: int = 0

    # Pod Roster
    pod_lead_emails: list[str] = [
        "pod.lead.one@example.com",
        "pod.lead.two@example.com",
        "pod.lead.three@example.com",
    ]
    release_manager_email: str = "release.manager@example.com"
    status_presenter_email: str = "status.presenter@example.com"

    # Status sheets linked from the weekly reminder
    pod_calendar_schedule_url: str = "https://docs.google.com/spreadsheets/d/pod-sprint-calendar"
    pod_status_sheet_url: str = "https://docs.google.com/spreadsheets/d/pod-status"
    pod_release_sheet_url: str = "https://docs.google.com/spreadsheets/d/pod-releases"

    @field_validator("range_inclusivity_offset")
    @classmethod
    def _validate_offset(cls, value: int) -> int:
        if value not in (0, 1):
            raise ValueError("range_inclusivity_offset must be 0 or 1")
        return value

    @property
    def is_development(self) -> bool:
        """Development mode: env credentials, jobs run once at startup."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def slack_channel(self) -> str:
        """Target channel for all scheduled posts."""
        if self.is_production:
            return self.slack_production_channel
        return self.slack_default_channel


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance.
    Call this function to get application settings.
    """
    return Settings()


# Global settings instance
settings = get_settings()
