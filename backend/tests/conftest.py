"""
Pytest fixtures and configuration for Pod Countdown Bot tests.

Provides:
- Fake holiday calendars
- Bot context built from fakes
- Slack client over a mock transport
- Time freezing utilities
- FastAPI test client
"""
import pytest
from datetime import date, datetime
from typing import Generator
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient
from freezegun import freeze_time

from helpers import FakeHolidayCalendar, SlackRecorder
from podbot.core.config import Settings
from podbot.services.context import BotContext, StatusLinks
from podbot.services.slack import SlackClient


# ==========================================
# SETTINGS
# ==========================================

@pytest.fixture
def make_settings():
    """Factory for Settings that ignores any local .env file."""
    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)
    return _make


# ==========================================
# CALENDARS & CONTEXT
# ==========================================

@pytest.fixture
def us_calendar() -> FakeHolidayCalendar:
    """Empty US calendar; tests add holidays by constructing their own."""
    return FakeHolidayCalendar("US")


@pytest.fixture
def in_calendar() -> FakeHolidayCalendar:
    return FakeHolidayCalendar("IN-KA")


@pytest.fixture
def make_context():
    """Factory for a BotContext around the given calendars."""
    def _make(*calendars, **overrides) -> BotContext:
        values = dict(
            calendars=tuple(calendars),
            channel_id="C-TEST",
            business_kinds=frozenset({"public"}),
            range_inclusivity_offset=0,
            pod_lead_emails=("lead1@example.com", "lead2@example.com", "lead3@example.com"),
            release_manager_email="rm@example.com",
            status_presenter_email="presenter@example.com",
            status_links=StatusLinks(
                calendar_schedule="https://sheets.example.com/calendar",
                status_sheet="https://sheets.example.com/status",
                release_sheet="https://sheets.example.com/releases",
            ),
        )
        values.update(overrides)
        return BotContext(**values)
    return _make


# ==========================================
# SLACK
# ==========================================

@pytest.fixture
def slack_recorder() -> SlackRecorder:
    """Mock Slack API that knows the default roster emails."""
    return SlackRecorder(users={
        "lead1@example.com": "U001",
        "lead2@example.com": "U002",
        "lead3@example.com": "U003",
        "rm@example.com": "U100",
        "presenter@example.com": "U200",
    })


@pytest.fixture
def slack_client(slack_recorder) -> SlackClient:
    return SlackClient("xoxb-test", transport=slack_recorder.transport())


# ==========================================
# TIME FIXTURES
# ==========================================

@pytest.fixture
def frozen_monday():
    """Freeze time at Monday 8:00 AM (January 6, 2025)."""
    monday = datetime(2025, 1, 6, 8, 0, 0)
    with freeze_time(monday):
        yield monday


@pytest.fixture
def monday() -> date:
    return date(2025, 1, 6)


@pytest.fixture
def friday() -> date:
    return date(2025, 1, 10)


# ==========================================
# API CLIENT
# ==========================================

@pytest.fixture
def mock_scheduler() -> MagicMock:
    """Stand-in for the global scheduler used by the app lifespan."""
    scheduler = MagicMock()
    scheduler.is_running = True
    scheduler.get_health_status.return_value = {
        "status": "healthy",
        "is_running": True,
        "jobs": [],
        "failures": {},
    }
    return scheduler


@pytest.fixture
def client(mock_scheduler) -> Generator[TestClient, None, None]:
    """
    TestClient with credentials, logging and the scheduler patched out.
    """
    from podbot.main import app

    with patch("podbot.main.build_services", return_value=MagicMock()):
        with patch("podbot.main.get_scheduler", return_value=mock_scheduler):
            with patch("podbot.main.configure_logging"):
                with patch("podbot.main.run_startup_jobs", new=AsyncMock()):
                    with TestClient(app) as test_client:
                        yield test_client


# ==========================================
# CLEANUP
# ==========================================

@pytest.fixture(autouse=True)
def reset_job_monitor():
    """Clear recorded job failures between tests."""
    from podbot.services.scheduler import job_monitor

    job_monitor.failed_jobs.clear()
    job_monitor.last_errors.clear()
    yield


# ==========================================
# MARKERS
# ==========================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (isolated, fast)")
    config.addinivalue_line("markers", "integration: Tests that use the real holiday data")
    config.addinivalue_line("markers", "edge: Edge case tests")
