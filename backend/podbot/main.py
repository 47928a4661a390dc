"""
FastAPI Main Application Entry Point for the Pod Countdown Bot.

The HTTP server exists to keep the process alive and expose a health
check; the work happens in scheduled jobs:
- Milestone countdown (weekdays)
- Release standup reminder (Wednesday and Friday)
- Weekly status reminder (Friday)
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from podbot.core.config import settings
from podbot.core.credentials import get_credentials
from podbot.core.exceptions import PodBotException
from podbot.core.logging_config import configure_logging
from podbot.services.context import build_bot_context
from podbot.services.jira import JiraClient, JiraProcessor
from podbot.services.scheduler import BotServices, get_scheduler, run_startup_jobs
from podbot.services.slack import SlackClient


logger = logging.getLogger(__name__)


def build_services() -> BotServices:
    """
    Resolve credentials and build the clients the jobs use.

    Raises:
        SystemExit: credentials or configuration are unusable
    """
    try:
        credentials = get_credentials(settings)
        context = build_bot_context(settings)
    except PodBotException as e:
        logger.error(f"Startup failed: {e.message} {e.details}")
        raise SystemExit(1) from e

    slack_client = SlackClient(
        credentials.slack_api_key,
        base_url=settings.slack_api_base_url,
        timeout=settings.slack_timeout_seconds,
    )
    jira_processor = JiraProcessor(JiraClient(credentials.jira))

    return BotServices(
        context=context,
        slack_client=slack_client,
        jira_processor=jira_processor,
        openai_api_key=credentials.openai_api_key,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
    - Configure logging
    - Resolve credentials and build clients
    - Start background scheduler
    - Development: post the countdown once immediately

    Shutdown:
    - Stop scheduler
    """
    configure_logging(settings)
    logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment} (channel {settings.slack_channel})")

    services = build_services()
    app.state.services = services
    app.state.scheduler = None

    if settings.enable_scheduler:
        app.state.scheduler = get_scheduler()
        app.state.scheduler.start(services)

    if settings.is_development:
        await run_startup_jobs(services)

    yield

    if app.state.scheduler and app.state.scheduler.is_running:
        app.state.scheduler.stop()

    logger.info("👋 Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


@app.get("/health", tags=["System"])
async def health_check():
    """Service status and scheduler health."""
    scheduler = getattr(app.state, "scheduler", None)

    if scheduler:
        scheduler_status = scheduler.get_health_status()
    else:
        scheduler_status = {"status": "disabled", "is_running": False, "jobs": [], "failures": {}}

    return {
        "status": "degraded" if scheduler_status["status"] == "degraded" else "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "scheduler": scheduler_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/", tags=["System"])
async def root():
    """Root endpoint with service information."""
    return {
        "message": f"{settings.app_name} is running",
        "version": settings.app_version,
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "podbot.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
