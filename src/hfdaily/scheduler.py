"""Scheduler configuration using APScheduler.

Runs the digest for the previous day once per day.
"""

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from hfdaily.services.digest_service import DigestService

logger = structlog.get_logger()

DAILY_JOB_ID = "daily_papers_digest"


def create_scheduler(
    digest_service: DigestService,
    hour: int = 9,
    minute: int = 0,
    timezone: str = "Asia/Seoul",
) -> AsyncIOScheduler:
    """Create and configure the task scheduler.

    Args:
        digest_service: Service whose scheduled run is registered.
        hour: Hour to run daily job (0-23).
        minute: Minute to run daily job (0-59).
        timezone: Timezone the hour and minute refer to.

    Returns:
        Configured AsyncIOScheduler (not started).
    """
    scheduler = AsyncIOScheduler(timezone=timezone)

    scheduler.add_job(
        digest_service.run_scheduled,
        trigger=CronTrigger(hour=hour, minute=minute, timezone=timezone),
        id=DAILY_JOB_ID,
        name="Daily Hugging Face Papers Digest",
        replace_existing=True,
        misfire_grace_time=3600,
    )

    logger.info(
        "Scheduler configured",
        job_id=DAILY_JOB_ID,
        schedule=f"{hour:02d}:{minute:02d}",
        timezone=timezone,
    )

    return scheduler


async def run_once(digest_service: DigestService, date: str) -> dict:
    """Run the pipeline once immediately for `date`."""
    logger.info("Running pipeline manually", date=date)
    return await digest_service.run_daily_pipeline(date)
