"""Scheduler for the in-process health ping job."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from taskboard.core.config import settings
from taskboard.jobs.health_ping import send_random_request


logger = logging.getLogger(__name__)

HEALTH_PING_JOB_ID = "health_ping"

# Global scheduler instance
scheduler = AsyncIOScheduler()


async def run_health_ping() -> None:
    """Scheduled wrapper: one ping, outcome logged, never raises."""
    result = await send_random_request()
    if not result.success:
        logger.warning(
            "health_ping_failed",
            extra={"endpoint": result.endpoint, "status_code": result.status_code, "error": result.error},
        )


def start_scheduler(*, interval_minutes: int | None = None) -> bool:
    """Register the health ping job and start the scheduler.

    The job only runs when an interval is configured (argument or
    HEALTH_PING_INTERVAL_MINUTES); otherwise nothing is scheduled.

    Returns:
        True if the scheduler was started
    """
    interval = interval_minutes if interval_minutes is not None else settings.health_ping_interval_minutes
    if not interval or interval <= 0:
        logger.info("Health ping job disabled")
        return False

    scheduler.add_job(
        run_health_ping,
        trigger=IntervalTrigger(minutes=interval),
        id=HEALTH_PING_JOB_ID,
        name="Health ping keep-alive",
        replace_existing=True,
    )
    if not scheduler.running:
        scheduler.start()
    logger.info(f"Scheduled health ping job: every {interval} minute(s)")
    return True


def stop_scheduler() -> None:
    """Shut the scheduler down if it is running."""
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler stopped")
