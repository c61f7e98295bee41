"""
APScheduler Configuration

Background scheduler for per-session deferred work (draft autosave).
Jobs are one-shot and keyed by inspection job id, so a newer schedule
for the same session replaces the pending one.
"""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.executors.asyncio import AsyncIOExecutor

from app.config import settings

logger = logging.getLogger(__name__)


def create_scheduler() -> AsyncIOScheduler:
    """Build an AsyncIOScheduler with the application's defaults."""
    return AsyncIOScheduler(
        jobstores={
            'default': MemoryJobStore()
        },
        executors={
            'default': AsyncIOExecutor(),
        },
        job_defaults={
            'coalesce': True,  # Combine multiple pending executions into one
            'max_instances': 1,  # Only one instance of each job at a time
            'misfire_grace_time': 60,  # Allow 60 seconds grace time for misfires
        },
        timezone=settings.SCHEDULER_TIMEZONE,
    )


# Create scheduler
scheduler = create_scheduler()


def start_scheduler():
    """Start the background job scheduler."""
    if not scheduler.running:
        scheduler.start()
        logger.info("Background job scheduler started")


def shutdown_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Background job scheduler stopped")
