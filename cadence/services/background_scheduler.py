"""
Background scheduler service for periodic jobs.

Runs recurring task generation on a fixed interval and once at startup.
Uses APScheduler for in-process scheduling without external dependencies.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from cadence.core.config import Settings, get_settings
from cadence.core.logger import logger
from cadence.services.recurring_task_service import RecurringTaskService

GENERATION_JOB_ID = "recurring_task_generation"


class BackgroundScheduler:
    """
    Background scheduler for periodic jobs.

    Features:
    - Recurring task generation every GENERATION_INTERVAL_MINUTES
    - Startup run that catches up on occurrences missed while stopped
    """

    def __init__(
        self,
        recurring_task_service: RecurringTaskService,
        settings: Optional[Settings] = None,
    ):
        self._service = recurring_task_service
        self._settings = settings or get_settings()
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._startup_run: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def start(self):
        """Start the scheduler and run generation once."""
        # Only run scheduler in non-test environments
        if self._settings.is_test:
            logger.info("Background scheduler disabled in test environment")
            return

        interval = self._settings.GENERATION_INTERVAL_MINUTES
        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self._run_generation,
            IntervalTrigger(minutes=interval),
            id=GENERATION_JOB_ID,
            name="Recurring Task Generation",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info(
            "Background scheduler started:\n"
            f"  - Recurring task generation: every {interval} minutes"
        )

        # Catch up on missed occurrences in background (non-blocking)
        self._startup_run = asyncio.create_task(self._run_generation())

    async def stop(self):
        """Stop the scheduler."""
        if self._startup_run and not self._startup_run.done():
            self._startup_run.cancel()
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Background scheduler stopped")

    async def _run_generation(self):
        """Job wrapper with error handling."""
        try:
            report = await self._service.run_generation()
        except Exception as e:
            logger.error(f"Recurring task generation job failed: {e}")
            return
        if report.created_count:
            logger.info(f"Scheduled generation created {report.created_count} tasks")


# Global scheduler instance
_scheduler: Optional[BackgroundScheduler] = None


async def get_background_scheduler() -> BackgroundScheduler:
    """Get the global background scheduler instance."""
    global _scheduler
    if _scheduler is None:
        from cadence.api.deps import get_recurring_task_service

        _scheduler = BackgroundScheduler(get_recurring_task_service())
    return _scheduler


async def start_background_scheduler():
    """Start the global background scheduler."""
    scheduler = await get_background_scheduler()
    await scheduler.start()


async def stop_background_scheduler():
    """Stop the global background scheduler."""
    global _scheduler
    if _scheduler:
        await _scheduler.stop()
        _scheduler = None
