"""
Delayed one-shot jobs on the running event loop, backed by APScheduler.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)


class SchedulerService:
    """
    Runs coroutine jobs after a delay, addressed by job id.

    Scheduling under an id that is still pending replaces the pending job,
    so repeated requests collapse into the latest one.
    """

    def __init__(self):
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self):
        """Start the scheduler on the running event loop."""
        if self._initialized:
            logger.warning("Scheduler already initialized")
            return

        self.scheduler = AsyncIOScheduler(
            event_loop=asyncio.get_running_loop(), timezone=timezone.utc
        )
        self.scheduler.start()
        self._initialized = True
        logger.info("Scheduler initialized")

    async def shutdown(self):
        """Stop the scheduler and drop pending jobs."""
        if self.scheduler and self._initialized:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shut down")
        self.scheduler = None
        self._initialized = False

    def schedule(
        self,
        job_id: str,
        func: Callable[..., Awaitable[Any]],
        delay_seconds: float,
        args: Optional[list] = None,
    ) -> Job:
        """
        Run ``func`` once, ``delay_seconds`` from now.

        Args:
            job_id: Identity of the job; a pending job with the same id is replaced
            func: Coroutine function to run
            delay_seconds: Delay before the run
            args: Positional arguments for ``func``

        Returns:
            The APScheduler job, usable as a cancellation handle

        Raises:
            ValueError: If the scheduler is not initialized
        """
        if not self._initialized:
            raise ValueError("Scheduler not initialized. Call initialize() first.")

        run_date = datetime.now(timezone.utc) + timedelta(seconds=delay_seconds)
        job = self.scheduler.add_job(
            func=func,
            trigger=DateTrigger(run_date=run_date),
            args=args or [],
            id=job_id,
            name=job_id,
            replace_existing=True,
        )
        logger.debug("Scheduled %s at %s", job_id, run_date.isoformat())
        return job

    def cancel_job(self, job_id: str) -> bool:
        """
        Cancel a pending job.

        Returns:
            True if job was cancelled, False if not found
        """
        if not self._initialized:
            return False

        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            return False
        logger.info(f"Cancelled job: {job_id}")
        return True

    def is_pending(self, job_id: str) -> bool:
        """Whether a job with this id is still waiting to run."""
        if not self._initialized:
            return False
        return self.scheduler.get_job(job_id) is not None
