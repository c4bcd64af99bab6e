"""
Refresh Scheduler - Catch-up and Nightly Execution

Manages when refresh cycles run, using APScheduler.

Features:
- Catch-up cycle at startup when started before the cutoff (default 19:00 local)
- Nightly cycle at a fixed local time (default 05:30)
- Each nightly run is a one-shot job scheduled only after the previous cycle
  finished, so cycles never overlap
- Graceful shutdown handling

Usage:
    scheduler = RefreshScheduler(cycle)
    await scheduler.start()   # runs until stop() or cancellation
"""

import asyncio
import logging
from datetime import datetime, time, timedelta
from typing import Any, Callable, Optional, Protocol

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from utils.schemas import RefreshOutcome, ScheduleState

logger = logging.getLogger(__name__)

JOB_ID = "refresh_job"


class Cycle(Protocol):
    async def run_cycle(self, retry_budget: int) -> list[RefreshOutcome]: ...


def time_until_next_run(now: datetime, target: time) -> timedelta:
    """
    Wait from ``now`` until the next occurrence of ``target`` (local wall clock).

    If ``now`` is exactly at ``target`` the next day's occurrence is used.

    Examples:
        04:00 -> 1:30:00, 06:00 -> 23:30:00, 05:30 -> 1 day
    """
    wait = datetime.combine(now.date(), target) - now.replace(tzinfo=None)
    if wait <= timedelta(0):
        wait += timedelta(days=1)
    return wait


def should_run_catch_up(now: datetime, cutoff: time) -> bool:
    """A catch-up cycle runs at startup only before the cutoff time of day."""
    return now.time() < cutoff


def format_wait(wait: timedelta) -> str:
    total_minutes = int(wait.total_seconds()) // 60
    return f"{total_minutes // 60}:{total_minutes % 60:02d}"


class RefreshScheduler:
    """
    Scheduler for catch-up and nightly refresh cycles.

    Handles:
    - Startup catch-up decision
    - Computing the next nightly run and placing it on APScheduler
    - Tracking the schedule state of the process
    """

    def __init__(
        self,
        cycle: Cycle,
        refresh_time: time = time(5, 30),
        catch_up_cutoff: time = time(19, 0),
        startup_retries: int = 0,
        scheduled_retries: int = 10,
        clock: Callable[[], datetime] = datetime.now,
        job_scheduler: Optional[Any] = None,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            cycle: Refresh cycle to run
            refresh_time: Local time of day of the nightly run
            catch_up_cutoff: Startup catch-up only happens before this time
            startup_retries: Retry budget of the catch-up run
            scheduled_retries: Retry budget of nightly runs
            clock: Returns the current local time
            job_scheduler: APScheduler instance; an AsyncIOScheduler by default
        """
        self.cycle = cycle
        self.refresh_time = refresh_time
        self.catch_up_cutoff = catch_up_cutoff
        self.startup_retries = startup_retries
        self.scheduled_retries = scheduled_retries
        self.clock = clock
        self.scheduler = job_scheduler
        self.state = ScheduleState()
        self.shutdown_event = asyncio.Event()

        logger.info(
            "RefreshScheduler initialized",
            extra={
                "refresh_time": refresh_time.isoformat(),
                "catch_up_cutoff": catch_up_cutoff.isoformat(),
                "startup_retries": startup_retries,
                "scheduled_retries": scheduled_retries,
            },
        )

    async def execute_refresh(self, retry_budget: int) -> None:
        """
        Run one refresh cycle, then schedule the next nightly run.

        The next run is scheduled even if the cycle raised.
        """
        logger.info("Starting refresh execution", extra={"retry_budget": retry_budget})

        try:
            self.state.last_outcomes = await self.cycle.run_cycle(retry_budget)

        except Exception as e:
            logger.error(
                "Refresh execution failed",
                extra={"error": str(e)},
                exc_info=True,
            )

        finally:
            self.schedule_next_run()

    def schedule_next_run(self) -> datetime:
        """Place the next nightly run on the job scheduler and return its time."""
        now = self.clock()
        wait = time_until_next_run(now, self.refresh_time)
        run_date = now + wait

        logger.info("Sleeping %s", format_wait(wait), extra={"next_run": run_date.isoformat()})

        self.scheduler.add_job(
            self.execute_refresh,
            trigger=DateTrigger(run_date=run_date),
            args=[self.scheduled_retries],
            id=JOB_ID,
            name="Nightly cache refresh",
            replace_existing=True,
            misfire_grace_time=None,
        )
        self.state.next_run = run_date
        return run_date

    async def bootstrap(self) -> None:
        """
        Startup phase: optional catch-up cycle, then the first nightly run.
        """
        now = self.clock()
        if should_run_catch_up(now, self.catch_up_cutoff):
            logger.info(
                "Started before cutoff, running catch-up refresh",
                extra={"cutoff": self.catch_up_cutoff.isoformat()},
            )
            await self.execute_refresh(self.startup_retries)
        else:
            logger.info(
                "Started after cutoff, waiting for nightly refresh",
                extra={"cutoff": self.catch_up_cutoff.isoformat()},
            )
            self.schedule_next_run()

    def stop(self) -> None:
        """Signal start() to return."""
        self.shutdown_event.set()

    async def start(self) -> None:
        """
        Start the job scheduler and run until stop() is called or the task is cancelled.
        """
        if self.scheduler is None:
            self.scheduler = AsyncIOScheduler()

        self.scheduler.start()
        logger.info("Scheduler started")

        try:
            await self.bootstrap()
            logger.info("Waiting for jobs...")
            await self.shutdown_event.wait()

        finally:
            logger.info("Shutting down scheduler")
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shutdown complete")
