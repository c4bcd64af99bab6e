"""
Resource Refresher and Refresh Cycle

Runs the fetch-then-publish sequence for each cached resource.

Features:
- Fixed-delay retry on fetch failures via tenacity (no exponential growth)
- Retry budget chosen per run (catch-up vs. nightly)
- Failed refreshes leave the published copy untouched (stale but valid)
- Resources refreshed strictly one after another

Usage:
    refresher = ResourceRefresher(fetcher, cache_dir, retry_delay=30)
    cycle = RefreshCycle(refresher, resources)
    outcomes = await cycle.run_cycle(retry_budget=10)
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Sequence

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt, wait_fixed

from apps.cacher.fetcher import FetchError, Fetcher
from apps.cacher.publisher import PublishError, publish_cache_file
from utils.schemas import RefreshOutcome, ResourceSpec

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


class ResourceRefresher:
    """
    Refreshes a single resource: download to its temporary name, then publish.

    Handles:
    - Bounded retry with a fixed pause between attempts
    - Promotion of the finished download to the published name
    """

    def __init__(
        self,
        fetcher: Fetcher,
        cache_dir: Path,
        retry_delay: float = 30.0,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """
        Initialize refresher.

        Args:
            fetcher: Downloader used for every attempt
            cache_dir: Cache root holding temporary and published files
            retry_delay: Seconds to wait between attempts
            sleep: Awaitable sleep used for the backoff
        """
        self.fetcher = fetcher
        self.cache_dir = cache_dir
        self.retry_delay = retry_delay
        self._sleep = sleep

    async def refresh_one(self, resource: ResourceSpec, max_retries: int) -> RefreshOutcome:
        """
        Fetch and publish one resource.

        ``max_retries`` counts additional attempts after the first one, so at
        most ``max_retries + 1`` downloads are made.

        Args:
            resource: Resource to refresh
            max_retries: Retries allowed after the first failed attempt

        Returns:
            Outcome; a failed outcome means the published file was left as is

        Raises:
            PublishError: If the finished download could not be published
        """
        if resource.source_url is None:
            logger.info(
                "No source configured, skipping",
                extra={"resource": resource.published_name},
            )
            return RefreshOutcome(resource=resource, succeeded=True, attempts=0)

        temporary_path = self.cache_dir / resource.temporary_name
        published_path = self.cache_dir / resource.published_name
        total_attempts = max_retries + 1
        attempts = 0

        logger.info("Downloading %s", resource.published_name)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(total_attempts),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_exception_type(FetchError),
            before_sleep=lambda state: self._log_retry(resource, state, total_attempts),
            sleep=self._sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    await self.fetcher.fetch(resource.source_url, temporary_path)
        except FetchError as e:
            logger.error(
                "Giving up on %s after %d attempt(s)",
                resource.published_name,
                attempts,
                extra={"url": resource.source_url, "error": str(e)},
            )
            return RefreshOutcome(
                resource=resource, succeeded=False, error=e, attempts=attempts
            )

        try:
            publish_cache_file(temporary_path, published_path)
        except PublishError as e:
            e.attempts = attempts
            raise

        logger.info("Refreshed %s", resource.published_name, extra={"attempts": attempts})

        return RefreshOutcome(resource=resource, succeeded=True, attempts=attempts)

    def _log_retry(
        self, resource: ResourceSpec, state: RetryCallState, total_attempts: int
    ) -> None:
        error = state.outcome.exception() if state.outcome else None
        logger.warning(
            "Failed to download (%d/%d) %s, will sleep %s seconds",
            state.attempt_number,
            total_attempts,
            resource.published_name,
            self.retry_delay,
            extra={"url": resource.source_url, "error": str(error)},
        )


class RefreshCycle:
    """One pass over every resource, in order."""

    def __init__(self, refresher: ResourceRefresher, resources: Sequence[ResourceSpec]) -> None:
        self.refresher = refresher
        self.resources = list(resources)

    async def run_cycle(self, retry_budget: int) -> list[RefreshOutcome]:
        """
        Refresh every resource sequentially.

        A failure on one resource never stops the cycle.

        Args:
            retry_budget: Retries allowed per resource after its first attempt

        Returns:
            One outcome per resource, in resource order
        """
        logger.info(
            "Starting refresh cycle",
            extra={"retry_budget": retry_budget, "resources": len(self.resources)},
        )
        outcomes: list[RefreshOutcome] = []

        for resource in self.resources:
            try:
                outcome = await self.refresher.refresh_one(resource, retry_budget)
            except PublishError as e:
                logger.error(
                    "Refresh of %s failed while publishing",
                    resource.published_name,
                    extra={"error": str(e)},
                    exc_info=True,
                )
                outcome = RefreshOutcome(
                    resource=resource, succeeded=False, error=e, attempts=e.attempts
                )
            outcomes.append(outcome)

        failed = [o.resource.published_name for o in outcomes if not o.succeeded]
        logger.info(
            "Refresh cycle complete",
            extra={"succeeded": len(outcomes) - len(failed), "failed": failed},
        )
        return outcomes
