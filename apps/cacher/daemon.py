"""
Cache Daemon - Scheduler and File Server

Wires the components together and runs them side by side in one event loop:
- RefreshScheduler keeps the cache files up to date
- uvicorn serves the cache directory over HTTP

Termination of either one ends the process.

Usage:
    M3U=https://example.org/list.m3u python -m apps.cacher
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import httpx
import uvicorn

from apps.cacher.fetcher import Fetcher
from apps.cacher.publisher import ensure_cache_dir
from apps.cacher.refresher import RefreshCycle, ResourceRefresher
from apps.cacher.resources import build_resources
from apps.cacher.scheduler import RefreshScheduler
from services.api.app import create_app
from utils.config import Settings, get_settings
from utils.logging import setup_logging

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 10


def build_client(timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Upstream client; redirects are followed, up to MAX_REDIRECTS hops."""
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        max_redirects=MAX_REDIRECTS,
        transport=transport,
    )


def build_server(settings: Settings, cache_dir: Path, published_names: list[str]) -> uvicorn.Server:
    config = uvicorn.Config(
        create_app(cache_dir, published_names),
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_config=None,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return uvicorn.Server(config)


async def run(settings: Settings) -> None:
    """
    Run scheduler and HTTP server until one of them finishes.

    Args:
        settings: Loaded settings with ``M3U`` set
    """
    resources = build_resources(
        settings.M3U,
        settings.XML_TV,
        playlist_name=settings.PLAYLIST_NAME,
        xmltv_name=settings.XMLTV_NAME,
    )
    cache_dir = Path(settings.CACHE_DIR)
    ensure_cache_dir(cache_dir)

    async with build_client(settings.FETCH_TIMEOUT) as client:
        refresher = ResourceRefresher(
            Fetcher(client, settings.USER_AGENT),
            cache_dir,
            retry_delay=settings.RETRY_DELAY_SECONDS,
        )
        scheduler = RefreshScheduler(
            RefreshCycle(refresher, resources),
            refresh_time=settings.REFRESH_TIME,
            catch_up_cutoff=settings.CATCH_UP_CUTOFF,
            startup_retries=settings.STARTUP_RETRIES,
            scheduled_retries=settings.SCHEDULED_RETRIES,
        )
        server = build_server(settings, cache_dir, [r.published_name for r in resources])

        server_task = asyncio.create_task(server.serve(), name="http-server")
        scheduler_task = asyncio.create_task(scheduler.start(), name="scheduler")
        logger.info("Serving cache on %s:%d", settings.SERVER_HOST, settings.SERVER_PORT)

        done, pending = await asyncio.wait(
            [server_task, scheduler_task],
            return_when=asyncio.FIRST_COMPLETED,
        )

        # Stop whichever is still running; an in-flight cycle is abandoned
        server.should_exit = True
        scheduler_task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        for task in done:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()

    logger.info("Cache daemon stopped")


async def main() -> None:
    """Main entry point for the cache daemon."""
    settings = get_settings()
    setup_logging(level=settings.LOG_LEVEL, format_type=settings.LOG_FORMAT)

    logger.info("Welcome to ilovetv cache!")

    if not settings.M3U:
        logger.error("$M3U not found")
        sys.exit(0)

    if not settings.XML_TV:
        logger.warning("$XML_TV not found, proceeding without...")

    try:
        await run(settings)
    except Exception as e:
        logger.error("Cache daemon failed", extra={"error": str(e)}, exc_info=True)
        sys.exit(1)


def cli() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
