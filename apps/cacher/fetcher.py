"""
Upstream Fetcher

Performs one HTTP GET per call and streams the body to a local file.
No retries happen here; the refresher owns the retry policy.
"""

import logging
import os
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A single download attempt failed."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class BadStatusError(FetchError):
    """Upstream answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(url, f"Got status code {status_code} from {url}")
        self.status_code = status_code


class NetworkError(FetchError):
    """Connection or transport level failure."""


class LocalIOError(FetchError):
    """Writing the body to local storage failed."""


class Fetcher:
    """
    Streaming downloader built on a shared httpx.AsyncClient.

    The client's own defaults (timeouts, redirects, pooling) apply.
    """

    def __init__(self, client: httpx.AsyncClient, user_agent: str) -> None:
        self.client = client
        self.headers = {"User-Agent": user_agent, "Accept": "*/*"}

    async def fetch(self, url: str, destination: Path) -> None:
        """
        Download ``url`` into ``destination``, overwriting it.

        The body is written chunk by chunk and fsync'ed before returning, so a
        successful return means the file is complete on disk. A failed attempt
        removes whatever was partially written.

        Args:
            url: Upstream URL
            destination: Local file to create or overwrite

        Raises:
            BadStatusError: On any non-2xx response (no file is written)
            NetworkError: On connection/transport errors
            LocalIOError: On local write errors
        """
        try:
            async with self.client.stream("GET", url, headers=self.headers) as response:
                if not response.is_success:
                    logger.warning(
                        "Got status code %d", response.status_code, extra={"url": url}
                    )
                    raise BadStatusError(url, response.status_code)

                await self._write_body(response, url, destination)

        except httpx.HTTPError as e:
            _discard(destination)
            raise NetworkError(url, f"Transport error fetching {url}: {e}") from e

        except FetchError:
            _discard(destination)
            raise

    async def _write_body(
        self, response: httpx.Response, url: str, destination: Path
    ) -> None:
        try:
            with open(destination, "wb") as f:
                logger.debug("Created file %s", destination)
                written = 0
                async for chunk in response.aiter_bytes():
                    f.write(chunk)
                    written += len(chunk)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise LocalIOError(url, f"Failed writing {destination}: {e}") from e

        logger.debug(
            "Download complete",
            extra={"url": url, "path": str(destination), "bytes": written},
        )


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove partial download %s: %s", path, e)
