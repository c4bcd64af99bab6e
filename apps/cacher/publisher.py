"""
Cache Publisher

Promotes a completed download to its published name in one rename, so the
file server only ever sees a complete previous or a complete new version.

Usage:
    from apps.cacher.publisher import publish_cache_file

    publish_cache_file(cache_dir / "ilovetv-temp.m3u", cache_dir / "ilovetv.m3u")
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class PublishError(IOError):
    """The temporary file could not be renamed over the published name."""

    # Fetch attempts that preceded the failed rename; set by the refresher
    attempts: int = 0


def publish_cache_file(temporary_path: Path, published_path: Path) -> None:
    """
    Atomically replace ``published_path`` with ``temporary_path``.

    Both paths must live on the same filesystem (they share the cache root).

    Args:
        temporary_path: Fully written and flushed download
        published_path: Name served to clients

    Raises:
        PublishError: If the temporary file is missing or the rename is rejected
    """
    try:
        os.replace(temporary_path, published_path)
    except OSError as e:
        logger.error(
            "Failed to publish cache file",
            extra={
                "temporary_path": str(temporary_path),
                "published_path": str(published_path),
                "error": str(e),
            },
        )
        raise PublishError(
            f"Failed to rename {temporary_path} to {published_path}: {e}"
        ) from e

    logger.info(
        "Published cache file",
        extra={"published_path": str(published_path)},
    )


def ensure_cache_dir(cache_dir: Path) -> None:
    """Create the cache root if it does not exist yet."""
    cache_dir.mkdir(parents=True, exist_ok=True)
