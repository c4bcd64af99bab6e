"""
FastAPI application serving the cache directory.

Usage:
    app = create_app(Path("./ilovetv_cache"), ["ilovetv.m3u", "xmltv.xml"])
"""

import logging
from pathlib import Path
from typing import Any, Sequence

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

logger = logging.getLogger(__name__)


def create_app(cache_dir: Path, published_names: Sequence[str] = ()) -> FastAPI:
    """
    Build the file-serving app.

    The health route is registered before the static mount so it wins over a
    cache file of the same name.

    Args:
        cache_dir: Directory served at ``/``; must exist
        published_names: Files reported by ``/health``
    """
    app = FastAPI(title="ilovetv cache", docs_url=None, redoc_url=None, openapi_url=None)
    names = list(published_names)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "files": {name: (cache_dir / name).is_file() for name in names},
        }

    app.mount("/", StaticFiles(directory=cache_dir), name="cache")

    logger.debug("Cache app created", extra={"cache_dir": str(cache_dir)})
    return app
