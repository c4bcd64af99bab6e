"""Shared fixtures for the cache daemon tests."""

from pathlib import Path
from typing import Optional, Union

import pytest

from apps.cacher.fetcher import FetchError
from utils.schemas import ResourceKind, ResourceSpec


class ScriptedFetcher:
    """Fetcher double that replays a script of bodies and errors."""

    def __init__(self, script: list[Union[bytes, Exception]]) -> None:
        self.script = list(script)
        self.calls: list[tuple[str, Path]] = []

    async def fetch(self, url: str, destination: Path) -> None:
        self.calls.append((url, destination))
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        destination.write_bytes(step)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    path = tmp_path / "cache"
    path.mkdir()
    return path


def make_resource(
    url: Optional[str] = "https://upstream.test/list.m3u",
    name: str = "ilovetv.m3u",
    kind: ResourceKind = ResourceKind.PRIMARY,
) -> ResourceSpec:
    return ResourceSpec.for_published_name(kind, url, name)


def fetch_failure(message: str = "boom") -> FetchError:
    return FetchError("https://upstream.test/list.m3u", message)
