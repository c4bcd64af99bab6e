"""
Pydantic Schemas - Data Validation Models

Defines the models shared by the cache daemon:
- Cached resource descriptions
- Per-resource refresh outcomes
- In-memory schedule state

Usage:
    from utils.schemas import ResourceKind, ResourceSpec

    playlist = ResourceSpec.for_published_name(
        ResourceKind.PRIMARY, "https://example.org/list.m3u", "ilovetv.m3u"
    )
    playlist.temporary_name  # "ilovetv-temp.m3u"
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ResourceKind(str, Enum):
    """The two resource classes the daemon caches."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


def split_published_name(name: str) -> tuple[str, str]:
    """Split ``name`` into stem and extension at the last dot.

    Raises:
        ValueError: If the name has no extension separator, or an empty stem or extension
    """
    stem, sep, ext = name.rpartition(".")
    if not sep or not stem or not ext:
        raise ValueError(f"Malformed filename: {name!r}")
    return stem, ext


def temporary_name_for(published_name: str) -> str:
    """Return the in-flight download name, e.g. ``xmltv.xml`` -> ``xmltv-temp.xml``."""
    stem, ext = split_published_name(published_name)
    return f"{stem}-temp.{ext}"


class ResourceSpec(BaseModel):
    """One cached remote document.

    A resource without ``source_url`` is configured but unavailable; refreshing
    it is a no-op.
    """

    kind: ResourceKind = Field(..., description="Resource class")
    source_url: Optional[str] = Field(default=None, description="Upstream URL")
    published_name: str = Field(..., description="Name served from the cache root")
    temporary_name: str = Field(..., description="Name used while downloading")

    class Config:
        frozen = True

    @field_validator("published_name", "temporary_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Names must be bare file names carrying an extension."""
        if "/" in v or "\\" in v:
            raise ValueError(f"File name must not contain a path separator: {v!r}")
        split_published_name(v)
        return v

    @classmethod
    def for_published_name(
        cls,
        kind: ResourceKind,
        source_url: Optional[str],
        published_name: str,
    ) -> "ResourceSpec":
        """Build a spec whose temporary name is derived from the published name."""
        return cls(
            kind=kind,
            source_url=source_url,
            published_name=published_name,
            temporary_name=temporary_name_for(published_name),
        )


class RefreshOutcome(BaseModel):
    """Result of one resource's fetch-and-publish sequence. Never persisted."""

    resource: ResourceSpec
    succeeded: bool
    error: Optional[BaseException] = None
    attempts: int = Field(default=0, ge=0)

    class Config:
        frozen = True
        arbitrary_types_allowed = True


class ScheduleState(BaseModel):
    """Scheduler bookkeeping, recomputed every cycle."""

    next_run: Optional[datetime] = None
    last_outcomes: list[RefreshOutcome] = Field(default_factory=list)
