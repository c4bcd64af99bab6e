"""
Resource catalogue: the fixed, ordered list of cached documents.
"""

from typing import Optional

from utils.schemas import ResourceKind, ResourceSpec


def build_resources(
    playlist_url: str,
    xmltv_url: Optional[str],
    playlist_name: str = "ilovetv.m3u",
    xmltv_name: str = "xmltv.xml",
) -> list[ResourceSpec]:
    """
    Build the resources refreshed by every cycle, playlist first.

    Raises:
        ValueError: If a published name has no extension
    """
    return [
        ResourceSpec.for_published_name(ResourceKind.PRIMARY, playlist_url, playlist_name),
        ResourceSpec.for_published_name(ResourceKind.SECONDARY, xmltv_url, xmltv_name),
    ]
