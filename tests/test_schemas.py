import pytest
from pydantic import ValidationError

from apps.cacher.resources import build_resources
from utils.schemas import ResourceKind, ResourceSpec, temporary_name_for


@pytest.mark.parametrize(
    "published, temporary",
    [
        ("ilovetv.m3u", "ilovetv-temp.m3u"),
        ("xmltv.xml", "xmltv-temp.xml"),
        ("guide.xml.gz", "guide.xml-temp.gz"),
    ],
)
def test_temporary_name_keeps_extension(published, temporary):
    assert temporary_name_for(published) == temporary


@pytest.mark.parametrize("name", ["playlist", ".m3u", "playlist."])
def test_malformed_name_is_rejected(name):
    with pytest.raises(ValueError):
        ResourceSpec.for_published_name(ResourceKind.PRIMARY, "https://upstream.test", name)


def test_path_separator_is_rejected():
    with pytest.raises(ValidationError):
        ResourceSpec(
            kind=ResourceKind.PRIMARY,
            published_name="../escape.m3u",
            temporary_name="escape-temp.m3u",
        )


def test_resource_spec_is_immutable():
    spec = ResourceSpec.for_published_name(ResourceKind.PRIMARY, "https://upstream.test", "a.m3u")
    with pytest.raises(ValidationError):
        spec.source_url = "https://elsewhere.test"


def test_build_resources_orders_playlist_first():
    resources = build_resources("https://upstream.test/list.m3u", None)

    assert [r.kind for r in resources] == [ResourceKind.PRIMARY, ResourceKind.SECONDARY]
    assert [r.published_name for r in resources] == ["ilovetv.m3u", "xmltv.xml"]
    assert resources[0].source_url == "https://upstream.test/list.m3u"
    assert resources[1].source_url is None


def test_build_resources_custom_names():
    resources = build_resources("u1", "u2", playlist_name="tv.m3u8", xmltv_name="epg.xml")

    assert [r.temporary_name for r in resources] == ["tv-temp.m3u8", "epg-temp.xml"]
