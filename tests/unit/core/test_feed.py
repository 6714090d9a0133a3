"""Unit tests for core/feed.py"""

import datetime
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from mdspa.core.feed import (
    FeedChannel,
    FeedItem,
    FeedValidationError,
    build_feed,
    build_item,
    page_path,
    validate_feed,
)
from mdspa.core.models import Document


ROOT = "https://example.com"
BUILT_AT = datetime.datetime(2024, 3, 1, 9, 0, tzinfo=datetime.timezone.utc)


def _doc(**properties) -> Document:
    return Document(properties=properties)


def test_page_path_strips_markup_suffix():
    assert page_path(Path("blog/post.md")) == "blog/post"
    assert page_path(Path("notes.mdx")) == "notes"


def test_build_item_copies_fields():
    item = build_item(ROOT, _doc(title="T", description="D", pub_date="Fri, 01 Mar 2024 09:00:00 +0000"),
                      Path("blog/post.md"))
    assert item == FeedItem(
        title="T", description="D", pub_date="Fri, 01 Mar 2024 09:00:00 +0000",
        link="https://example.com/blog/post",
    )


def test_build_item_missing_fields_stay_empty():
    item = build_item(ROOT, _doc(), Path("a.md"))
    assert item.title is None
    assert item.description is None
    assert item.pub_date is None
    assert item.link == "https://example.com/a"


def test_build_item_trims_root_slash():
    assert build_item(ROOT + "/", _doc(), Path("a.md")).link == "https://example.com/a"


def test_skip_rss_suppresses_item():
    """A feed-excluded document yields no item even with a title and description."""
    assert build_item(ROOT, _doc(title="T", description="D", skip_rss=True), Path("a.md")) is None
    assert build_item(ROOT, _doc(title="T", skip_rss=None), Path("a.md")) is None


def test_skip_rss_false_keeps_item():
    assert build_item(ROOT, _doc(title="T", skip_rss=False), Path("a.md")) is not None


def test_build_feed_channel_and_items():
    items = [
        FeedItem(title="One", link=f"{ROOT}/one"),
        FeedItem(title="Two", description="<b>second</b>", link=f"{ROOT}/two",
                 pub_date="Fri, 01 Mar 2024 09:00:00 +0000"),
    ]
    feed = build_feed("Site", ROOT, "A site", "en-GB", items, BUILT_AT)
    assert feed.startswith('<?xml version="1.0" encoding="utf-8"?>')

    rss = ET.fromstring(feed.encode("utf-8"))
    assert rss.tag == "rss" and rss.get("version") == "2.0"
    channel = rss.find("channel")
    assert channel.findtext("title") == "Site"
    assert channel.findtext("link") == ROOT
    assert channel.findtext("description") == "A site"
    assert channel.findtext("language") == "en-GB"
    assert channel.findtext("lastBuildDate") == "Fri, 01 Mar 2024 09:00:00 +0000"
    entries = channel.findall("item")
    assert [e.findtext("title") for e in entries] == ["One", "Two"]
    assert entries[0].find("description") is None
    assert entries[1].findtext("description") == "<b>second</b>"
    assert entries[1].findtext("pubDate") == "Fri, 01 Mar 2024 09:00:00 +0000"


def test_build_feed_empty_items():
    rss = ET.fromstring(build_feed("Site", ROOT, "A site", "en-GB", [], BUILT_AT).encode("utf-8"))
    assert rss.find("channel").findall("item") == []


def _channel(**changes) -> FeedChannel:
    data = dict(title="Site", link=ROOT, description="A site", language="en-GB",
                last_build_date="Fri, 01 Mar 2024 09:00:00 +0000", items=[])
    data.update(changes)
    return FeedChannel(**data)


def test_validate_feed_accepts_valid_channel():
    validate_feed(_channel(items=[FeedItem(link=f"{ROOT}/a")]))


@pytest.mark.parametrize("changes,message", [
    ({"title": ""}, "channel title is empty"),
    ({"description": " "}, "channel description is empty"),
    ({"link": ""}, "channel link is not an absolute URL"),
    ({"link": "example.com"}, "channel link is not an absolute URL"),
    ({"items": [FeedItem(link="/relative")]}, "item link is not an absolute URL"),
    ({"items": [FeedItem(link=f"{ROOT}/a", pub_date="2024-03-01")]}, "pubDate is not an RFC 2822 date"),
])
def test_validate_feed_rejects(changes, message):
    with pytest.raises(FeedValidationError, match=message):
        validate_feed(_channel(**changes))


def test_feed_validation_error_is_value_error():
    assert issubclass(FeedValidationError, ValueError)
