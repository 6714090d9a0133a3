"""Unit tests for core/metadata.py"""

import datetime

import pytest

from mdspa.core.metadata import extract_metadata, meta_tags, parse_list, rfc822, stringify


def test_extract_metadata_defaults():
    meta = extract_metadata({})
    assert meta.title is None
    assert meta.description is None
    assert meta.pub_date is None
    assert meta.skip_feed is False
    assert meta.base_depth == 0
    assert meta.tags == []


def test_extract_metadata_fields():
    meta = extract_metadata({
        "title": "Post", "description": "About", "pub_date": "Tue, 02 Jan 2024 10:00:00 +0000",
        "base_depth": "-1", "tags": ["a", "b"],
    })
    assert meta.title == "Post"
    assert meta.description == "About"
    assert meta.pub_date == "Tue, 02 Jan 2024 10:00:00 +0000"
    assert meta.base_depth == -1
    assert meta.tags == ["a", "b"]


def test_yaml_date_becomes_rfc822():
    meta = extract_metadata({"pub_date": datetime.date(2024, 1, 1)})
    assert meta.pub_date == "Mon, 01 Jan 2024 00:00:00 +0000"


def test_rfc822_keeps_timezone():
    tz = datetime.timezone(datetime.timedelta(hours=2))
    assert rfc822(datetime.datetime(2024, 1, 1, 12, 30, tzinfo=tz)) == "Mon, 01 Jan 2024 12:30:00 +0200"


@pytest.mark.parametrize("value,expected", [
    (None, True), (True, True), ("yes", True), ("true", True), (1, True),
    (False, False), ("no", False), (0, False),
])
def test_skip_rss_marker(value, expected):
    """A bare skip_rss key or a truthy value excludes the document from the feed."""
    assert extract_metadata({"skip_rss": value}).skip_feed is expected


def test_parse_list_accepts_comma_string():
    assert parse_list("a, b,,c") == ["a", "b", "c"]
    assert parse_list(None) == []


@pytest.mark.parametrize("value,expected", [
    (None, ""), (True, "true"), (3, "3"), (datetime.date(2024, 5, 6), "2024-05-06"), (["a", 1], "a, 1"),
])
def test_stringify(value, expected):
    assert stringify(value) == expected


def test_meta_tags_projection():
    """Only recognised keys are projected, case-insensitively, in drawer order."""
    tags = meta_tags({"ID": "x", "colour": "red", "modified_time": "m", "published_time": "p"})
    assert tags == [
        ("article:id", "x"),
        ("article:modified_time", "m"),
        ("article:published_time", "p"),
    ]
