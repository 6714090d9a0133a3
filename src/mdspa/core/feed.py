"""RSS 2.0 feed: per-document items, channel assembly and structural validation"""

import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from email.utils import format_datetime, parsedate_to_datetime
from pathlib import PurePath
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel

from mdspa.core.links import MARKUP_SUFFIXES
from mdspa.core.metadata import extract_metadata
from mdspa.core.models import Document


logger = logging.getLogger(__name__)

FEED_FILE = 'feed.rss'


class FeedItem(BaseModel):
    title:       Optional[str] = None
    description: Optional[str] = None
    pub_date:    Optional[str] = None
    link:        Optional[str] = None


class FeedChannel(BaseModel):
    title:           str
    link:            str
    description:     str
    language:        str
    last_build_date: str
    items:           list[FeedItem] = []


class FeedValidationError(ValueError):
    """The assembled channel is not a valid RSS 2.0 document."""


def page_path(rel_path: PurePath) -> str:
    """Relative path of a document's page: POSIX separators, markup suffix removed."""
    path = PurePath(rel_path).as_posix()
    for suffix in MARKUP_SUFFIXES:
        if path.endswith(suffix):
            return path[:-len(suffix)]
    return path


def build_item(root_address: str, document: Document, rel_path: PurePath) -> Optional[FeedItem]:
    """Project a document's front matter into a feed item; None when it opts out."""
    meta = extract_metadata(document.properties)
    if meta.skip_feed:
        logger.debug("Leaving '%s' out of the feed", rel_path)
        return None
    return FeedItem(
        title=meta.title,
        description=meta.description,
        pub_date=meta.pub_date,
        link=f"{root_address.rstrip('/')}/{page_path(rel_path)}",
    )


def _is_absolute_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


def _is_rfc822(value: str) -> bool:
    try:
        return parsedate_to_datetime(value) is not None
    except (TypeError, ValueError):
        return False


def validate_feed(channel: FeedChannel) -> None:
    """Raise FeedValidationError listing every structural problem in the channel."""
    errors = []
    if not channel.title.strip():
        errors.append("channel title is empty")
    if not channel.description.strip():
        errors.append("channel description is empty")
    if not _is_absolute_url(channel.link):
        errors.append(f"channel link is not an absolute URL: {channel.link!r}")
    if not _is_rfc822(channel.last_build_date):
        errors.append(f"lastBuildDate is not an RFC 2822 date: {channel.last_build_date!r}")
    for item in channel.items:
        if item.link is not None and not _is_absolute_url(item.link):
            errors.append(f"item link is not an absolute URL: {item.link!r}")
        if item.pub_date is not None and not _is_rfc822(item.pub_date):
            errors.append(f"item {item.link} pubDate is not an RFC 2822 date: {item.pub_date!r}")
    if errors:
        raise FeedValidationError("Invalid RSS feed: " + "; ".join(errors))


def _sub(parent: ET.Element, tag: str, text: Optional[str]) -> None:
    if text is not None:
        ET.SubElement(parent, tag).text = text


def render_feed(channel: FeedChannel) -> str:
    rss = ET.Element('rss', version='2.0')
    node = ET.SubElement(rss, 'channel')
    _sub(node, 'title', channel.title)
    _sub(node, 'link', channel.link)
    _sub(node, 'description', channel.description)
    _sub(node, 'language', channel.language)
    _sub(node, 'lastBuildDate', channel.last_build_date)
    for item in channel.items:
        entry = ET.SubElement(node, 'item')
        _sub(entry, 'title', item.title)
        _sub(entry, 'link', item.link)
        _sub(entry, 'description', item.description)
        _sub(entry, 'pubDate', item.pub_date)
    return '<?xml version="1.0" encoding="utf-8"?>' + ET.tostring(rss, encoding='unicode')


def build_feed(
    title: str,
    link: str,
    description: str,
    language: str,
    items: list[FeedItem],
    built_at: datetime,
    ) -> str:
    """Assemble, validate and serialise the site feed."""
    if built_at.tzinfo is None:
        built_at = built_at.astimezone()
    channel = FeedChannel(
        title=title,
        link=link,
        description=description,
        language=language,
        last_build_date=format_datetime(built_at),
        items=items,
    )
    validate_feed(channel)
    return render_feed(channel)
