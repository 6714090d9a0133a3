"""Recognised document properties: feed fields, base depth, tags and <meta> projection"""

import datetime
import logging
from email.utils import format_datetime
from typing import Any, Optional

from pydantic import BaseModel


logger = logging.getLogger(__name__)

META_PROPERTIES: dict[str, str] = {
    'id':             'article:id',
    'modified_time':  'article:modified_time',
    'published_time': 'article:published_time',
}
SKIP_FEED_KEY = 'skip_rss'


class DocumentMeta(BaseModel):
    """Fields pulled out of a document's front matter."""
    title:       Optional[str] = None
    description: Optional[str] = None
    pub_date:    Optional[str] = None
    skip_feed:   bool = False
    base_depth:  int = 0
    tags:        list[str] = []


def parse_int(value: object, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {'1', 'true', 'yes', 'y', 'on'}
    return False


def parse_list(value: object) -> list[str]:
    """Accept a YAML list or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value]
    else:
        items = [item.strip() for item in str(value).split(',')]
    return [item for item in items if item]


def rfc822(value: datetime.date) -> str:
    """Render a YAML date or datetime as an RFC 2822 timestamp (naive values are UTC)."""
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime.combine(value, datetime.time())
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return format_datetime(value)


def stringify(value: Any) -> str:
    """Render a YAML scalar or list as the text a property drawer would hold."""
    if value is None:
        return ''
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return ', '.join(stringify(v) for v in value)
    return str(value)


def stringify_properties(data: dict[str, Any]) -> dict[str, str]:
    return {str(k): stringify(v) for k, v in data.items()}


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return stringify(value)


def extract_metadata(properties: dict[str, Any]) -> DocumentMeta:
    """Pull the recognised keys out of a front matter mapping; absent keys keep defaults."""
    pub_date = properties.get('pub_date')
    if isinstance(pub_date, (datetime.date, datetime.datetime)):
        pub_date = rfc822(pub_date)

    # A bare `skip_rss:` key loads as None and still marks the document.
    skip_feed = SKIP_FEED_KEY in properties and (
        properties[SKIP_FEED_KEY] is None or parse_bool(properties[SKIP_FEED_KEY])
    )

    return DocumentMeta(
        title=_optional_text(properties.get('title')),
        description=_optional_text(properties.get('description')),
        pub_date=_optional_text(pub_date),
        skip_feed=skip_feed,
        base_depth=parse_int(properties.get('base_depth'), 0),
        tags=parse_list(properties.get('tags')),
    )


def meta_tags(properties: dict[str, str]) -> list[tuple[str, str]]:
    """Project recognised drawer keys to (meta property, content) pairs; drop the rest."""
    tags = []
    for key, value in properties.items():
        prop = META_PROPERTIES.get(key.lower())
        if prop is None:
            logger.debug("Ignoring property %s:%s", key, value)
            continue
        tags.append((prop, value))
    return tags
