"""Frontmatter extraction, markdown-it tokenization and document tree construction"""

import re
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from mdspa.core.links import FILE_SCHEME
from mdspa.core.models import ParsedDoc
from mdspa.core.tree import build_document


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx'}
DEFAULT_PARSER = 'gfm-like'


def make_parser(preset: str = DEFAULT_PARSER) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name.

    file: targets are accepted as links so the link classifier can treat
    them as site-relative; every other target goes through the default check.
    """
    md = MarkdownIt(preset, options_update={"linkify": False})
    default_validate = md.validateLink

    def validate_link(url: str) -> bool:
        return url.strip().lower().startswith(FILE_SCHEME) or default_validate(url)

    md.validateLink = validate_link
    return md


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def is_markup(path: Path) -> bool:
    return path.suffix in MD_EXTENSIONS


def parse_text(text: str, path: Path, parser: MarkdownIt) -> ParsedDoc:
    """Parse markup text into a ParsedDoc with token stream and document tree."""
    frontmatter, body = _strip_frontmatter(text.lstrip('\ufeff'))
    tokens = parser.parse(body)
    return ParsedDoc(
        path=path,
        raw_text=text,
        markdown=body,
        frontmatter=frontmatter,
        tokens=tokens,
        document=build_document(tokens, frontmatter),
    )


def parse_file(path: Path, parser: MarkdownIt) -> ParsedDoc:
    """Parse a single markup file."""
    return parse_text(path.read_text(encoding='utf-8'), path, parser)
