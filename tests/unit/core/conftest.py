"""Shared fixtures for core unit tests"""

from pathlib import Path

import pytest

from mdspa.core.links import LinkLocality
from mdspa.core.parse import make_parser, parse_text
from mdspa.core.transform import to_html


@pytest.fixture(name="parser")
def parser_fixture():
    return make_parser("gfm-like")


@pytest.fixture(name="parse")
def parse_fixture(parser):
    """Parse markup text as if it lived at the given relative path."""
    def _parse(text: str, path: str = "post.md"):
        return parse_text(text, Path(path), parser)
    return _parse


@pytest.fixture(name="render")
def render_fixture(parser, parse):
    """Render markup text to an HTML fragment."""
    def _render(text: str, path: str = "post.md", tags=None, locality=LinkLocality.stem) -> str:
        doc = parse(text, path).document
        return to_html(doc, Path(path), tags, locality, parser)
    return _render
