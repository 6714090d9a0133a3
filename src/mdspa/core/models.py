"""Structural document tree produced by the parse step and consumed by the transformer"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from markdown_it.token import Token


SENTINEL = '.'


class Visit(Enum):
    """Result of an enter callback: walk into the node's children or skip them (and its leave)."""
    DESCEND = 'descend'
    SKIP = 'skip'


@dataclass
class Headline:
    """A heading and every node nested under it up to the next heading of the same or lower level."""
    level:     int
    raw_title: str                  # plain title text, TODO/DONE keyword removed
    title:     list[Token]          # inline tokens rendered inside the heading anchor
    todo:      Optional[str] = None  # 'TODO' or 'DONE'
    children:  list['Node'] = field(default_factory=list)

    @property
    def is_sentinel(self) -> bool:
        return self.raw_title.startswith(SENTINEL)


@dataclass
class Link:
    target:          str
    is_image:        bool = False
    has_description: bool = True
    alt:             str = ''
    children:        list['Node'] = field(default_factory=list)


@dataclass
class SourceBlock:
    """Fenced code with a declared language; body is a single text node."""
    language: Optional[str]
    children: list['Node'] = field(default_factory=list)


@dataclass
class FixedWidthBlock:
    text: str


@dataclass
class ExportBlock:
    """Author-supplied HTML emitted verbatim."""
    value:   str
    backend: Optional[str] = None


@dataclass
class PropertyDrawer:
    properties: dict[str, str]


@dataclass
class Generic:
    """Any other markdown-it token, rendered by the parser's default rule.

    The token is kept in its original stream so that default rendering sees
    the same neighbours markdown-it itself would. close is the index of the
    matching closing token for container tokens.
    """
    tokens:   list[Token]
    index:    int
    close:    Optional[int] = None
    children: list['Node'] = field(default_factory=list)

    @property
    def token(self) -> Token:
        return self.tokens[self.index]


Node = Union[Headline, Link, SourceBlock, FixedWidthBlock, ExportBlock, PropertyDrawer, Generic]


@dataclass
class Document:
    """Root of the structural tree."""
    properties: dict[str, Any] = field(default_factory=dict)
    title:      Optional[str] = None
    children:   list[Node] = field(default_factory=list)


@dataclass
class ParsedDoc:
    """Parse result for one markup file; not persisted."""
    path:        Path
    raw_text:    str            # full file content (includes frontmatter)
    markdown:    str            # body only (frontmatter stripped)
    frontmatter: dict[str, Any]
    tokens:      list           # markdown-it Token objects
    document:    Document
