"""Lift a flat markdown-it token stream into the structural document tree"""

import logging
import re
from typing import Any

import yaml
from markdown_it.token import Token

from mdspa.core.links import is_image_target
from mdspa.core.metadata import stringify_properties
from mdspa.core.models import (
    Document,
    ExportBlock,
    FixedWidthBlock,
    Generic,
    Headline,
    Link,
    Node,
    PropertyDrawer,
    SourceBlock,
)
from mdspa.core.utils.tokens import heading_level, matching_close, plain_text


logger = logging.getLogger(__name__)

TODO_RE = re.compile(r'^(TODO|DONE)\s+')
PROPERTIES_INFO = 'properties'
EXPORT_INFO = 'export'
AUTOLINK_MARKUP = {'autolink', 'linkify'}


def _load_properties(text: str) -> dict[str, str]:
    """Parse a properties fence body; malformed bodies give an empty drawer."""
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        logger.warning("Ignoring malformed properties block: %s", e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring properties block: expected a mapping, got %s", type(data).__name__)
        return {}
    return stringify_properties(data)


def _fence(token: Token) -> Node:
    """Classify a fence by its info string: properties, export or source block."""
    words = token.info.split()
    kind = words[0] if words else None
    if kind == PROPERTIES_INFO:
        return PropertyDrawer(_load_properties(token.content))
    if kind == EXPORT_INFO:
        return ExportBlock(token.content, words[1] if len(words) > 1 else None)
    body = Token('text', '', 0, content=token.content)
    return SourceBlock(kind, [Generic([body], 0)])


def _headline(open_token: Token, inline: Token) -> Headline:
    title = list(inline.children or [])
    todo = None
    if title and title[0].type == 'text':
        m = TODO_RE.match(title[0].content)
        if m:
            todo = m.group(1)
            title[0] = title[0].copy(content=title[0].content[m.end():])
    return Headline(
        level=heading_level(open_token),
        raw_title=plain_text(title).strip(),
        title=title,
        todo=todo,
    )


def _link(tokens: list[Token], start: int, end: int) -> Link:
    open_token = tokens[start]
    target = open_token.attrGet('href') or ''
    children = inline_nodes(tokens, start + 1, end)
    has_description = bool(children) and open_token.markup not in AUTOLINK_MARKUP
    return Link(
        target=target,
        is_image=not has_description and is_image_target(target),
        has_description=has_description,
        children=children,
    )


def inline_nodes(tokens: list[Token], start: int = 0, end: int | None = None) -> list[Node]:
    """Build nodes for the inline children of an `inline` token."""
    end = len(tokens) if end is None else end
    nodes: list[Node] = []
    i = start
    while i < end:
        tok = tokens[i]
        if tok.nesting == 1:
            j = matching_close(tokens, i)
            if tok.type == 'link_open':
                nodes.append(_link(tokens, i, j))
            else:
                nodes.append(Generic(tokens, i, j, inline_nodes(tokens, i + 1, j)))
            i = j + 1
            continue
        if tok.type == 'image':
            nodes.append(Link(target=tok.attrGet('src') or '', is_image=True,
                              has_description=False, alt=tok.content))
        else:
            nodes.append(Generic(tokens, i))
        i += 1
    return nodes


def _leaf(tokens: list[Token], i: int) -> Node:
    tok = tokens[i]
    if tok.type == 'inline':
        return Generic(tokens, i, children=inline_nodes(tok.children or []))
    if tok.type == 'fence':
        return _fence(tok)
    if tok.type == 'code_block':
        return FixedWidthBlock(tok.content)
    if tok.type == 'html_block':
        return ExportBlock(tok.content, 'html')
    return Generic(tokens, i)


def nest_sections(nodes: list[Node]) -> list[Node]:
    """Move every node after a heading under it until a heading of the same or lower level."""
    root: list[Node] = []
    stack: list[Headline] = []
    for node in nodes:
        if isinstance(node, Headline):
            while stack and stack[-1].level >= node.level:
                stack.pop()
            (stack[-1].children if stack else root).append(node)
            stack.append(node)
        else:
            (stack[-1].children if stack else root).append(node)
    return root


def block_nodes(tokens: list[Token], start: int = 0, end: int | None = None) -> list[Node]:
    """Build nodes for a run of block-level tokens, nesting sections under headings."""
    end = len(tokens) if end is None else end
    nodes: list[Node] = []
    i = start
    while i < end:
        tok = tokens[i]
        if tok.nesting == 1:
            j = matching_close(tokens, i)
            if tok.type == 'heading_open':
                nodes.append(_headline(tok, tokens[i + 1]))
            else:
                nodes.append(Generic(tokens, i, j, block_nodes(tokens, i + 1, j)))
            i = j + 1
            continue
        nodes.append(_leaf(tokens, i))
        i += 1
    return nest_sections(nodes)


def build_document(tokens: list[Token], properties: dict[str, Any]) -> Document:
    """Build the document tree; non-empty front matter becomes a leading property drawer."""
    children = block_nodes(tokens)
    if properties:
        children.insert(0, PropertyDrawer(stringify_properties(properties)))
    title = properties.get('title')
    return Document(
        properties=properties,
        title=None if title is None else str(title),
        children=children,
    )
