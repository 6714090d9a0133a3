"""Document tree -> HTML fragment.

The walk emits an enter and a leave event per node. HtmlVisitor.enter
returns Visit.SKIP to keep the walk out of a node's children; a skipped node
also gets no leave event, so enter has already written everything for it.

Headings are renumbered against TransformContext.base_depth: the front
matter `base_depth` shifts every heading, and a sentinel heading (title
starting with '.') renders as a plain <div> grouping its subtree while
shifting the headings inside it up one level.
"""

import logging
from dataclasses import dataclass, field
from html import escape
from pathlib import PurePath
from typing import Iterable, Optional

from markdown_it import MarkdownIt

from mdspa.core.links import LinkLocality, classify
from mdspa.core.metadata import extract_metadata, meta_tags
from mdspa.core.models import (
    SENTINEL,
    Document,
    ExportBlock,
    FixedWidthBlock,
    Generic,
    Headline,
    Link,
    Node,
    PropertyDrawer,
    SourceBlock,
    Visit,
)
from mdspa.core.parse import make_parser
from mdspa.core.utils.slug import slugify


logger = logging.getLogger(__name__)

MIN_HEADING, MAX_HEADING = 1, 6

LOCAL_ANCHOR = (
    '<a hx-get="{0}/_.html" preload hx-target="#content" hx-push-url="{0}/" '
    'hx-history-target="{0}/" aria-controls="content" href="{0}">'
)
REMOTE_ANCHOR = '<a href="{0}" rel="external" target="_blank">'


@dataclass
class TransformContext:
    """Mutable state for one document's transformation."""
    base_depth: int = 0
    parts: list[str] = field(default_factory=list)

    def push(self, html: str) -> None:
        self.parts.append(html)

    def finish(self) -> str:
        return ''.join(self.parts)


def heading_tag(depth: int) -> str:
    """Heading element for a computed depth, clamped to h1..h6."""
    return f"h{min(max(depth, MIN_HEADING), MAX_HEADING)}"


class HtmlVisitor:
    """Per-node-type enter/leave callbacks writing into a TransformContext."""

    def __init__(self, parser: MarkdownIt, rel_path: PurePath, locality: LinkLocality = LinkLocality.stem):
        self.parser = parser
        self.renderer = parser.renderer
        self.options = parser.options
        self.env: dict = {}
        self.rel_path = rel_path
        self.locality = locality

    # --- document ---

    def enter_document(self, document: Document, ctx: TransformContext, tags: Optional[list[str]] = None) -> None:
        if document.title is None:
            return
        tag = heading_tag(ctx.base_depth)
        heading = f"<{tag}>{self.parser.renderInline(document.title)}</{tag}>"
        if not tags:
            ctx.push(heading)
            return
        items = ''.join(f"<li>{escape(t)}</li>" for t in tags)
        ctx.push(f'<header>{heading}<ul class="tags">{items}</ul></header>')

    # --- dispatch ---

    def enter(self, node: Node, ctx: TransformContext) -> Visit:
        if isinstance(node, Headline):
            return self._enter_headline(node, ctx)
        if isinstance(node, Link):
            return self._enter_link(node, ctx)
        if isinstance(node, SourceBlock):
            if node.language:
                ctx.push(f'<pre><code class="lang-{escape(node.language)}">')
            else:
                ctx.push('<pre><code>')
            return Visit.DESCEND
        if isinstance(node, FixedWidthBlock):
            ctx.push(f"<pre><samp>{escape(node.text)}</samp></pre>")
            return Visit.SKIP
        if isinstance(node, ExportBlock):
            # Raw author HTML, emitted unescaped.
            ctx.push(node.value)
            return Visit.SKIP
        if isinstance(node, PropertyDrawer):
            for prop, value in meta_tags(node.properties):
                ctx.push(f'<meta property="{prop}" content="{escape(value)}">')
            return Visit.SKIP
        return self._enter_default(node, ctx)

    def leave(self, node: Node, ctx: TransformContext) -> None:
        if isinstance(node, Headline):
            if node.is_sentinel:
                ctx.base_depth += 1
                ctx.push('</div>')
            else:
                ctx.push('</section>')
        elif isinstance(node, Link):
            ctx.push('</a>')
        elif isinstance(node, SourceBlock):
            ctx.push('</code></pre>')
        elif isinstance(node, Generic):
            if node.close is not None:
                ctx.push(self._render_token(node.tokens, node.close))

    # --- handlers ---

    def _enter_headline(self, node: Headline, ctx: TransformContext) -> Visit:
        if node.is_sentinel:
            label = node.raw_title.replace(SENTINEL, ' ').strip()
            ctx.push(f'<div class="{escape(label)}">')
            ctx.base_depth -= 1
            return Visit.DESCEND

        tag = heading_tag(node.level + ctx.base_depth)
        slug = slugify(node.raw_title)
        marker = f'<span class="{node.todo.lower()}">{node.todo}</span> ' if node.todo else ''
        title = self.renderer.renderInline(node.title, self.options, self.env)
        ctx.push(f'<section id="{slug}"><{tag}><a href="#{slug}">{marker}{title}</a></{tag}>')
        return Visit.DESCEND

    def _enter_link(self, node: Link, ctx: TransformContext) -> Visit:
        target, is_local = classify(node.target, self.rel_path, self.locality)
        href = escape(target)

        if node.is_image:
            alt = f' alt="{escape(node.alt)}"' if node.alt else ''
            ctx.push(f'<img src="{href}"{alt}>')
            return Visit.SKIP

        ctx.push(LOCAL_ANCHOR.format(href) if is_local else REMOTE_ANCHOR.format(href))
        if not node.has_description:
            ctx.push(f"{href}</a>")
            return Visit.SKIP
        return Visit.DESCEND

    def _enter_default(self, node: Generic, ctx: TransformContext) -> Visit:
        token = node.token
        # An inline container has no markup of its own; its children carry it.
        if token.type != 'inline':
            logger.debug("Default handling for %s", token.type)
            ctx.push(self._render_token(node.tokens, node.index))
        return Visit.DESCEND

    def _render_token(self, tokens: list, idx: int) -> str:
        rule = self.renderer.rules.get(tokens[idx].type)
        if rule is not None:
            return rule(tokens, idx, self.options, self.env)
        return self.renderer.renderToken(tokens, idx, self.options, self.env)


def walk(nodes: Iterable[Node], visitor: HtmlVisitor, ctx: TransformContext) -> None:
    """Depth-first walk; a SKIP from enter suppresses both the children and leave."""
    for node in nodes:
        if visitor.enter(node, ctx) is Visit.SKIP:
            continue
        walk(getattr(node, 'children', ()), visitor, ctx)
        visitor.leave(node, ctx)


def to_html(
    document: Document,
    rel_path: PurePath,
    tags: Optional[list[str]] = None,
    locality: LinkLocality = LinkLocality.stem,
    parser: Optional[MarkdownIt] = None,
    ) -> str:
    """Render a parsed document tree to an HTML fragment."""
    ctx = TransformContext(base_depth=extract_metadata(document.properties).base_depth)
    visitor = HtmlVisitor(parser or make_parser(), PurePath(rel_path), locality)
    visitor.enter_document(document, ctx, tags)
    walk(document.children, visitor, ctx)
    return ctx.finish()
