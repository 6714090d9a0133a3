"""Build pipeline: walk the source tree, render pages, copy assets, write the feed"""

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from markdown_it import MarkdownIt

from mdspa.config import Settings
from mdspa.core.feed import FEED_FILE, FeedItem, build_feed, build_item
from mdspa.core.metadata import extract_metadata
from mdspa.core.output import OutputKind, OutputWriter
from mdspa.core.parse import is_markup, make_parser, parse_file
from mdspa.core.transform import to_html
from mdspa.core.utils.fs import ensure_dir, needs_copy, should_skip, walk_tree


logger = logging.getLogger(__name__)

PAGE_STUB = 'index.html'
PAGE_FRAGMENT = '_.html'

# Forwards a direct request for /a/b/ to the single-page shell as /?/a/b/
STUB_HTML = """\
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml" xml:lang="en" lang="en">
	<head>
		<title>Redirecting to root page...</title>
		<script type="text/javascript">
var l = window.location;
l.replace(
  l.protocol + '//' + l.hostname + (l.port ? ':' + l.port : '') +
  '/?/' + l.pathname.slice(1) + l.hash
);
		</script>
	</head>
	<body>
	</body>
</html>
"""


@dataclass
class BuildReport:
    """Relative paths handled by one build, in walk order."""
    pages:   list[Path] = field(default_factory=list)
    copied:  list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)   # up to date
    ignored: list[Path] = field(default_factory=list)   # matched a skip rule
    feed_items: int = 0


def render_page(
    src: Path,
    rel_path: Path,
    out_path: Path,
    parser: MarkdownIt,
    writer: OutputWriter,
    settings: Settings,
    ) -> FeedItem | None:
    """Write <stem>/index.html and <stem>/_.html for one markup file; return its feed item."""
    logger.info("Generating '%s'...", out_path)
    parsed = parse_file(src, parser)
    meta = extract_metadata(parsed.frontmatter)
    item = build_item(settings.root_address, parsed.document, rel_path)
    html = to_html(parsed.document, rel_path, meta.tags, settings.link_locality, parser)

    page_dir = out_path.with_suffix('')
    ensure_dir(page_dir)
    logger.debug("Generating %s redirect for '%s'...", PAGE_STUB, page_dir)
    writer.write(page_dir / PAGE_STUB, STUB_HTML, OutputKind.html)
    logger.debug("Generating HTML fragment (%s) for '%s'...", PAGE_FRAGMENT, page_dir)
    writer.write(page_dir / PAGE_FRAGMENT, html, OutputKind.html)
    return item


def copy_file(src: Path, out_path: Path, force: bool) -> bool:
    """Copy src unless out_path is already up to date. Returns True when copied."""
    if not needs_copy(src, out_path, force):
        logger.debug("Skipping write '%s'", out_path)
        return False
    logger.info("Will write '%s'", out_path)
    shutil.copy(src, out_path)
    return True


def run_build(settings: Settings, now: datetime | None = None) -> BuildReport:
    """Build the site described by settings. Any OSError aborts the build."""
    source = Path(settings.source_dir)
    outdir = Path(settings.output_dir)
    if not source.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source}")

    parser = make_parser(settings.parser_config)
    writer = OutputWriter(settings.minify_html, settings.minifier_copy_on_failure)
    report = BuildReport()
    items: list[FeedItem] = []

    outdir.mkdir(parents=True, exist_ok=True)
    for path in walk_tree(source):
        logger.debug("Processing '%s'", path)
        rel_path = path.relative_to(source)
        out_path = outdir / rel_path

        if path.is_dir():
            ensure_dir(out_path)
            continue

        if should_skip(path.name):
            logger.info("Skipping %s", rel_path)
            report.ignored.append(rel_path)
            continue

        suffix = path.suffix
        if is_markup(path):
            item = render_page(path, rel_path, out_path, parser, writer, settings)
            if item is not None:
                items.append(item)
            report.pages.append(rel_path)
        elif suffix == '.html':
            writer.write(out_path, path.read_text(encoding='utf-8'), OutputKind.html)
        elif suffix == '.css':
            writer.write(out_path, path.read_text(encoding='utf-8'), OutputKind.css)
        elif copy_file(path, out_path, settings.copy_older_files):
            report.copied.append(rel_path)
        else:
            report.skipped.append(rel_path)

    feed = build_feed(
        title=settings.title,
        link=settings.root_address,
        description=settings.description,
        language=settings.language,
        items=items,
        built_at=now or datetime.now().astimezone(),
    )
    feed_path = outdir / FEED_FILE
    logger.info("Will write RSS feed to '%s'", feed_path)
    writer.write(feed_path, feed, OutputKind.raw)
    report.feed_items = len(items)
    return report
