"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdspa.config import Settings, load_config
from mdspa.core.links import LinkLocality
from mdspa.core.metadata import extract_metadata
from mdspa.core.output import MinifyError
from mdspa.core.parse import make_parser, parse_file
from mdspa.core.pipeline import run_build
from mdspa.core.transform import to_html


logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s %(levelname)s %(name)s] %(message)s"


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Log to stderr, and also to log_file when given."""
    level_str = (level_name or "info").upper()
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, level_str, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    logger.debug("Logging configured at %s", level_str)


def build_cmd(
    source: Annotated[Optional[str], typer.Argument(help="Source directory (default: site)")] = None,
    outdir: Annotated[Optional[str], typer.Option("--outdir", help="Output directory (default: out)")] = None,
    root_address: Annotated[Optional[str], typer.Option("--root-address", help="Absolute site URL for feed links")] = None,
    title: Annotated[Optional[str], typer.Option("--title", help="Feed channel title")] = None,
    description: Annotated[Optional[str], typer.Option("--description", help="Feed channel description")] = None,
    language: Annotated[Optional[str], typer.Option("--language", help="Feed language tag (default: en-GB)")] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="critical|error|warning|info|debug")] = None,
    log_file: Annotated[Optional[str], typer.Option("--log-file", help="Also write log records to this file")] = None,
    copy_older_files: Annotated[bool, typer.Option("--copy-older-files", help="Copy assets even when up to date")] = False,
    minify_html: Annotated[bool, typer.Option("--minify-html", help="Minify HTML output")] = False,
    copy_on_failure: Annotated[bool, typer.Option("--minifier-copy-on-failure", help="Copy CSS unmodified if minifying fails")] = False,
    locality: Annotated[Optional[LinkLocality], typer.Option("--link-locality", help="Rule deciding which links are local")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Build the site: render markup pages, minify CSS/HTML, copy assets, write feed.rss."""
    settings = _settings(overrides={
        "source_dir": source, "output_dir": outdir, "root_address": root_address,
        "title": title, "description": description, "language": language,
        "log_level": log_level, "log_file": log_file,
        # flags only ever switch a setting on
        "copy_older_files": copy_older_files or None,
        "minify_html": minify_html or None,
        "minifier_copy_on_failure": copy_on_failure or None,
        "link_locality": locality, "parser_config": parser,
    })
    _configure_logging(settings.log_level, settings.log_file)

    try:
        report = run_build(settings)
    except (OSError, ValueError, MinifyError) as e:
        _fail("Build failed", e)

    typer.echo(
        f"Build complete - "
        f"{len(report.pages)} pages, "
        f"{len(report.copied)} copied, "
        f"{len(report.skipped)} up to date, "
        f"{len(report.ignored)} ignored, "
        f"{report.feed_items} feed items"
    )


def render_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Markup file to render")],
    locality: Annotated[Optional[LinkLocality], typer.Option("--link-locality", help="Rule deciding which links are local")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Print the HTML fragment for a single markup file."""
    settings = _settings(overrides={"link_locality": locality, "parser_config": parser})
    _configure_logging(settings.log_level, settings.log_file)
    md = make_parser(settings.parser_config)
    try:
        parsed = parse_file(path, md)
    except (OSError, ValueError) as e:
        _fail(f"Cannot read {path}", e)
    tags = extract_metadata(parsed.frontmatter).tags
    typer.echo(to_html(parsed.document, Path(path.name), tags, settings.link_locality, md))
