"""Output writer: HTML/CSS minification and raw byte writes"""

import logging
from enum import Enum
from pathlib import Path

import csscompressor
import minify_html


logger = logging.getLogger(__name__)


class OutputKind(str, Enum):
    html = 'html'
    css = 'css'
    raw = 'raw'


class MinifyError(RuntimeError):
    """A stylesheet could not be minified and copying it unmodified is not allowed."""


def minify_html_text(text: str) -> str:
    return minify_html.minify(
        text,
        minify_css=True,
        minify_js=True,
        keep_closing_tags=True,
        keep_comments=False,
    )


class OutputWriter:
    """Writes build artifacts, applying the minifiers by kind."""

    def __init__(self, minify_html: bool = False, copy_on_failure: bool = False):
        self.minify_html = minify_html
        self.copy_on_failure = copy_on_failure

    def write(self, path: Path, content: str | bytes, kind: OutputKind = OutputKind.raw) -> None:
        if kind is OutputKind.html:
            self._write_html(path, content)
        elif kind is OutputKind.css:
            self._write_css(path, content)
        else:
            data = content.encode('utf-8') if isinstance(content, str) else content
            path.write_bytes(data)

    def _write_html(self, path: Path, text: str) -> None:
        if self.minify_html:
            logger.info("Minifying %s", path)
            text = minify_html_text(text)
        path.write_text(text, encoding='utf-8')

    def _write_css(self, path: Path, text: str) -> None:
        logger.info("Minifying %s", path)
        try:
            minified = csscompressor.compress(text)
        except Exception as e:
            logger.error("Failed to minify CSS; %s", e)
            if not self.copy_on_failure:
                raise MinifyError(f"Couldn't minify {path}") from e
            logger.info("Copying '%s' instead.", path)
            minified = text
        path.write_text(minified, encoding='utf-8')
