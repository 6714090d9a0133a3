"""Link classification: local site pages vs. remote targets"""

from enum import Enum
from pathlib import PurePath


FILE_SCHEME = 'file:'
MARKUP_SUFFIXES = ('.md', '.mdx')
IMAGE_SUFFIXES = {'.png', '.jpg', '.jpeg', '.gif', '.svg', '.webp', '.avif', '.bmp', '.ico'}


class LinkLocality(str, Enum):
    """Which prefix marks a link as pointing inside the site.

    stem: ./<current document stem>/
    first-segment: ./<second path segment of the link target itself>/
    """
    stem = 'stem'
    first_segment = 'first-segment'


def local_prefix(target: str, rel_path: PurePath, rule: LinkLocality) -> str | None:
    """Return the prefix a local link must start with, or None if none applies."""
    if rule is LinkLocality.first_segment:
        segments = target.split('/')
        if len(segments) < 2 or not segments[1]:
            return None
        return f"./{segments[1]}/"
    return f"./{rel_path.stem}/"


def classify(target: str, rel_path: PurePath, rule: LinkLocality = LinkLocality.stem) -> tuple[str, bool]:
    """Return (rewritten target, is_local).

    Local targets lose their prefix, and links to other markup documents lose
    the markup suffix so they address the generated page directory.
    """
    if target.startswith(FILE_SCHEME):
        target = target[len(FILE_SCHEME):]

    prefix = local_prefix(target, rel_path, rule)
    if prefix is None or not target.startswith(prefix):
        return target, False

    target = target[len(prefix):]
    for suffix in MARKUP_SUFFIXES:
        if target.endswith(suffix):
            target = target[:-len(suffix)]
            break
    return target, True


def is_image_target(target: str) -> bool:
    path = target.split('?', 1)[0].split('#', 1)[0]
    return PurePath(path).suffix.lower() in IMAGE_SUFFIXES
