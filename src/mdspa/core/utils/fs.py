"""Source tree walking, skip rules and the incremental copy check"""

import logging
from pathlib import Path
from typing import Iterator


logger = logging.getLogger(__name__)

# Editor and project files
SKIP_NAMES = {'.dir-locals.el', '.env', '.gitignore', '.projectile', 'Justfile', 'config.yaml'}
# Temporary files
SKIP_PREFIXES = ('.#',)
# Backups
SKIP_SUFFIXES = ('.bak', '.tmp', '~')


def should_skip(file_name: str) -> bool:
    """True for files that are neither transformed nor copied."""
    return (
        file_name in SKIP_NAMES
        or file_name.startswith(SKIP_PREFIXES)
        or file_name.endswith(SKIP_SUFFIXES)
    )


def walk_tree(root: Path) -> Iterator[Path]:
    """Yield every entry under root depth-first, each directory before its contents.

    Symlinked directories are yielded but not entered.
    """
    for path in sorted(root.iterdir(), key=lambda p: p.name):
        yield path
        if path.is_dir() and not path.is_symlink():
            yield from walk_tree(path)


def ensure_dir(path: Path) -> bool:
    """Create path if absent. Returns True when it was created."""
    if path.is_dir():
        return False
    logger.info("Creating directory '%s'", path)
    path.mkdir(exist_ok=True)
    return True


def needs_copy(src: Path, dest: Path, force: bool = False) -> bool:
    """False only when dest exists with the same size and src is not newer."""
    if force or not dest.exists():
        return True
    new, old = src.stat(), dest.stat()
    return not (new.st_size == old.st_size and new.st_mtime <= old.st_mtime)
