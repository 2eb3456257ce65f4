"""Delete directories left empty after tracks move away."""

from __future__ import annotations

from collections.abc import Collection
from pathlib import Path

from loguru import logger

log = logger.bind(stage="prune")


def _subdirectories(directory: Path) -> list[Path]:
    return sorted(child for child in directory.iterdir() if child.is_dir() and not child.is_symlink())


def prune_empty_directories(
    directory: Path,
    ignore_directories: Collection[str] = (),
    protected_directories: Collection[str] = (),
) -> int:
    """Remove empty directories below directory, deepest first.

    Ignored names are neither entered nor removed. Protected names are
    entered but never removed themselves, so their parents survive too.
    directory itself is never removed. Returns the number of directories
    deleted.
    """
    try:
        children = _subdirectories(directory)
    except OSError as e:
        log.error(f'Error querying directory "{directory}": {e}')
        return 0

    removed = 0
    for child in children:
        if child.name in ignore_directories:
            continue

        removed += prune_empty_directories(child, ignore_directories, protected_directories)

        if child.name in protected_directories:
            continue
        if remove_if_empty(child):
            removed += 1

    return removed


def remove_if_empty(directory: Path) -> bool:
    """Delete directory when it holds no files and no subdirectories."""
    try:
        if any(directory.iterdir()):
            return False
        directory.rmdir()
    except OSError as e:
        log.error(f"Error deleting {directory}: {e}")
        return False
    log.info(f"Deleted {directory}")
    return True
