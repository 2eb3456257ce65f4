"""Carry non-audio files (cover art, logs, cue sheets) along with moved tracks.

Runs after every album has been organized and conflicts are resolved. Each
MoveRecord is replayed: whatever non-audio files remain in the track's old
directory follow it to the new one, subdirectories included (Scans/,
Artwork/ ...), and the old directory is pruned.
"""

from __future__ import annotations

import os
from collections.abc import Collection
from pathlib import Path

from loguru import logger

from ..models import MoveRecord
from ..scanner import is_audio_file
from .files import move_file, paths_equal
from .prune import prune_empty_directories, remove_if_empty

log = logger.bind(stage="strays")


def _walk_files(directory: Path, ignore_directories: Collection[str]) -> list[Path]:
    """All files below directory, not descending into ignored names."""

    def _on_walk_error(err: OSError) -> None:
        log.warning(f"Cannot read directory {err.filename}: {err.strerror or err}")

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(directory, onerror=_on_walk_error):
        dirnames[:] = sorted(d for d in dirnames if d not in ignore_directories)
        files.extend(Path(dirpath) / name for name in sorted(filenames))
    return files


def _move_stray_directory(
    subdirectory: Path,
    new_dir: Path,
    ignore_directories: Collection[str],
    protected_directories: Collection[str],
) -> int:
    """Mirror the non-audio files of subdirectory under new_dir/<name>."""
    all_files = _walk_files(subdirectory, ignore_directories)
    strays = [f for f in all_files if not is_audio_file(f)]

    target_root = new_dir / subdirectory.name
    moved = 0
    for stray in strays:
        dest = target_root / stray.relative_to(subdirectory)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            move_file(stray, dest)
            moved += 1
        except OSError as e:
            log.error(f"Failed to move stray file {stray} -> {dest}: {e}")

    if strays and len(strays) == len(all_files):
        prune_empty_directories(subdirectory, ignore_directories, protected_directories)
    return moved


def relocate_strays(
    record: MoveRecord,
    root: Path,
    ignore_directories: Collection[str] = (),
    protected_directories: Collection[str] = (),
) -> int:
    """Move the stray files left behind by one track move.

    Nothing is relocated when the old directory is gone, is the organizing
    root, or is the new directory itself. Returns the number of files moved.
    """
    original_dir = record.original_dir
    new_dir = record.new_dir

    if not original_dir.is_dir():
        return 0
    if paths_equal(original_dir, root) or paths_equal(original_dir, new_dir):
        return 0

    try:
        entries = sorted(original_dir.iterdir())
    except OSError as e:
        log.error(f'Error querying directory "{original_dir}": {e}')
        return 0

    moved = 0
    for entry in entries:
        if not entry.is_dir() or entry.is_symlink():
            continue
        if entry.name in ignore_directories or paths_equal(entry, new_dir):
            continue
        if new_dir.is_relative_to(entry):
            continue
        moved += _move_stray_directory(entry, new_dir, ignore_directories, protected_directories)

    for entry in entries:
        if not entry.is_file() or is_audio_file(entry):
            continue
        if paths_equal(entry, record.original_path):
            continue
        try:
            move_file(entry, new_dir / entry.name, overwrite=True)
            moved += 1
        except OSError as e:
            log.error(f"Failed to move stray file {entry} -> {new_dir}: {e}")

    prune_empty_directories(original_dir, ignore_directories, protected_directories)
    if original_dir.name not in protected_directories:
        remove_if_empty(original_dir)

    if moved:
        log.debug(f"Relocated {moved} stray file(s) from {original_dir} to {new_dir}")
    return moved


def relocate_all_strays(
    records: list[MoveRecord],
    root: Path,
    ignore_directories: Collection[str] = (),
    protected_directories: Collection[str] = (),
) -> int:
    """Replay every move record in order. Returns total stray files moved."""
    return sum(
        relocate_strays(record, root, ignore_directories, protected_directories)
        for record in records
    )
