"""File discovery and extension-based classification."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from .models import AUDIO_EXTENSIONS, LOSSLESS_EXTENSIONS, PLAYLIST_EXTENSIONS

log = logger.bind(stage="scanner")


def is_audio_file(path: Path) -> bool:
    return path.suffix.lower() in AUDIO_EXTENSIONS


def is_lossless_file(path: Path) -> bool:
    return path.suffix.lower() in LOSSLESS_EXTENSIONS


def is_playlist_file(path: Path) -> bool:
    return path.suffix.lower() in PLAYLIST_EXTENSIONS


def find_all_files(
    root: Path,
    ignore_hidden: bool = True,
    ignore_directories: frozenset[str] | set[str] = frozenset(),
) -> list[Path]:
    """Recursively list every file under root.

    Directories named in ignore_directories are not descended into, and
    neither are hidden ones (leading '.') when ignore_hidden is set. Hidden
    files are skipped under the same flag. Unreadable directories are
    logged and skipped.
    """

    def _on_walk_error(err: OSError) -> None:
        log.warning(f"Cannot read directory {err.filename}: {err.strerror or err}")

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in ignore_directories and not (ignore_hidden and d.startswith("."))
        )
        for name in sorted(filenames):
            if ignore_hidden and name.startswith("."):
                continue
            files.append(Path(dirpath) / name)

    log.debug(f"find_all_files: {len(files)} file(s) under {root}")
    return files


def split_audio_and_playlists(files: list[Path]) -> tuple[list[Path], list[Path]]:
    """Partition files into (audio files, playlist files). Others are dropped."""
    audio = [f for f in files if is_audio_file(f)]
    playlists = [f for f in files if is_playlist_file(f)]
    return audio, playlists


def find_lossless_files(
    root: Path,
    ignore_hidden: bool = True,
    ignore_directories: frozenset[str] | set[str] = frozenset(),
) -> list[Path]:
    return [
        f
        for f in find_all_files(root, ignore_hidden, ignore_directories)
        if is_lossless_file(f)
    ]
