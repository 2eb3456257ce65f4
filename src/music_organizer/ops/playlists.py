"""Gather playlist files into one directory at the library root."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .files import move_file, paths_equal

log = logger.bind(stage="playlists")


def relocate_playlists(playlists: list[Path], root: Path, directory_name: str = "Playlists") -> int:
    """Move playlists into root/directory_name, overwriting same-named ones.

    Returns the number of playlists moved.
    """
    playlist_dir = root / directory_name
    playlist_dir.mkdir(parents=True, exist_ok=True)

    moved = 0
    for playlist in playlists:
        dest = playlist_dir / playlist.name
        if paths_equal(playlist, dest):
            continue
        try:
            move_file(playlist, dest, overwrite=True)
        except OSError as e:
            log.error(f"Failed to move playlist {playlist}: {e}")
            continue
        moved += 1

    log.info(f"Moved {moved} playlist(s) to {playlist_dir}")
    return moved
