"""Organize loaded tracks into the Artist/Album layout, one worker per album.

Each album worker resolves the album's artist and disc count, then plans
and places its tracks sequentially, returning an AlbumResult. Nothing is
shared between workers; organize_library() merges their results once all
of them have finished.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..concurrency import calculate_max_workers, run_parallel
from ..models import AlbumResult, MoveRecord, Track
from .artist import ArtistDecision, resolve_album_artist
from .paths import place_track, plan_track_path

if TYPE_CHECKING:
    from ..config import OrganizerConfig

log = logger.bind(stage="organize")


def group_by_album(tracks: list[Track]) -> dict[str, list[Track]]:
    """Partition tracks by their exact album string."""
    albums: dict[str, list[Track]] = {}
    for track in tracks:
        albums.setdefault(track.album or "", []).append(track)
    return albums


def total_disc_count(tracks: list[Track]) -> int:
    """Highest disc number in the album, at least 1."""
    return max((track.disc_number or 1 for track in tracks), default=1)


def _organize_track(
    result: AlbumResult,
    track: Track,
    root: Path,
    decision: ArtistDecision,
    total_discs: int,
    use_disc_subdirectory: bool,
) -> None:
    try:
        plan = plan_track_path(track, root, decision, total_discs, use_disc_subdirectory)
        placed = place_track(plan)
    except Exception as e:
        log.error(f"Error organizing {track.path}: {e}")
        result.failed += 1
        return

    if placed is None:
        result.unchanged += 1
    elif isinstance(placed, MoveRecord):
        result.moves.append(placed)
    else:
        result.conflicts.append(placed)


def organize_album(
    album: str,
    tracks: list[Track],
    root: Path,
    use_album_artist: bool = True,
    use_disc_subdirectory: bool = False,
) -> AlbumResult:
    """Organize the tracks of one album.

    Tracks without an album are not aggregated: each one gets its own
    artist decision and is treated as a single-disc pseudo-album.
    """
    result = AlbumResult()

    if not album.strip():
        log.debug(f"Organizing {len(tracks)} track(s) without an album")
        for track in tracks:
            decision = resolve_album_artist([track], use_album_artist)
            _organize_track(result, track, root, decision, 1, use_disc_subdirectory)
        return result

    decision = resolve_album_artist(tracks, use_album_artist)
    total_discs = total_disc_count(tracks)
    log.debug(
        f"Organizing album {album!r}: {len(tracks)} track(s), "
        f"artist={decision.artist!r}, discs={total_discs}"
    )
    for track in tracks:
        _organize_track(result, track, root, decision, total_discs, use_disc_subdirectory)
    return result


def organize_library(tracks: list[Track], root: Path, config: OrganizerConfig) -> AlbumResult:
    """Fan out one worker per album and merge their results."""
    albums = group_by_album(tracks)
    max_workers = calculate_max_workers(config.max_workers)
    log.info(f"Organizing {len(tracks)} track(s) in {len(albums)} album(s), max_workers={max_workers}")

    def _worker(item: tuple[str, list[Track]]) -> AlbumResult:
        album, album_tracks = item
        return organize_album(
            album,
            album_tracks,
            root,
            use_album_artist=config.use_album_artist,
            use_disc_subdirectory=config.use_disc_subdirectory,
        )

    results = run_parallel(_worker, albums.items(), max_workers, label="album")
    merged = AlbumResult.merge(results)
    log.info(
        f"Organized: moved={len(merged.moves)} unchanged={merged.unchanged} "
        f"conflicts={len(merged.conflicts)} failed={merged.failed}"
    )
    return merged
