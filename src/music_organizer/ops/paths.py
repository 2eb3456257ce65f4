"""Build canonical track paths and place tracks at them.

Layout:
  - single disc:            Artist/[YYYY - ]Album/NN. Title.ext
  - multi-disc:             Artist/[YYYY - ]Album/D_NN. Title.ext
  - multi-disc with subdir: Artist/[YYYY - ]Album/Disc D/D_NN. Title.ext

plan_track_path() is pure: it computes the destination and any disc tag
backfill without touching the filesystem, so running it against an already
organized file yields that file's current path. place_track() performs the
side effects.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger

from ..models import UNKNOWN_ALBUM, UNKNOWN_ARTIST, MoveRecord, Track, TrackConflict
from ..sanitize import remove_double_spaces, sanitize_directory_name, sanitize_file_name
from ..tags import save_track
from .artist import ArtistDecision
from .files import move_file, paths_equal

log = logger.bind(stage="paths")

# "01 - ", "1_", "03. " ... repeated any number of times
_LEADING_NUMBERS = re.compile(r"^(?:\d+[.\-\s_]+)+")
# A title that still carries two or more numeric prefixes: "01 - 01 - Title"
_REPEATED_NUMBERS = re.compile(r"^\d+[.\-\s_]+\d+[.\-\s_]+")


@dataclass(frozen=True)
class TrackPlan:
    """Where a track belongs and whether its disc tags must be saved first."""

    track: Track
    destination: Path
    needs_persist: bool = False


def repair_title(track: Track) -> str:
    """Title to use in the file name.

    A blank title falls back to the filename stem. In both that case and a
    title that still starts with repeated track numbers (left by tools that
    prepend a number on every run), the leading numeric run is stripped.
    """
    title = track.title.strip()
    if not title:
        source = track.path.stem
    elif _REPEATED_NUMBERS.match(title):
        source = title
    else:
        return remove_double_spaces(title)

    stripped = _LEADING_NUMBERS.sub("", source).strip()
    return remove_double_spaces(stripped or source)


def plan_track_path(
    track: Track,
    root: Path,
    decision: ArtistDecision,
    total_discs: int = 1,
    use_disc_subdirectory: bool = False,
) -> TrackPlan:
    """Compute the canonical destination for one track."""
    title = repair_title(track)
    extension = track.path.suffix

    if track.track_number is not None and track.track_number > 0:
        file_name = f"{track.track_number:02d}. {title}{extension}"
    else:
        file_name = f"{title}{extension}"

    album_dir = sanitize_directory_name(track.album, UNKNOWN_ALBUM)
    if track.year is not None and track.year > 0:
        album_dir = f"{track.year} - {album_dir}"

    parts: list[str] = []
    if decision.use_artist_subdirectory:
        parts.append(sanitize_directory_name(decision.artist, UNKNOWN_ARTIST))
    parts.append(album_dir)

    needs_persist = False
    if total_discs > 1:
        updates: dict[str, int] = {}
        if track.disc_number is None or track.disc_number < 1:
            updates["disc_number"] = 1
        if track.disc_total is None or track.disc_total < 1:
            updates["disc_total"] = total_discs
        if updates:
            track = replace(track, **updates)
            needs_persist = True
            log.debug(f"Backfilling disc tags for {track.path}: {updates}")

        file_name = f"{track.disc_number}_{file_name}"
        if use_disc_subdirectory:
            parts.append(f"Disc {track.disc_number}")

    destination = root.joinpath(*parts, sanitize_file_name(file_name))
    return TrackPlan(track=track, destination=destination, needs_persist=needs_persist)


def place_track(plan: TrackPlan) -> MoveRecord | TrackConflict | None:
    """Move a planned track into place.

    Returns None when the track already sits at its destination, a
    MoveRecord when it was moved, or a TrackConflict when another file
    occupies the destination (nothing is moved in that case).
    Filesystem and tag errors propagate.
    """
    track = plan.track
    destination = plan.destination

    destination.parent.mkdir(parents=True, exist_ok=True)

    if plan.needs_persist:
        save_track(track)

    if paths_equal(track.path, destination):
        log.debug(f"Already organized: {track.path}")
        return None

    try:
        move_file(track.path, destination)
    except FileExistsError:
        # Case-only rename on a case-insensitive filesystem
        if os.path.samefile(track.path, destination):
            move_file(track.path, destination, overwrite=True)
            return MoveRecord(original_path=track.path, new_path=destination)
        log.info(f"Conflict: {track.path} -> {destination} (destination exists)")
        return TrackConflict(track=track, existing_path=destination)

    return MoveRecord(original_path=track.path, new_path=destination)
