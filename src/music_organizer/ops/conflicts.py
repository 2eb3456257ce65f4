"""Deduplicate and resolve destination conflicts by audio quality.

A conflict pairs a candidate track with the path it wants, which some
other file already occupies. Resolution is a local, single-winner policy:

  1. Both bitrates known and durations differ by more than the tolerance:
     not the same recording, leave both files alone.
  2. Existing file has a lower bitrate: candidate overwrites it.
  3. Otherwise: candidate is deleted.
"""

from __future__ import annotations

import os

from loguru import logger

from ..errors import MetadataError
from ..models import DURATION_TOLERANCE_MS, ConflictOutcome, Track, TrackConflict
from ..tags import load_track
from .files import delete_file, move_file, paths_equal

log = logger.bind(stage="conflicts")


def conflicts_overlap(a: TrackConflict, b: TrackConflict) -> bool:
    """True when either conflict's candidate sits where the other wants to go.

    This is a presence check used for dedup, not an equivalence relation:
    it is symmetric but neither reflexive nor transitive.
    """
    return paths_equal(a.track.path, b.existing_path) or paths_equal(
        b.track.path, a.existing_path
    )


def dedupe_conflicts(conflicts: list[TrackConflict]) -> list[TrackConflict]:
    """Drop every conflict that overlaps an earlier one in the list."""
    unique = list(conflicts)
    for i in range(len(unique) - 1, -1, -1):
        for j in range(i - 1, -1, -1):
            if conflicts_overlap(unique[i], unique[j]):
                log.debug(f"Dropping duplicate conflict for {unique[i].track.path}")
                del unique[i]
                break
    return unique


def describe_track(track: Track) -> str:
    """One-line description used in conflict log messages."""
    text = f"({track.duration_ms / 1000:.1f}s {track.codec} {track.bitrate}kbps"
    if track.bit_depth:
        text += f" {track.bit_depth}bit"
    number = track.track_number if track.track_number is not None else "?"
    text += f') || ["{track.artist} - {number}. {track.title}"] || {track.path}'
    return text


def choose_best_quality(
    candidate: Track,
    existing: Track,
    tolerance_ms: int = DURATION_TOLERANCE_MS,
) -> ConflictOutcome:
    """Keep the better of two versions of the same track."""
    has_zero_bitrate = candidate.bitrate == 0 or existing.bitrate == 0
    difference = abs(candidate.duration_ms - existing.duration_ms)

    if not has_zero_bitrate and difference > tolerance_ms:
        log.warning(
            f"Identical tracks have different durations (difference: {difference}ms)\n"
            f"  {describe_track(candidate)}\n"
            f"  {describe_track(existing)}"
        )
        return ConflictOutcome.KEPT_BOTH

    if existing.bitrate < candidate.bitrate:
        try:
            move_file(candidate.path, existing.path, overwrite=True)
        except OSError as e:
            log.error(f"Failed to replace {existing.path} with {candidate.path}: {e}")
            return ConflictOutcome.FAILED
        log.info(
            f"Replaced lower quality track ({existing.bitrate}kbps vs "
            f"{candidate.bitrate}kbps) -> {existing.path}"
        )
        return ConflictOutcome.REPLACED

    try:
        delete_file(candidate.path)
    except OSError as e:
        log.error(f"Failed to delete {candidate.path}: {e}")
        return ConflictOutcome.FAILED
    log.info(
        f"Discarded {candidate.path} ({candidate.bitrate}kbps), "
        f"kept {existing.path} ({existing.bitrate}kbps)"
    )
    return ConflictOutcome.DISCARDED


def resolve_conflict(
    conflict: TrackConflict,
    tolerance_ms: int = DURATION_TOLERANCE_MS,
) -> ConflictOutcome:
    """Load the occupying file and let the better version win."""
    destination = conflict.existing_path
    try:
        existing = load_track(destination)
    except MetadataError as e:
        log.error(f"Failed to load existing track at {destination}: {e.reason}")
        return ConflictOutcome.FAILED

    try:
        if os.path.samefile(conflict.track.path, destination):
            log.warning(f"Conflict refers to the same file twice, skipping: {destination}")
            return ConflictOutcome.FAILED
    except OSError as e:
        log.error(f"Cannot compare {conflict.track.path} with {destination}: {e}")
        return ConflictOutcome.FAILED

    return choose_best_quality(conflict.track, existing, tolerance_ms)


def resolve_conflicts(
    conflicts: list[TrackConflict],
    tolerance_ms: int = DURATION_TOLERANCE_MS,
) -> list[ConflictOutcome]:
    """Dedup conflicts, then resolve each remaining one in order."""
    unique = dedupe_conflicts(conflicts)
    if len(unique) != len(conflicts):
        log.info(f"Deduplicated {len(conflicts)} conflict(s) to {len(unique)}")

    outcomes = [resolve_conflict(conflict, tolerance_ms) for conflict in unique]
    resolved = sum(1 for outcome in outcomes if outcome.resolved)
    if outcomes:
        log.info(f"Resolved {resolved}/{len(outcomes)} conflict(s)")
    return outcomes
