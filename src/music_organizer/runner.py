"""Organizer runner -- orchestrates one pass over a music library.

Order:
    discover -> playlists -> load tags -> organize albums (parallel)
    -> [barrier] -> resolve conflicts -> relocate strays -> prune
    -> compress lossless files
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .concurrency import acquire_global_lock, calculate_max_workers, run_parallel
from .config import OrganizerConfig
from .errors import ConfigError, MetadataError
from .models import RunSummary, TranscodeOutcome, Track
from .ops.conflicts import resolve_conflicts
from .ops.organize import organize_library
from .ops.playlists import relocate_playlists
from .ops.prune import prune_empty_directories
from .ops.strays import relocate_all_strays
from .scanner import find_all_files, find_lossless_files, split_audio_and_playlists
from .tags import load_track
from .transcode import compress_files

log = logger.bind(stage="runner")


def _try_load(path: Path) -> Track | None:
    try:
        return load_track(path)
    except MetadataError as e:
        log.warning(f"Failed to load track {path}: {e.reason}")
        return None


class OrganizerRunner:
    """Runs the organizer over a music root directory."""

    def __init__(self, config: OrganizerConfig) -> None:
        self.config = config

    def run(self, root: Path, skip_lock: bool = False) -> RunSummary:
        """Organize everything under root and return the run's counters."""
        if not root.is_dir():
            raise ConfigError(f"Not a directory: {root}")

        lock = acquire_global_lock(self.config.lock_dir, skip=skip_lock)
        try:
            return self._run(root)
        finally:
            if lock is not None:
                lock.close()

    def _run(self, root: Path) -> RunSummary:
        config = self.config
        summary = RunSummary()
        ignore = set(config.ignore_directories)
        protected = set(config.do_not_delete_directories)

        files = find_all_files(root, config.ignore_hidden_directories, ignore)
        audio_files, playlists = split_audio_and_playlists(files)
        log.info(f"Found {len(audio_files)} audio file(s) and {len(playlists)} playlist(s) in {root}")

        if config.move_playlists and playlists:
            summary.playlists_moved = relocate_playlists(playlists, root, config.playlist_directory)

        max_workers = calculate_max_workers(config.max_workers)
        loaded = run_parallel(_try_load, audio_files, max_workers, label="load")
        tracks = [track for track in loaded if track is not None]
        summary.tracks_loaded = len(tracks)
        summary.load_failures = len(audio_files) - len(tracks)

        result = organize_library(tracks, root, config)
        summary.moved = len(result.moves)
        summary.unchanged = result.unchanged
        summary.failed = result.failed

        outcomes = resolve_conflicts(result.conflicts, config.duration_tolerance_ms)
        summary.conflicts = len(outcomes)
        summary.conflicts_resolved = sum(1 for outcome in outcomes if outcome.resolved)

        summary.strays_moved = relocate_all_strays(result.moves, root, ignore, protected)
        summary.directories_pruned = prune_empty_directories(root, ignore, protected)

        if config.compression_enabled:
            lossless = find_lossless_files(root, config.ignore_hidden_directories, ignore)
            transcoded = compress_files(lossless, config)
            summary.compressed = sum(
                1 for outcome in transcoded if outcome == TranscodeOutcome.COMPRESSED
            )

        log.info(f"Run complete: {summary}")
        return summary
