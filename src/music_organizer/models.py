"""Core enums, constants, and record types for the music organizer.

Records:
    Track          -- Point-in-time snapshot of one audio file and its tags.
                      Frozen; updates go through dataclasses.replace().
    TrackConflict  -- A track that wants a destination some other file occupies.
    MoveRecord     -- One successful (non-conflicted) track move, replayed
                      later to carry stray files along.
    AlbumResult    -- Per-album-worker result, merged after all workers finish.
    RunSummary     -- Counters for a whole run.

Enums:
    ConflictOutcome  -- What the quality resolver did with one conflict.
    TranscodeOutcome -- What the lossless compressor did with one file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

UNKNOWN_ARTIST = "Unknown Artist"
VARIOUS_ARTISTS = "Various Artists"
UNKNOWN_ALBUM = "Unknown Album"

# Tracks whose durations differ by more than this are not treated as duplicates
DURATION_TOLERANCE_MS = 1000

AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".flac",
        ".mp3",
        ".m4a",
        ".aac",
        ".ogg",
        ".opus",
        ".wav",
        ".mp1",
        ".mp2",
        ".aax",
        ".caf",
        ".m4b",
        ".mp4",
        ".mid",
        ".oga",
        ".tak",
        ".bwav",
        ".bwf",
        ".vgm",
        ".vgz",
        ".wv",
        ".wma",
        ".asf",
    }
)

LOSSLESS_EXTENSIONS: frozenset[str] = frozenset(
    {".flac", ".wav", ".tak", ".bwav", ".bwf", ".vgm", ".vgz", ".wv"}
)

PLAYLIST_EXTENSIONS: frozenset[str] = frozenset(
    {".m3u", ".m3u8", ".pls", ".wpl", ".zpl", ".xspf"}
)


class ConflictOutcome(StrEnum):
    REPLACED = "replaced"
    DISCARDED = "discarded"
    KEPT_BOTH = "kept_both"
    FAILED = "failed"

    @property
    def resolved(self) -> bool:
        return self in (ConflictOutcome.REPLACED, ConflictOutcome.DISCARDED)


class TranscodeOutcome(StrEnum):
    COMPRESSED = "compressed"
    SKIPPED = "skipped"
    DELETED_CORRUPT = "deleted_corrupt"
    KEPT_ORIGINAL = "kept_original"
    FAILED = "failed"


@dataclass(frozen=True)
class Track:
    """One audio file plus its metadata snapshot.

    bitrate is in kbps (0 means unknown or corrupt), duration in milliseconds.
    codec is the short container/format name used in log lines.
    """

    path: Path
    title: str = ""
    track_number: int | None = None
    disc_number: int | None = None
    disc_total: int | None = None
    album: str = ""
    artist: str = ""
    album_artist: str = ""
    original_artist: str = ""
    composer: str = ""
    conductor: str = ""
    year: int | None = None
    bitrate: int = 0
    duration_ms: int = 0
    bit_depth: int | None = None
    codec: str = ""


@dataclass(frozen=True, eq=False)
class TrackConflict:
    """A candidate track whose destination is already occupied.

    Equality is identity. Use ops.conflicts.conflicts_overlap() to test
    whether two conflicts describe the same pair of files.
    """

    track: Track
    existing_path: Path


@dataclass(frozen=True)
class MoveRecord:
    original_path: Path
    new_path: Path

    @property
    def original_dir(self) -> Path:
        return self.original_path.parent

    @property
    def new_dir(self) -> Path:
        return self.new_path.parent


@dataclass
class AlbumResult:
    """What one album worker produced. Merged with merge() at the barrier."""

    moves: list[MoveRecord] = field(default_factory=list)
    conflicts: list[TrackConflict] = field(default_factory=list)
    unchanged: int = 0
    failed: int = 0

    @classmethod
    def merge(cls, results: list[AlbumResult]) -> AlbumResult:
        merged = cls()
        for result in results:
            merged.moves.extend(result.moves)
            merged.conflicts.extend(result.conflicts)
            merged.unchanged += result.unchanged
            merged.failed += result.failed
        return merged


@dataclass
class RunSummary:
    """Result summary for one organizer run."""

    tracks_loaded: int = 0
    load_failures: int = 0
    moved: int = 0
    unchanged: int = 0
    failed: int = 0
    conflicts: int = 0
    conflicts_resolved: int = 0
    playlists_moved: int = 0
    strays_moved: int = 0
    directories_pruned: int = 0
    compressed: int = 0
