"""Tests for models.py -- records, enums, extension sets."""

import dataclasses
from pathlib import Path

import pytest

from music_organizer.models import (
    AUDIO_EXTENSIONS,
    LOSSLESS_EXTENSIONS,
    PLAYLIST_EXTENSIONS,
    AlbumResult,
    ConflictOutcome,
    MoveRecord,
    Track,
    TrackConflict,
)


class TestExtensions:
    def test_lossless_is_subset_of_audio(self):
        assert LOSSLESS_EXTENSIONS <= AUDIO_EXTENSIONS

    def test_playlists_are_not_audio(self):
        assert not PLAYLIST_EXTENSIONS & AUDIO_EXTENSIONS

    def test_common_formats(self):
        assert ".mp3" in AUDIO_EXTENSIONS
        assert ".flac" in LOSSLESS_EXTENSIONS
        assert ".m3u8" in PLAYLIST_EXTENSIONS


class TestConflictOutcome:
    def test_resolved(self):
        assert ConflictOutcome.REPLACED.resolved
        assert ConflictOutcome.DISCARDED.resolved
        assert not ConflictOutcome.KEPT_BOTH.resolved
        assert not ConflictOutcome.FAILED.resolved

    def test_values(self):
        assert ConflictOutcome("kept_both") is ConflictOutcome.KEPT_BOTH


class TestTrack:
    def test_frozen(self):
        track = Track(path=Path("/m/a.mp3"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            track.title = "x"  # type: ignore[misc]

    def test_defaults(self):
        track = Track(path=Path("/m/a.mp3"))
        assert track.bitrate == 0
        assert track.track_number is None
        assert track.album == ""


class TestTrackConflict:
    def test_identity_equality(self):
        track = Track(path=Path("/m/a.mp3"))
        a = TrackConflict(track, Path("/m/b.mp3"))
        b = TrackConflict(track, Path("/m/b.mp3"))
        assert a != b
        assert a == a


class TestMoveRecord:
    def test_directories(self):
        record = MoveRecord(Path("/in/x/a.mp3"), Path("/out/Artist/Album/01. a.mp3"))
        assert record.original_dir == Path("/in/x")
        assert record.new_dir == Path("/out/Artist/Album")


class TestAlbumResult:
    def test_merge(self):
        track = Track(path=Path("/m/a.mp3"))
        first = AlbumResult(
            moves=[MoveRecord(Path("/a"), Path("/b"))], unchanged=2, failed=1
        )
        second = AlbumResult(
            conflicts=[TrackConflict(track, Path("/c"))], unchanged=1
        )
        merged = AlbumResult.merge([first, second])
        assert len(merged.moves) == 1
        assert len(merged.conflicts) == 1
        assert merged.unchanged == 3
        assert merged.failed == 1

    def test_merge_empty(self):
        merged = AlbumResult.merge([])
        assert merged.moves == []
        assert merged.conflicts == []
