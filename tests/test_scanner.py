"""Tests for scanner.py -- discovery and classification."""

from pathlib import Path

from music_organizer.scanner import (
    find_all_files,
    find_lossless_files,
    is_audio_file,
    is_lossless_file,
    is_playlist_file,
    split_audio_and_playlists,
)


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\x00")
    return path


class TestClassification:
    def test_audio(self):
        assert is_audio_file(Path("a.mp3"))
        assert is_audio_file(Path("a.FLAC"))
        assert not is_audio_file(Path("cover.jpg"))

    def test_lossless(self):
        assert is_lossless_file(Path("a.wav"))
        assert not is_lossless_file(Path("a.mp3"))

    def test_playlist(self):
        assert is_playlist_file(Path("mix.m3u8"))
        assert not is_playlist_file(Path("a.mp3"))


class TestFindAllFiles:
    def test_recurses(self, tmp_path):
        a = _touch(tmp_path / "A" / "B" / "song.mp3")
        b = _touch(tmp_path / "cover.jpg")
        assert set(find_all_files(tmp_path)) == {a, b}

    def test_skips_hidden_dirs_and_files(self, tmp_path):
        _touch(tmp_path / ".hidden" / "song.mp3")
        _touch(tmp_path / ".DS_Store")
        keep = _touch(tmp_path / "Album" / "song.mp3")
        assert find_all_files(tmp_path) == [keep]

    def test_keeps_hidden_when_disabled(self, tmp_path):
        hidden = _touch(tmp_path / ".hidden" / "song.mp3")
        assert hidden in find_all_files(tmp_path, ignore_hidden=False)

    def test_skips_ignored_directories(self, tmp_path):
        _touch(tmp_path / "sync" / "stversions" / "song.mp3")
        keep = _touch(tmp_path / "sync" / "song.mp3")
        files = find_all_files(tmp_path, ignore_directories={"stversions"})
        assert files == [keep]


class TestSplit:
    def test_split_audio_and_playlists(self):
        files = [Path("a.mp3"), Path("b.m3u"), Path("c.jpg"), Path("d.flac")]
        audio, playlists = split_audio_and_playlists(files)
        assert audio == [Path("a.mp3"), Path("d.flac")]
        assert playlists == [Path("b.m3u")]


class TestFindLossless:
    def test_only_lossless(self, tmp_path):
        flac = _touch(tmp_path / "A" / "a.flac")
        _touch(tmp_path / "A" / "b.mp3")
        wav = _touch(tmp_path / "B" / "c.wav")
        assert set(find_lossless_files(tmp_path)) == {flac, wav}
