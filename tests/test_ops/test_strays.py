"""Tests for ops/strays.py -- carrying non-audio files along with moved tracks."""

from pathlib import Path

from music_organizer.models import MoveRecord
from music_organizer.ops.strays import relocate_all_strays, relocate_strays


def _file(path: Path, content: bytes = b"x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def _moved(root: Path, old: str, new: str) -> MoveRecord:
    """Simulate a track move that already happened: only the new file exists."""
    original = root / old
    original.parent.mkdir(parents=True, exist_ok=True)
    new_path = _file(root / new, b"audio")
    return MoveRecord(original_path=original, new_path=new_path)


class TestRelocateStrays:
    def test_moves_cover_and_removes_old_dir(self, tmp_path):
        record = _moved(tmp_path, "incoming/song.mp3", "Artist/Album/01. Song.mp3")
        _file(tmp_path / "incoming" / "cover.jpg", b"art")

        moved = relocate_strays(record, tmp_path)

        assert moved == 1
        assert (tmp_path / "Artist" / "Album" / "cover.jpg").read_bytes() == b"art"
        assert not (tmp_path / "incoming").exists()

    def test_audio_files_left_behind(self, tmp_path):
        record = _moved(tmp_path, "incoming/a.mp3", "Artist/Album/01. A.mp3")
        _file(tmp_path / "incoming" / "b.mp3")
        _file(tmp_path / "incoming" / "album.cue")

        moved = relocate_strays(record, tmp_path)

        assert moved == 1
        assert (tmp_path / "incoming" / "b.mp3").exists()
        assert (tmp_path / "Artist" / "Album" / "album.cue").exists()

    def test_subdirectory_mirrored(self, tmp_path):
        record = _moved(tmp_path, "incoming/a.mp3", "Artist/Album/01. A.mp3")
        _file(tmp_path / "incoming" / "Scans" / "front.jpg")
        _file(tmp_path / "incoming" / "Scans" / "inlay" / "back.jpg")

        moved = relocate_strays(record, tmp_path)

        assert moved == 2
        new_dir = tmp_path / "Artist" / "Album"
        assert (new_dir / "Scans" / "front.jpg").exists()
        assert (new_dir / "Scans" / "inlay" / "back.jpg").exists()
        assert not (tmp_path / "incoming").exists()

    def test_subdirectory_with_audio_kept(self, tmp_path):
        record = _moved(tmp_path, "incoming/a.mp3", "Artist/Album/01. A.mp3")
        _file(tmp_path / "incoming" / "CD2" / "b.flac")
        _file(tmp_path / "incoming" / "CD2" / "notes.txt")

        relocate_strays(record, tmp_path)

        assert (tmp_path / "incoming" / "CD2" / "b.flac").exists()
        assert (tmp_path / "Artist" / "Album" / "CD2" / "notes.txt").exists()

    def test_existing_file_overwritten(self, tmp_path):
        record = _moved(tmp_path, "incoming/a.mp3", "Artist/Album/01. A.mp3")
        _file(tmp_path / "incoming" / "cover.jpg", b"new")
        _file(tmp_path / "Artist" / "Album" / "cover.jpg", b"old")

        relocate_strays(record, tmp_path)

        assert (tmp_path / "Artist" / "Album" / "cover.jpg").read_bytes() == b"new"

    def test_root_is_never_swept(self, tmp_path):
        record = _moved(tmp_path, "song.mp3", "Artist/Album/01. Song.mp3")
        _file(tmp_path / "readme.txt")

        assert relocate_strays(record, tmp_path) == 0
        assert (tmp_path / "readme.txt").exists()

    def test_same_directory_is_noop(self, tmp_path):
        record = MoveRecord(
            tmp_path / "Artist" / "Album" / "song.mp3",
            _file(tmp_path / "Artist" / "Album" / "01. Song.mp3"),
        )
        _file(tmp_path / "Artist" / "Album" / "cover.jpg")

        assert relocate_strays(record, tmp_path) == 0
        assert (tmp_path / "Artist" / "Album" / "cover.jpg").exists()

    def test_missing_original_dir(self, tmp_path):
        record = MoveRecord(
            tmp_path / "gone" / "a.mp3",
            _file(tmp_path / "Artist" / "Album" / "01. A.mp3"),
        )
        assert relocate_strays(record, tmp_path) == 0

    def test_new_dir_inside_original_dir(self, tmp_path):
        record = _moved(tmp_path, "Artist/a.mp3", "Artist/Album/01. A.mp3")
        _file(tmp_path / "Artist" / "artist.jpg")

        moved = relocate_strays(record, tmp_path)

        assert moved == 1
        assert (tmp_path / "Artist" / "Album" / "artist.jpg").exists()
        assert not (tmp_path / "Artist" / "Album" / "Album").exists()
        assert (tmp_path / "Artist" / "Album" / "01. A.mp3").exists()

    def test_ignored_subdirectory_untouched(self, tmp_path):
        record = _moved(tmp_path, "incoming/a.mp3", "Artist/Album/01. A.mp3")
        _file(tmp_path / "incoming" / ".stversions" / "old.jpg")

        relocate_strays(record, tmp_path, ignore_directories={".stversions"})

        assert (tmp_path / "incoming" / ".stversions" / "old.jpg").exists()

    def test_protected_directory_kept(self, tmp_path):
        record = _moved(tmp_path, "slskd/a.mp3", "Artist/Album/01. A.mp3")

        relocate_strays(record, tmp_path, protected_directories={"slskd"})

        assert (tmp_path / "slskd").is_dir()


class TestRelocateAllStrays:
    def test_sums_counts(self, tmp_path):
        first = _moved(tmp_path, "in1/a.mp3", "A/X/01. A.mp3")
        second = _moved(tmp_path, "in2/b.mp3", "B/Y/01. B.mp3")
        _file(tmp_path / "in1" / "cover.jpg")
        _file(tmp_path / "in2" / "cover.jpg")
        _file(tmp_path / "in2" / "log.txt")

        assert relocate_all_strays([first, second], tmp_path) == 3

    def test_second_record_from_same_dir_is_noop(self, tmp_path):
        first = _moved(tmp_path, "in/a.mp3", "A/X/01. A.mp3")
        second = MoveRecord(tmp_path / "in" / "b.mp3", _file(tmp_path / "A" / "X" / "02. B.mp3"))
        _file(tmp_path / "in" / "cover.jpg")

        assert relocate_all_strays([first, second], tmp_path) == 1
        assert (tmp_path / "A" / "X" / "cover.jpg").exists()
